"""
Points builder — declarative registration, compiled into a Resolver.

Instead of a global registry:
    points()
        .on(Multiply, int, multiply)
        .on(Sort, AnyType, sort)
        .on(AnySignature, Device, translating)
        .compile()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from collections import Counter
from collections.abc import Iterator

from tagchain._types import (
    ExactSignature,
    ExactType,
    Shape,
    SignatureSelector,
    TypeSelector,
    signature_selector,
    type_selector,
)
from tagchain._errors import AmbiguousCustomizationPoint
from tagchain._handler import Handler, HandlerFunc, build_handler
from tagchain._policy import Check, Policy
from tagchain._resolver import Resolver

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Declaration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Declaration:
    """Registration: (signature selector, type selector) → callable."""
    signature: SignatureSelector
    types: TypeSelector
    fn: HandlerFunc
    shape: Shape = Shape.INFERRED


# ═══════════════════════════════════════════════════════════════════════════════
# Ambiguity Check
# ═══════════════════════════════════════════════════════════════════════════════


def _clashes(handlers: tuple[Handler, ...]) -> Iterator[tuple[Handler, Handler]]:
    """Pairs with equal selectors that accept a common call shape."""
    for i, a in enumerate(handlers):
        for b in handlers[i + 1 :]:
            if a.signature == b.signature and a.types == b.types and a.overlaps(b):
                yield a, b


def _check_ambiguity(handlers: tuple[Handler, ...]) -> None:
    for a, b in _clashes(handlers):
        raise AmbiguousCustomizationPoint(
            tag=a.signature.tag if isinstance(a.signature, ExactSignature) else None,
            value_type=a.types.of if isinstance(a.types, ExactType) else None,
            tier=a.tier,
            candidates=(a.name, b.name),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Points Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Points:
    """
    Immutable builder of handler declarations.

    Example:
        algs = points().on(Sort, AnyType, sort).on(Unique, AnyType, unique)

        resolver = (
            points()
            .on(Add, int, add)
            .include(algs)
            .policy(Policy().with_cache(False))
            .compile()
        )
    """
    _items: tuple[Declaration, ...] = ()
    _policy: Policy = Policy()

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return self._items

    def on(
        self,
        signature: object,
        type_: object,
        fn: HandlerFunc,
        *,
        shape: Shape = Shape.INFERRED,
    ) -> Points:
        """
        Declare a handler.

        Args:
            signature: a Tag (exact) or AnySignature
            type_: a class (exact) or AnyType
            fn: the handler callable
            shape: override the shape read from the return annotation
        """
        if not callable(fn):
            raise TypeError(f"Handler must be callable, got {fn!r}")
        decl = Declaration(
            signature=signature_selector(signature),
            types=type_selector(type_),
            fn=fn,
            shape=shape,
        )
        # Surface unusable signatures at declaration time
        build_handler(decl.signature, decl.types, fn, shape, self._policy.untyped_shape)
        return Points(_items=(*self._items, decl), _policy=self._policy)

    def include(self, other: Points) -> Points:
        """Merge another set of declarations (keeps this builder's policy)."""
        return Points(_items=(*self._items, *other._items), _policy=self._policy)

    def policy(self, p: Policy) -> Points:
        """Set resolution policy."""
        return Points(_items=self._items, _policy=p)

    def compile(self) -> Resolver:
        """
        Build the resolver.

        With Check.COMPILE, two declarations with equal selectors that can
        accept the same positional call shape fail here, before any call.
        """
        handlers = tuple(
            build_handler(d.signature, d.types, d.fn, d.shape, self._policy.untyped_shape)
            for d in self._items
        )
        if self._policy.ambiguity_check is Check.COMPILE:
            _check_ambiguity(handlers)

        if logger.isEnabledFor(logging.DEBUG):
            tiers = Counter(h.tier.name for h in handlers)
            logger.debug("Compiled %d handlers %s", len(handlers), dict(tiers))
        return Resolver(_handlers=handlers, _policy=self._policy)


def points() -> Points:
    """Create builder: points().on(...).compile()"""
    return Points()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Declaration", "Points", "points")
