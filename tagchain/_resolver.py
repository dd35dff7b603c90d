"""
Resolver — picks exactly one handler for (tag, value type, call shape).

Ranking, first non-empty tier wins:

    EXACT      exact type + exact signature
    TYPE       exact type + any signature
    SIGNATURE  any type   + exact signature
    UNIVERSAL  any type   + any signature

Two winners in the same tier → AmbiguousCustomizationPoint.
No viable handler at all    → NoApplicableCustomizationPoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from collections.abc import Sequence

from tagchain._types import Ref, Shape, TagRef, Tag, Tier, tag_type
from tagchain._errors import AmbiguousCustomizationPoint, NoApplicableCustomizationPoint
from tagchain._handler import Call, Handler
from tagchain._policy import Policy
from tagchain._wrapper import Wrapper, settle
from tagchain._chain import Chain

logger = logging.getLogger(__name__)

type CacheKey = tuple[type[Tag], type[Any], int, frozenset[str], frozenset[Handler]]

_NO_KWARGS: dict[str, Any] = {}

# ═══════════════════════════════════════════════════════════════════════════════
# Ranking
# ═══════════════════════════════════════════════════════════════════════════════


def rank(viable: Sequence[Handler]) -> tuple[Tier, tuple[Handler, ...]]:
    """Most specific non-empty tier and every viable handler in it."""
    best = min(h.tier for h in viable)
    return best, tuple(h for h in viable if h.tier == best)


# ═══════════════════════════════════════════════════════════════════════════════
# Resolver
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class Resolver:
    """
    Compiled set of visible handlers. Built by Points.compile().

    Example:
        resolver = points().on(Add, int, add).compile()

        resolver.wrap(5).apply(Add, 2).apply(Add, 3).unwrapped  # 10
        resolver.call(Add, 5, 2)                                # 7
    """
    _handlers: tuple[Handler, ...]
    _policy: Policy = Policy()
    _cache: dict[CacheKey, Handler] = field(default_factory=dict)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    @property
    def policy(self) -> Policy:
        return self._policy

    # ── Resolution ────────────────────────────────────────────────────────────

    def resolve(
        self,
        tag: TagRef,
        value_type: type[Any],
        args: tuple[Any, ...] = (),
        kwargs: dict[str, Any] | None = None,
    ) -> Handler:
        """
        Resolve without invoking.

        Lets callers validate a call shape before running anything.
        """
        return self.select(tag, value_type, args, kwargs or _NO_KWARGS)

    def select(
        self,
        tag: TagRef,
        value_type: type[Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        *,
        exclude: frozenset[Handler] = frozenset(),
    ) -> Handler:
        """Rank viable handlers, skipping `exclude` (the current around-path)."""
        tag_cls = tag_type(tag)
        key: CacheKey = (tag_cls, value_type, len(args), frozenset(kwargs), exclude)
        if self._policy.cache_resolutions:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        viable = [
            h
            for h in self._handlers
            if h not in exclude and h.matches(tag_cls, value_type) and h.accepts(args, kwargs)
        ]
        if not viable:
            raise NoApplicableCustomizationPoint(
                tag=tag_cls,
                value_type=value_type,
                arity=len(args),
                keywords=tuple(sorted(kwargs)),
            )

        best, winners = rank(viable)
        if len(winners) > 1:
            raise AmbiguousCustomizationPoint(
                tag=tag_cls,
                value_type=value_type,
                tier=best,
                candidates=tuple(h.name for h in winners),
            )

        handler = winners[0]
        logger.debug(
            "Resolved %s on %s to %s (tier %s)",
            tag_cls.__name__,
            value_type.__name__,
            handler.name,
            best.name,
        )
        if self._policy.cache_resolutions:
            self._cache[key] = handler
        return handler

    # ── Invocation ────────────────────────────────────────────────────────────

    def run_handler(
        self,
        handler: Handler,
        tag: TagRef,
        slot: Ref[Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        path: frozenset[Handler] = frozenset(),
    ) -> tuple[Any, Shape]:
        """
        Invoke one handler on a slot.

        Returns the raw result and the effective shape: an inferred around
        handler that proceeded takes the shape of the handler it reached.
        """
        call: Call[Any] | None = None
        if handler.takes_call:
            call = Call(tag, type(slot.value), handler, self, slot, path | {handler})

        receiver = slot if handler.takes_ref else slot.value
        if call is not None:
            result = handler.fn(call, receiver, *args, **kwargs)
        else:
            result = handler.fn(receiver, *args, **kwargs)

        shape = handler.shape
        if call is not None and shape is Shape.INFERRED and call.inner_shape is not None:
            shape = call.inner_shape
        return result, shape

    def apply_to(
        self,
        tag: TagRef,
        slot: Ref[Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ref[Any]:
        """Resolve against the slot's held type, invoke, settle the slot."""
        handler = self.select(tag, type(slot.value), args, kwargs)
        result, shape = self.run_handler(handler, tag, slot, args, kwargs)
        return settle(slot, result, shape)

    def call(self, tag: TagRef, value: object, *args: Any, **kwargs: Any) -> Any:
        """
        Direct customization-point call, no wrapper.

        Used by handlers that re-dispatch, e.g. calling tag F per element.
        Passing a Ref lets mutating handlers reach the caller's slot.
        """
        slot = value if isinstance(value, Ref) else Ref(value)
        handler = self.select(tag, type(slot.value), args, kwargs)
        result, shape = self.run_handler(handler, tag, slot, args, kwargs)
        return None if shape is Shape.MUTATING else result

    # ── Entry Points ──────────────────────────────────────────────────────────

    def wrap[T](self, value: T | Ref[T]) -> Wrapper[T]:
        """
        Start an eager chain.

            resolver.wrap(values)      # owns a fresh slot
            resolver.wrap(Ref(5))      # borrows the caller's slot
        """
        if isinstance(value, Ref):
            return Wrapper(_resolver=self, _slot=value, _borrowed=True)
        return Wrapper(_resolver=self, _slot=Ref(value), _borrowed=False)

    def chain(self) -> Chain:
        """Start a planned chain (resolved before it runs)."""
        return Chain(_resolver=self, _links=())


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Resolver", "rank")
