"""
Planned chains — resolve every link before anything runs.

Plan once, run many times:

    pipeline = resolver.chain().apply(Add, 2).apply(Add, 3).plan(int)

    pipeline.run(5).unwrapped  # 10
    pipeline.run(9).unwrapped  # 14

A link that cannot resolve fails plan(), so no earlier link has run.
Planning follows the static result type of each handler; links after a
handler whose result type is unknown are resolved when they run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from tagchain._types import Ref, Shape, TagRef
from tagchain._handler import Handler
from tagchain._wrapper import Wrapper, settle

if TYPE_CHECKING:
    from tagchain._resolver import Resolver

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Link / Step
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Link:
    """One recorded apply(tag, *args, **kwargs)."""
    tag: TagRef
    args: tuple[Any, ...]
    kwargs: tuple[tuple[str, Any], ...]

    @property
    def keywords(self) -> dict[str, Any]:
        return dict(self.kwargs)


@dataclass(frozen=True, slots=True)
class Step:
    """A planned link. handler is None when resolution waits for run time."""
    link: Link
    value_type: type[Any] | None
    handler: Handler | None

    @property
    def deferred(self) -> bool:
        return self.handler is None


def _next_type(handler: Handler, current: type[Any]) -> type[Any] | None:
    match handler.shape:
        case Shape.MUTATING:
            return current
        case Shape.TRANSFORMING:
            return handler.returns
        case _:
            return None


# ═══════════════════════════════════════════════════════════════════════════════
# Plan — Pre-Resolved Chain
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Plan[T]:
    """Resolved chain for one starting type."""

    _resolver: Resolver
    value_type: type[T]
    steps: tuple[Step, ...]
    result_type: type[Any] | None

    @property
    def is_static(self) -> bool:
        """True when every link was resolved ahead of time."""
        return all(not s.deferred for s in self.steps)

    def run(self, value: T | Ref[T]) -> Wrapper[Any]:
        """
        Execute the planned links on a value (or borrowed Ref).

        A pre-resolved step is re-resolved only if the held type at that
        point differs from the planned one.
        """
        wrapper = self._resolver.wrap(value)
        if wrapper.held_type is not self.value_type:
            raise TypeError(
                f"Plan expects {self.value_type.__name__}, got {wrapper.held_type.__name__}"
            )

        slot: Ref[Any] = wrapper.ref
        borrowed = wrapper.borrowed
        for step in self.steps:
            link = step.link
            kwargs = link.keywords
            if step.handler is not None and type(slot.value) is step.value_type:
                result, shape = self._resolver.run_handler(
                    step.handler, link.tag, slot, link.args, kwargs
                )
                new_slot = settle(slot, result, shape)
            else:
                new_slot = self._resolver.apply_to(link.tag, slot, link.args, kwargs)
            if new_slot is not slot:
                borrowed = False
            slot = new_slot

        return Wrapper(_resolver=self._resolver, _slot=slot, _borrowed=borrowed)

    def __call__(self, value: T | Ref[T]) -> Wrapper[Any]:
        return self.run(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Chain — Link Recorder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Chain:
    """
    Immutable recorder of links. Nothing resolves until plan().

    Example:
        dedupe = resolver.chain().apply(Sort).apply(Unique)
        dedupe.run([3, 1, 3]).unwrapped  # [1, 3]
    """

    _resolver: Resolver
    _links: tuple[Link, ...]

    @property
    def links(self) -> tuple[Link, ...]:
        return self._links

    def apply(self, tag: TagRef, *args: Any, **kwargs: Any) -> Chain:
        """Record one more link."""
        link = Link(tag=tag, args=args, kwargs=tuple(kwargs.items()))
        return Chain(_resolver=self._resolver, _links=(*self._links, link))

    def plan[T](self, value_type: type[T]) -> Plan[T]:
        """
        Resolve the links for a starting type.

        Raises NoApplicableCustomizationPoint / AmbiguousCustomizationPoint
        before any handler has run.
        """
        steps: list[Step] = []
        current: type[Any] | None = value_type
        for link in self._links:
            if current is None:
                steps.append(Step(link=link, value_type=None, handler=None))
                continue
            handler = self._resolver.resolve(link.tag, current, link.args, link.keywords)
            steps.append(Step(link=link, value_type=current, handler=handler))
            current = _next_type(handler, current)

        plan = Plan(
            _resolver=self._resolver,
            value_type=value_type,
            steps=tuple(steps),
            result_type=current,
        )
        logger.debug(
            "Planned %d links on %s (%d deferred)",
            len(steps),
            value_type.__name__,
            sum(1 for s in steps if s.deferred),
        )
        return plan

    def run(self, value: object) -> Wrapper[Any]:
        """Plan for the value's type and run."""
        held = value.value if isinstance(value, Ref) else value
        return self.plan(type(held)).run(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Link", "Step", "Plan", "Chain")
