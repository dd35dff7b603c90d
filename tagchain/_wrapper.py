"""
Wrapper — eager fluent chaining over a single value slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from tagchain._types import Ref, Shape, TagRef

if TYPE_CHECKING:
    from tagchain._resolver import Resolver


def settle[T](slot: Ref[T], result: object, shape: Shape) -> Ref[Any]:
    """
    Decide which slot holds the value after a call.

    Mutating calls and handlers returning the slot itself keep it. Inferred
    handlers also keep it when they return None or the held value. Anything
    else, including every other transforming result, becomes a new owned slot.
    """
    if shape is Shape.MUTATING or result is slot:
        return slot
    if shape is Shape.INFERRED and (result is None or result is slot.value):
        return slot
    return Ref(result)


@dataclass(slots=True, frozen=True)
class Wrapper[T]:
    """
    Holds the current value of a chain.

    Each apply() resolves against the held type, invokes at once and returns
    the wrapper for the next link:

        resolver.wrap([4, 4, 1, 2]).apply(Sort).apply(Unique).unwrapped

    A borrowed wrapper (made from a caller's Ref) keeps aliasing that Ref for
    as long as handlers mutate in place. A transforming handler's result
    lands in a new owned slot; the caller's Ref is left as it was.
    """

    _resolver: Resolver
    _slot: Ref[T]
    _borrowed: bool

    def apply(self, tag: TagRef, *args: Any, **kwargs: Any) -> Wrapper[Any]:
        """Apply one operation and continue the chain."""
        slot = self._resolver.apply_to(tag, self._slot, args, kwargs)
        if slot is self._slot:
            return Wrapper(_resolver=self._resolver, _slot=slot, _borrowed=self._borrowed)
        return Wrapper(_resolver=self._resolver, _slot=slot, _borrowed=False)

    @property
    def unwrapped(self) -> T:
        """The held value."""
        return self._slot.value

    @property
    def ref(self) -> Ref[T]:
        return self._slot

    @property
    def held_type(self) -> type[T]:
        return type(self._slot.value)

    @property
    def borrowed(self) -> bool:
        return self._borrowed

    def __repr__(self) -> str:
        kind = "borrowed" if self._borrowed else "owned"
        return f"Wrapper({self._slot.value!r}, {kind})"


__all__ = ("Wrapper", "settle")
