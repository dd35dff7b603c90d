"""
Handlers — declared implementations of a tag, plus the per-call context.

A handler is a plain callable. Its parameters say how it wants to be called:

    def multiply(ref: Ref[int], factor: int) -> None:        # mutates the slot
        ref.value *= factor

    def add(value: int, amount: int) -> int:                 # new value
        return value + amount

    def get(call: Call[Get], value: tuple) -> object:        # reads tag params
        return value[call.tag.index]

    def translate(call: Call[Tag], value: object, *args):   # wraps the next handler
        return call.proceed(*args)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING, get_origin, get_type_hints
from collections.abc import Callable

from tagchain._types import (
    Tag,
    TagRef,
    Ref,
    Shape,
    Tier,
    SignatureSelector,
    TypeSelector,
    tag_type,
    tier_of,
)

if TYPE_CHECKING:
    from tagchain._resolver import Resolver

type HandlerFunc = Callable[..., Any]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Call — Per-Invocation Context
# ═══════════════════════════════════════════════════════════════════════════════


class Call[T: Tag]:
    """
    Context handed to handlers whose first parameter is annotated `Call`.

    Carries the tag exactly as supplied (so parameterised tags expose their
    fields) and can proceed to the next-most-specific handler.
    """

    __slots__ = ("tag", "value_type", "handler", "resolver", "_slot", "_path", "inner_shape")

    def __init__(
        self,
        tag: T | type[T],
        value_type: type[Any],
        handler: Handler,
        resolver: Resolver,
        slot: Ref[Any],
        path: frozenset[Handler],
    ) -> None:
        self.tag = tag
        self.value_type = value_type
        self.handler = handler
        self.resolver = resolver
        self._slot = slot
        self._path = path
        self.inner_shape: Shape | None = None

    def proceed(self, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the next-most-specific handler on the same value.

        Handlers already on this call path are excluded. Returns the inner
        handler's result, or None when it mutated in place.
        """
        inner = self.resolver.select(
            self.tag,
            self.value_type,
            args,
            kwargs,
            exclude=self._path,
        )
        result, shape = self.resolver.run_handler(
            inner, self.tag, self._slot, args, kwargs, self._path
        )
        self.inner_shape = shape
        return None if shape is Shape.MUTATING else result

    def __repr__(self) -> str:
        return f"Call({self.tag!r}, {self.value_type.__name__}, {self.handler.name})"


# ═══════════════════════════════════════════════════════════════════════════════
# Declaration Analysis
# ═══════════════════════════════════════════════════════════════════════════════


def _hints(fn: HandlerFunc) -> dict[str, Any]:
    # Callable objects, partials and unresolvable forward refs
    try:
        return get_type_hints(fn)
    except (NameError, TypeError):
        return {}


def _is_marker(annotation: object, marker: type[Any]) -> bool:
    if annotation is marker or get_origin(annotation) is marker:
        return True
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head == marker.__name__ or head.endswith("." + marker.__name__)
    return False


def _is_none(annotation: object) -> bool:
    return annotation is None or annotation is type(None) or annotation == "None"


def _result_type(annotation: object) -> type[Any] | None:
    if isinstance(annotation, type):
        return annotation
    origin = get_origin(annotation)
    return origin if isinstance(origin, type) else None


def _keywords(
    params: tuple[inspect.Parameter, ...],
    n: int,
) -> tuple[frozenset[str], frozenset[str] | None] | None:
    """
    Keywords a call with `n` positional arguments after the held value
    must pass, and may pass (None: any). None when `n` cannot bind at all.
    """
    rest = params[1:]
    positional = [p for p in rest if p.kind in _POSITIONAL]
    varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)
    if n > len(positional) and not varargs:
        return None

    required: set[str] = set()
    allowed: set[str] = set()
    for p in positional[n:]:
        if p.kind is inspect.Parameter.POSITIONAL_ONLY:
            if p.default is p.empty:
                return None
            continue
        allowed.add(p.name)
        if p.default is p.empty:
            required.add(p.name)
    for p in rest:
        if p.kind is inspect.Parameter.KEYWORD_ONLY:
            allowed.add(p.name)
            if p.default is p.empty:
                required.add(p.name)

    varkw = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in rest)
    return frozenset(required), (None if varkw else frozenset(allowed))


# ═══════════════════════════════════════════════════════════════════════════════
# Handler
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, eq=False)
class Handler:
    """
    Compiled declaration: (signature selector, type selector, callable).

    Compared by identity — the same function declared twice is two handlers.
    """
    signature: SignatureSelector
    types: TypeSelector
    fn: HandlerFunc
    shape: Shape
    takes_call: bool
    takes_ref: bool
    returns: type[Any] | None
    name: str
    _params: inspect.Signature = field(repr=False)

    @property
    def tier(self) -> Tier:
        return tier_of(self.types, self.signature)

    def matches(self, tag: TagRef, value_type: type[Any]) -> bool:
        return self.signature.matches(tag_type(tag)) and self.types.matches(value_type)

    def accepts(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> bool:
        """Can the callable bind (value, *args, **kwargs)?"""
        try:
            self._params.bind(None, *args, **kwargs)
        except TypeError:
            return False
        return True

    def overlaps(self, other: Handler) -> bool:
        """Is there a call shape (positional count and keywords) both accept?"""
        ours = tuple(self._params.parameters.values())
        theirs = tuple(other._params.parameters.values())
        # Past the longer positional list only *args can bind, and nothing changes
        for n in range(max(len(ours), len(theirs)) + 1):
            a, b = _keywords(ours, n), _keywords(theirs, n)
            if a is None or b is None:
                continue
            needed = a[0] | b[0]
            if all(allowed is None or needed <= allowed for allowed in (a[1], b[1])):
                return True
        return False


def build_handler(
    signature: SignatureSelector,
    types: TypeSelector,
    fn: HandlerFunc,
    shape: Shape,
    untyped_shape: Shape,
) -> Handler:
    """
    Analyse a declaration.

    - leading `Call` parameter → receives the call context
    - next parameter → receives the held value (the slot itself if `Ref`)
    - return annotation → shape and static result type
    """
    name = getattr(fn, "__qualname__", None) or repr(fn)
    try:
        sig = inspect.signature(fn)
    except ValueError as exc:
        raise TypeError(f"Cannot inspect handler {name}: {exc}") from exc

    hints = _hints(fn)
    params = list(sig.parameters.values())

    def annotation(p: inspect.Parameter) -> object:
        return hints.get(p.name, p.annotation)

    takes_call = bool(params) and _is_marker(annotation(params[0]), Call)
    if takes_call:
        params = params[1:]

    if not params or params[0].kind not in (*_POSITIONAL, inspect.Parameter.VAR_POSITIONAL):
        raise TypeError(f"Handler {name} must accept the held value positionally")
    takes_ref = _is_marker(annotation(params[0]), Ref)

    ret = hints.get("return", sig.return_annotation)
    returns: type[Any] | None = None
    if shape is Shape.INFERRED:
        if ret is sig.empty:
            # Unannotated around handlers adopt the shape of what they proceed to
            shape = Shape.INFERRED if takes_call else untyped_shape
        elif _is_none(ret):
            shape = Shape.MUTATING
        else:
            shape = Shape.TRANSFORMING
    if shape is Shape.TRANSFORMING and ret is not sig.empty:
        returns = _result_type(ret)

    return Handler(
        signature=signature,
        types=types,
        fn=fn,
        shape=shape,
        takes_call=takes_call,
        takes_ref=takes_ref,
        returns=returns,
        name=name,
        _params=sig.replace(parameters=params),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("HandlerFunc", "Call", "Handler", "build_handler")
