"""
Error translation — out-parameter errors to Result, Result to raise.
"""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from kungfu import Result, Ok, Error

from tagchain._types import AnySignature, Tag, TagRef, tag_type
from tagchain._errors import OperationFailed
from tagchain._handler import Call
from tagchain._builder import Points, points
from tagchain.adapter._slot import ErrorSlot

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# translate_errors() — Slot → Result
# ═══════════════════════════════════════════════════════════════════════════════


def translate_errors[T](
    call: Callable[[ErrorSlot], T],
    *,
    tag: TagRef | None = None,
) -> Result[T, OperationFailed]:
    """
    Run `call` with a fresh ErrorSlot and report through a Result.

    A populated slot discards whatever the call returned.

    Example:
        result = translate_errors(lambda err: open_port(device, 2, err), tag=OpenPort)
        match result:
            case Ok(value): ...
            case Error(failure): print(failure.detail)
    """
    slot = ErrorSlot()
    value = call(slot)
    if slot:
        failure = OperationFailed(
            tag=tag_type(tag) if tag is not None else None,
            detail=slot.detail,
        )
        logger.debug("Translated error slot: %s", failure)
        return Error(failure)
    return Ok(value)


# ═══════════════════════════════════════════════════════════════════════════════
# translating() — The Error Adapter Handler
# ═══════════════════════════════════════════════════════════════════════════════


def translating(call: Call[Tag], value: object, *args: Any, **kwargs: Any):
    """
    Proceed with an ErrorSlot appended; raise OperationFailed if it was set.

    Otherwise the inner result passes through unchanged, and an inner
    mutating handler stays a mutation (no value).
    """
    outcome = translate_errors(
        lambda slot: call.proceed(*args, slot, **kwargs),
        tag=call.tag,
    )
    match outcome:
        case Ok(result):
            return result
        case Error(failure):
            raise failure


# ═══════════════════════════════════════════════════════════════════════════════
# error_adapter() — Declarations
# ═══════════════════════════════════════════════════════════════════════════════


def error_adapter(*types: type[Any]) -> Points:
    """
    Declare the error adapter for every operation on the given types.

    Example:
        resolver = (
            points()
            .on(OpenPort, Device, open_port)
            .include(error_adapter(Device))
            .compile()
        )
        resolver.wrap(device).apply(OpenPort, 2)  # raises OperationFailed
    """
    decls = points()
    for typ in types:
        decls = decls.on(AnySignature, typ, translating)
    return decls


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("translate_errors", "translating", "error_adapter")
