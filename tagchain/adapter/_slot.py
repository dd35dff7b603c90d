"""
ErrorSlot — out-parameter error reporting.
"""

from __future__ import annotations


class ErrorSlot:
    """
    Transient error output for one call.

    Handlers that can fail take it as their last parameter and populate it
    instead of raising:

        def open_port(device: Device, port: int, err: ErrorSlot) -> None:
            if port == 2:
                err.set("function not supported")

    Empty slots are falsy.
    """

    __slots__ = ("_detail",)

    def __init__(self) -> None:
        self._detail: object | None = None

    @property
    def detail(self) -> object | None:
        return self._detail

    def set(self, detail: object) -> None:
        if detail is None:
            raise ValueError("Error detail cannot be None")
        self._detail = detail

    def clear(self) -> None:
        self._detail = None

    def __bool__(self) -> bool:
        return self._detail is not None

    def __repr__(self) -> str:
        if self._detail is None:
            return "ErrorSlot(empty)"
        return f"ErrorSlot({self._detail!r})"


__all__ = ("ErrorSlot",)
