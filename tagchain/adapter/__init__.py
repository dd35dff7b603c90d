"""
Adapter — out-parameter error slots translated into aborting failures.

    from tagchain import adapter as A

    def open_port(device: Device, port: int, err: A.ErrorSlot) -> None:
        if port == 2:
            err.set("function not supported")

    resolver = (
        points()
        .on(OpenPort, Device, open_port)
        .include(A.error_adapter(Device))
        .compile()
    )
    resolver.wrap(device).apply(OpenPort, 2)  # raises OperationFailed
"""

from tagchain.adapter._slot import ErrorSlot
from tagchain.adapter._translate import (
    translate_errors,
    translating,
    error_adapter,
)

__all__ = (
    "ErrorSlot",
    "translate_errors",
    "translating",
    "error_adapter",
)
