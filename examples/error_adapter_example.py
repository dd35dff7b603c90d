"""
Error adapter — out-parameter error slots become exceptions.

Handlers report failure through a trailing ErrorSlot. Including
error_adapter(Device) lets callers omit the slot: the adapter supplies one
and raises OperationFailed when it comes back populated.
"""

from kungfu import Ok, Error

from tagchain import OperationFailed, points
from tagchain import adapter as A
from examples._infra import banner, Device, OpenPort, Reset, open_port, reset


resolver = (
    points()
    .on(OpenPort, Device, open_port)
    .on(Reset, Device, reset)
    .include(A.error_adapter(Device))
    .compile()
)


def main() -> None:
    banner("Error Adapter: ErrorSlot → OperationFailed")

    device = Device("eth", [])

    print("\n1. Successful chain:")
    resolver.wrap(device).apply(OpenPort, 1).apply(OpenPort, 3)
    print(f"   → open ports: {device.open_ports}")

    print("\n2. Failing link aborts the chain:")
    try:
        resolver.wrap(device).apply(OpenPort, 4).apply(OpenPort, 2).apply(OpenPort, 5)
    except OperationFailed as e:
        print(f"   → {e}")
    print(f"   → open ports (not rolled back): {device.open_ports}")

    print("\n3. Explicit slot, no exception:")
    err = A.ErrorSlot()
    resolver.call(Reset, device, True, err)
    print(f"   → {err!r}")

    print("\n4. As a Result:")
    match A.translate_errors(lambda slot: reset(device, False, slot), tag=Reset):
        case Ok(_):
            print(f"   → reset, open ports: {device.open_ports}")
        case Error(failure):
            print(f"   → {failure}")


if __name__ == "__main__":
    main()
