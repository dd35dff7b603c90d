"""Tests for the out-parameter error adapter."""

from __future__ import annotations

import pytest
from kungfu import Error, Ok

from tagchain import (
    AmbiguousCustomizationPoint,
    NoApplicableCustomizationPoint,
    OperationFailed,
    Ref,
    Tag,
    Tier,
    explain,
    points,
)
from tagchain.adapter import ErrorSlot, error_adapter, translate_errors


class Dummy:
    def __init__(self) -> None:
        self.log: list[str] = []


class Operation1(Tag):
    pass


class Operation2(Tag):
    pass


class Rename(Tag):
    pass


class Missing(Tag):
    pass


def operation1(d: Dummy, i: int, err: ErrorSlot) -> Dummy:
    d.log.append(f"operation1 {i}")
    if i == 2:
        err.set("function not supported")
    return d


def operation2(d: Dummy, i: int, j: int, err: ErrorSlot) -> None:
    d.log.append(f"operation2 {i} {j}")
    if j == 2:
        err.set("function not supported")


def rename(d: Dummy, name: str, err: ErrorSlot) -> str:
    if not name:
        err.set("empty name")
    return name


RESOLVER = (
    points()
    .on(Operation1, Dummy, operation1)
    .on(Operation2, Dummy, operation2)
    .on(Rename, Dummy, rename)
    .include(error_adapter(Dummy))
    .compile()
)


# ---------------------------------------------------------------------------
# ErrorSlot
# ---------------------------------------------------------------------------


def test_error_slot_starts_empty() -> None:
    slot = ErrorSlot()
    assert not slot
    assert slot.detail is None
    assert repr(slot) == "ErrorSlot(empty)"


def test_error_slot_set_and_clear() -> None:
    slot = ErrorSlot()
    slot.set("boom")
    assert slot
    assert slot.detail == "boom"
    assert repr(slot) == "ErrorSlot('boom')"
    slot.clear()
    assert not slot


def test_error_slot_rejects_none() -> None:
    with pytest.raises(ValueError):
        ErrorSlot().set(None)


# ---------------------------------------------------------------------------
# translate_errors
# ---------------------------------------------------------------------------


def test_translate_errors_ok() -> None:
    match translate_errors(lambda err: 42, tag=Rename):
        case Ok(value):
            assert value == 42
        case Error(failure):
            pytest.fail(f"unexpected failure {failure}")


def test_translate_errors_discards_the_result_on_failure() -> None:
    def failing(err: ErrorSlot) -> int:
        err.set("nope")
        return 42

    match translate_errors(failing, tag=Rename):
        case Ok(value):
            pytest.fail(f"unexpected value {value}")
        case Error(failure):
            assert failure.tag is Rename
            assert failure.detail == "nope"


def test_translate_errors_without_a_tag() -> None:
    def failing(err: ErrorSlot) -> None:
        err.set(7)

    match translate_errors(failing):
        case Error(failure):
            assert failure.tag is None
            assert str(failure) == "<any> failed: 7"
        case Ok(_):
            pytest.fail("expected a failure")


# ---------------------------------------------------------------------------
# Adapter in chains
# ---------------------------------------------------------------------------


def test_failing_operation_raises() -> None:
    d = Dummy()
    with pytest.raises(OperationFailed) as exc:
        RESOLVER.wrap(d).apply(Operation2, 2, 2)
    assert exc.value.tag is Operation2
    assert exc.value.detail == "function not supported"
    assert "Operation2 failed" in str(exc.value)


def test_successful_operations_chain() -> None:
    d = Dummy()
    wrapped = RESOLVER.wrap(d).apply(Operation1, 1).apply(Operation2, 1, 3)
    assert wrapped.unwrapped is d
    assert d.log == ["operation1 1", "operation2 1 3"]


def test_mutating_inner_keeps_the_slot() -> None:
    d = Dummy()
    first = RESOLVER.wrap(d)
    second = first.apply(Operation2, 1, 1)
    assert second.ref is first.ref


def test_transforming_inner_result_passes_through() -> None:
    wrapped = RESOLVER.wrap(Dummy()).apply(Rename, "port-1")
    assert wrapped.unwrapped == "port-1"
    assert wrapped.held_type is str


def test_failure_aborts_later_links_without_rollback() -> None:
    d = Dummy()
    with pytest.raises(OperationFailed):
        RESOLVER.wrap(d).apply(Operation2, 1, 1).apply(Operation1, 2).apply(Operation2, 3, 3)
    assert d.log == ["operation2 1 1", "operation1 2"]


def test_direct_call_is_translated_too() -> None:
    with pytest.raises(OperationFailed):
        RESOLVER.call(Rename, Dummy(), "")
    assert RESOLVER.call(Rename, Dummy(), "ok") == "ok"


def test_explicit_error_slot_bypasses_the_adapter() -> None:
    slot = ErrorSlot()
    d = Dummy()
    # The exact declaration is viable with the slot supplied, so it wins
    assert RESOLVER.call(Operation2, d, 2, 2, slot) is None
    assert slot.detail == "function not supported"


def test_adapter_sits_in_the_type_tier() -> None:
    candidates = explain(RESOLVER, Operation2, Dummy, 2, 2)
    chosen = [c for c in candidates if c.chosen]
    assert len(chosen) == 1
    assert chosen[0].tier is Tier.TYPE
    assert chosen[0].handler == "translating"


def test_adapter_with_nothing_to_proceed_to() -> None:
    with pytest.raises(NoApplicableCustomizationPoint) as exc:
        RESOLVER.wrap(Dummy()).apply(Missing)
    # The adapter's appended slot counts toward the inner call shape
    assert exc.value.arity == 1


def test_adapter_works_on_a_borrowed_ref() -> None:
    slot = Ref(Dummy())
    wrapped = RESOLVER.wrap(slot).apply(Operation2, 1, 1)
    assert wrapped.borrowed
    assert wrapped.ref is slot


def test_adapter_declared_twice_is_ambiguous() -> None:
    with pytest.raises(AmbiguousCustomizationPoint):
        points().include(error_adapter(Dummy)).include(error_adapter(Dummy)).compile()


def test_adapter_covers_several_types() -> None:
    class Widget:
        pass

    def poke(w: Widget, err: ErrorSlot) -> None:
        err.set("stuck")

    resolver = points().on(Operation1, Widget, poke).include(error_adapter(Dummy, Widget)).compile()
    assert len(resolver.handlers) == 3
    with pytest.raises(OperationFailed):
        resolver.call(Operation1, Widget())
