"""Tests for planned chains."""

from __future__ import annotations

import pytest

from tagchain import (
    AmbiguousCustomizationPoint,
    AnyType,
    Check,
    NoApplicableCustomizationPoint,
    Policy,
    Ref,
    Tag,
    points,
)


class Add(Tag):
    pass


class Record(Tag):
    pass


class Stringify(Tag):
    pass


class Shout(Tag):
    pass


class Opaque(Tag):
    pass


CALLS: list[str] = []


def add(value: int, amount: int) -> int:
    CALLS.append(f"add {amount}")
    return value + amount


def record(ref: Ref[int]) -> None:
    CALLS.append("record")


def stringify(value: int) -> str:
    return str(value)


def shout(value: str) -> str:
    return value.upper() + "!"


def opaque(value: int):
    return str(value)


RESOLVER = (
    points()
    .on(Add, int, add)
    .on(Record, AnyType, record)
    .on(Stringify, int, stringify)
    .on(Shout, str, shout)
    .on(Opaque, int, opaque)
    .compile()
)


@pytest.fixture(autouse=True)
def _reset_calls() -> None:
    CALLS.clear()


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def test_plan_once_run_many() -> None:
    plan = RESOLVER.chain().apply(Add, 2).apply(Add, 3).plan(int)
    assert plan.is_static
    assert plan.result_type is int
    assert plan.run(5).unwrapped == 10
    assert plan(9).unwrapped == 14


def test_plan_follows_declared_result_types() -> None:
    plan = RESOLVER.chain().apply(Add, 1).apply(Stringify).apply(Shout).plan(int)
    assert [s.value_type for s in plan.steps] == [int, int, str]
    assert plan.result_type is str
    assert plan.run(41).unwrapped == "42!"


def test_unresolvable_link_fails_before_anything_runs() -> None:
    chain = RESOLVER.chain().apply(Add, 1).apply(Record).apply(Add, "x", "y")
    with pytest.raises(NoApplicableCustomizationPoint):
        chain.run(1)
    assert CALLS == []


def test_type_error_in_a_later_link_is_caught_at_plan_time() -> None:
    # Stringify yields str; Add is declared for int only
    chain = RESOLVER.chain().apply(Stringify).apply(Add, 1)
    with pytest.raises(NoApplicableCustomizationPoint) as exc:
        chain.plan(int)
    assert exc.value.value_type is str


def test_ambiguity_fails_at_plan_time() -> None:
    def record_again(ref: Ref[int]) -> None:
        CALLS.append("record again")

    resolver = (
        points()
        .on(Add, int, add)
        .on(Record, AnyType, record)
        .on(Record, AnyType, record_again)
        .policy(Policy().with_ambiguity_check(Check.FIRST_USE))
        .compile()
    )
    with pytest.raises(AmbiguousCustomizationPoint):
        resolver.chain().apply(Add, 1).apply(Record).plan(int)
    assert CALLS == []


# ---------------------------------------------------------------------------
# Deferred links
# ---------------------------------------------------------------------------


def test_unknown_result_type_defers_later_links() -> None:
    plan = RESOLVER.chain().apply(Opaque).apply(Shout).plan(int)
    assert not plan.is_static
    assert [s.deferred for s in plan.steps] == [False, True]
    assert plan.result_type is None
    assert plan.run(7).unwrapped == "7!"


def test_deferred_link_still_fails_when_it_runs() -> None:
    plan = RESOLVER.chain().apply(Opaque).apply(Add, 1).plan(int)
    with pytest.raises(NoApplicableCustomizationPoint):
        plan.run(7)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------


def test_plan_rejects_a_different_starting_type() -> None:
    plan = RESOLVER.chain().apply(Add, 1).plan(int)
    with pytest.raises(TypeError, match="expects int"):
        plan.run("1")


def test_plan_runs_on_a_borrowed_ref() -> None:
    counter = Ref(3)
    wrapped = RESOLVER.chain().apply(Record).plan(int).run(counter)
    assert wrapped.borrowed
    assert wrapped.ref is counter
    assert CALLS == ["record"]


def test_links_are_recorded_immutably() -> None:
    base = RESOLVER.chain().apply(Add, 1)
    longer = base.apply(Add, 2)
    assert len(base.links) == 1
    assert len(longer.links) == 2
    assert longer.links[1].args == (2,)


def test_keyword_arguments_are_forwarded() -> None:
    plan = RESOLVER.chain().apply(Add, amount=4).plan(int)
    assert plan.run(1).unwrapped == 5


def test_planning_is_logged(debug_logs: pytest.LogCaptureFixture) -> None:
    RESOLVER.chain().apply(Add, 1).plan(int)
    assert any("Planned 1 links on int" in r.getMessage() for r in debug_logs.records)
