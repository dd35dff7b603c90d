"""Shared infrastructure for examples."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, TextIO

from tagchain import AnyType, Call, Ref, Tag, points
from tagchain.adapter import ErrorSlot


# Tags
class Multiply(Tag): ...


class Add(Tag): ...


class Sort(Tag): ...


class Unique(Tag): ...


class Output(Tag): ...


class GetAllLines(Tag): ...


@dataclass(frozen=True, slots=True)
class Get(Tag):
    index: int


@dataclass(frozen=True, slots=True)
class ForEach(Tag):
    inner: type[Tag]


# Device with out-parameter errors
@dataclass(slots=True)
class Device:
    name: str
    open_ports: list[int]


class OpenPort(Tag): ...


class Reset(Tag): ...


def open_port(device: Device, port: int, err: ErrorSlot) -> Device:
    if port == 2:
        err.set("function not supported")
        return device
    device.open_ports.append(port)
    return device


def reset(device: Device, hard: bool, err: ErrorSlot) -> None:
    if hard and device.open_ports:
        err.set(f"{len(device.open_ports)} ports still open")
        return
    device.open_ports.clear()


# Handlers
def multiply(ref: Ref[int], factor: int) -> None:
    ref.value *= factor


def add(value: int, amount: int) -> int:
    return value + amount


def sort(values: list[Any]) -> None:
    values.sort()


def unique(values: list[Any]) -> None:
    values[:] = [k for k, _ in itertools.groupby(values)]


def get(call: Call[Get], value: tuple[Any, ...]) -> object:
    return value[call.tag.index]


def for_each(call: Call[ForEach], values: list[Any], *args: Any) -> None:
    for v in values:
        call.resolver.call(call.tag.inner, v, *args)


def output(value: object, stream: TextIO, delimit: str = "") -> None:
    stream.write(f"{value}{delimit}")


def get_all_lines(stream: TextIO) -> list[str]:
    return [line.rstrip("\n") for line in stream]


# Namespaces
arithmetic = points().on(Multiply, int, multiply).on(Add, int, add)

algorithms = (
    points()
    .on(Sort, AnyType, sort)
    .on(Unique, AnyType, unique)
    .on(Get, AnyType, get)
    .on(ForEach, AnyType, for_each)
    .on(Output, AnyType, output)
    .on(GetAllLines, AnyType, get_all_lines)
)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")
