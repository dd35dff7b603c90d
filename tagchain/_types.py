"""
Core types for tagchain.

Tags, selectors, tiers and the mutable value slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Tag — Operation Identity
# ═══════════════════════════════════════════════════════════════════════════════


class Tag:
    """
    Marker base for operations.

    The TYPE itself is the identity — no names, no registry keys:

        class Sort(Tag): ...

    Parameterised operations are frozen dataclasses. An instance resolves
    exactly like its class; handlers read the parameters via Call.tag:

        @dataclass(frozen=True, slots=True)
        class Get(Tag):
            index: int
    """

    __slots__ = ()


type TagRef = type[Tag] | Tag
"""A tag class or a parameterised tag instance."""


def tag_type(tag: object) -> type[Tag]:
    """Normalise a tag class or instance to its identity (the class)."""
    if isinstance(tag, type) and issubclass(tag, Tag):
        return tag
    if isinstance(tag, Tag):
        return type(tag)
    raise TypeError(f"{tag!r} is not a Tag (subclass tagchain.Tag)")


# ═══════════════════════════════════════════════════════════════════════════════
# Ref — Mutable Value Slot
# ═══════════════════════════════════════════════════════════════════════════════


class Ref[T]:
    """
    Single mutable value slot.

    Wrapping a Ref borrows it: handlers declared to take a Ref mutate the
    caller's slot in place. Wrapping a plain value owns a fresh Ref.

        counter = Ref(5)
        resolver.wrap(counter).apply(Multiply, 10)
        counter.value  # 50
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# Selectors — Type Axis
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExactType:
    """Applies only to values whose type is exactly `of`."""
    of: type[Any]

    def matches(self, value_type: type[Any]) -> bool:
        return value_type is self.of


@dataclass(frozen=True, slots=True)
class AnyType:
    """Applies to values of every type."""

    def matches(self, value_type: type[Any]) -> bool:
        return True


type TypeSelector = ExactType | AnyType

ALL_TYPES = AnyType()


# ═══════════════════════════════════════════════════════════════════════════════
# Selectors — Signature Axis
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExactSignature:
    """Implements one operation."""
    tag: type[Tag]

    def matches(self, tag: type[Tag]) -> bool:
        return tag is self.tag


@dataclass(frozen=True, slots=True)
class AnySignature:
    """Implements every operation (adapters, fallbacks)."""

    def matches(self, tag: type[Tag]) -> bool:
        return True


type SignatureSelector = ExactSignature | AnySignature

ALL_SIGNATURES = AnySignature()


def type_selector(selector: object) -> TypeSelector:
    """
    Normalise a type-axis declaration.

        int           → ExactType(int)
        AnyType       → ALL_TYPES
        ExactType(x)  → unchanged
    """
    if selector is AnyType or isinstance(selector, AnyType):
        return ALL_TYPES
    if isinstance(selector, ExactType):
        return selector
    if isinstance(selector, type):
        return ExactType(selector)
    raise TypeError(f"Not a type selector: {selector!r}")


def signature_selector(selector: object) -> SignatureSelector:
    """
    Normalise a signature-axis declaration.

        Sort            → ExactSignature(Sort)
        Get(2)          → ExactSignature(Get)
        AnySignature    → ALL_SIGNATURES
    """
    if selector is AnySignature or isinstance(selector, AnySignature):
        return ALL_SIGNATURES
    if isinstance(selector, ExactSignature):
        return selector
    return ExactSignature(tag_type(selector))


# ═══════════════════════════════════════════════════════════════════════════════
# Tier — Specificity Ranking
# ═══════════════════════════════════════════════════════════════════════════════


class Tier(IntEnum):
    """
    Specificity of a (type, signature) declaration. Lower wins.

        EXACT      exact type, exact signature
        TYPE       exact type, any signature
        SIGNATURE  any type,   exact signature
        UNIVERSAL  any type,   any signature
    """

    EXACT = 1
    TYPE = 2
    SIGNATURE = 3
    UNIVERSAL = 4


def tier_of(type_: TypeSelector, signature: SignatureSelector) -> Tier:
    match type_, signature:
        case ExactType(), ExactSignature():
            return Tier.EXACT
        case ExactType(), AnySignature():
            return Tier.TYPE
        case AnyType(), ExactSignature():
            return Tier.SIGNATURE
        case _:
            return Tier.UNIVERSAL


# ═══════════════════════════════════════════════════════════════════════════════
# Shape — How a Handler Treats the Held Value
# ═══════════════════════════════════════════════════════════════════════════════


class Shape(Enum):
    """
    MUTATING:     works on the held value in place, produces nothing.
    TRANSFORMING: produces a new value that replaces the held one.
    INFERRED:     decided per call — a None result keeps the held value.
    """

    MUTATING = auto()
    TRANSFORMING = auto()
    INFERRED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Tag",
    "TagRef",
    "tag_type",
    "Ref",
    "ExactType",
    "AnyType",
    "TypeSelector",
    "ALL_TYPES",
    "ExactSignature",
    "AnySignature",
    "SignatureSelector",
    "ALL_SIGNATURES",
    "type_selector",
    "signature_selector",
    "Tier",
    "tier_of",
    "Shape",
)
