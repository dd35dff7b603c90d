"""
Errors — resolution defects and operation failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tagchain._types import Tag, Tier

# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════


class CustomizationPointError(Exception):
    """Base for every tagchain error."""


def _type_name(typ: type[Any] | None) -> str:
    return "<any>" if typ is None else typ.__qualname__


def _tag_name(tag: type[Tag] | None) -> str:
    return "<any>" if tag is None else tag.__qualname__


# ═══════════════════════════════════════════════════════════════════════════════
# Resolution Errors — Declaration Defects
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class NoApplicableCustomizationPoint(CustomizationPointError):
    """No declared handler accepts (tag, value type, call shape)."""
    tag: type[Tag]
    value_type: type[Any]
    arity: int
    keywords: tuple[str, ...] = ()

    def __str__(self) -> str:
        shape = f"{self.arity} positional"
        if self.keywords:
            shape += f", keywords {', '.join(self.keywords)}"
        return (
            f"No customization point for {_tag_name(self.tag)} "
            f"on {_type_name(self.value_type)} ({shape})"
        )


@dataclass(frozen=True, slots=True)
class AmbiguousCustomizationPoint(CustomizationPointError):
    """
    Two or more handlers are equally specific.

    tag / value_type are None when the clashing declarations are universal
    on that axis (reported at compile time).
    """
    tag: type[Tag] | None
    value_type: type[Any] | None
    tier: Tier
    candidates: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Ambiguous customization point for {_tag_name(self.tag)} "
            f"on {_type_name(self.value_type)} at tier {self.tier.name}: "
            f"{', '.join(self.candidates)}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Operation Failure — Translated Error Slot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OperationFailed(CustomizationPointError):
    """
    A handler populated its error slot.

    Raised by the error adapter; aborts the rest of the chain.
    """
    tag: type[Tag] | None
    detail: object

    def __str__(self) -> str:
        return f"{_tag_name(self.tag)} failed: {self.detail}"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CustomizationPointError",
    "NoApplicableCustomizationPoint",
    "AmbiguousCustomizationPoint",
    "OperationFailed",
)
