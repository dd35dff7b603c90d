"""
Resolution policy — behaviour configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tagchain._types import Shape

# ═══════════════════════════════════════════════════════════════════════════════
# Check — When Ambiguity Is Reported
# ═══════════════════════════════════════════════════════════════════════════════


class Check(Enum):
    """
    COMPILE:   clashing declarations fail Points.compile(), before any call.
    FIRST_USE: clashes fail only when a call actually hits them.
    """

    COMPILE = auto()
    FIRST_USE = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Policy — Full Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Resolver configuration.

    Fluent builder pattern — each method returns a new Policy.

    Example:
        policy = (
            Policy()
            .with_ambiguity_check(Check.FIRST_USE)
            .with_untyped_shape(Shape.TRANSFORMING)
            .with_cache(False)
        )
    """

    ambiguity_check: Check = Check.COMPILE
    # Handlers without a return annotation.
    untyped_shape: Shape = Shape.INFERRED
    cache_resolutions: bool = True

    def with_ambiguity_check(self, check: Check) -> Policy:
        """Report clashing declarations at compile time or on first use."""
        return Policy(
            ambiguity_check=check,
            untyped_shape=self.untyped_shape,
            cache_resolutions=self.cache_resolutions,
        )

    def with_untyped_shape(self, shape: Shape) -> Policy:
        """
        Classify handlers that carry no return annotation.

            .with_untyped_shape(Shape.MUTATING)      # always keep the slot
            .with_untyped_shape(Shape.TRANSFORMING)  # always replace it
        """
        return Policy(
            ambiguity_check=self.ambiguity_check,
            untyped_shape=shape,
            cache_resolutions=self.cache_resolutions,
        )

    def with_cache(self, enabled: bool) -> Policy:
        """Memoise resolutions per (tag, type, call shape)."""
        return Policy(
            ambiguity_check=self.ambiguity_check,
            untyped_shape=self.untyped_shape,
            cache_resolutions=enabled,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Check", "Policy")
