"""
Analysis — static inspection of declarations and resolution, without calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tagchain._types import ExactSignature, ExactType, TagRef, Tier, tag_type, tier_of
from tagchain._builder import Points
from tagchain._resolver import Resolver, rank

# ═══════════════════════════════════════════════════════════════════════════════
# PointStats — Declaration Summary
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PointStats:
    """Statistics about a set of declarations."""
    declaration_count: int
    exact_count: int
    type_count: int
    signature_count: int
    universal_count: int
    tags: tuple[str, ...]
    types: tuple[str, ...]

    def count(self, tier: Tier) -> int:
        match tier:
            case Tier.EXACT:
                return self.exact_count
            case Tier.TYPE:
                return self.type_count
            case Tier.SIGNATURE:
                return self.signature_count
            case _:
                return self.universal_count


def analyze(target: Points | Resolver) -> PointStats:
    """
    Summarise declarations by tier.

    Example:
        stats = analyze(algs)
        print(f"Handlers: {stats.declaration_count}, universal: {stats.universal_count}")
    """
    if isinstance(target, Resolver):
        selectors = [(h.types, h.signature) for h in target.handlers]
    else:
        selectors = [(d.types, d.signature) for d in target.declarations]

    tiers = [tier_of(t, s) for t, s in selectors]
    tags: list[str] = []
    types: list[str] = []
    for t, s in selectors:
        if isinstance(s, ExactSignature) and s.tag.__name__ not in tags:
            tags.append(s.tag.__name__)
        if isinstance(t, ExactType) and t.of.__name__ not in types:
            types.append(t.of.__name__)

    return PointStats(
        declaration_count=len(selectors),
        exact_count=tiers.count(Tier.EXACT),
        type_count=tiers.count(Tier.TYPE),
        signature_count=tiers.count(Tier.SIGNATURE),
        universal_count=tiers.count(Tier.UNIVERSAL),
        tags=tuple(tags),
        types=tuple(types),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# explain() — Why a Handler Wins
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Candidate:
    """A handler declared for the tag and type, as the resolver sees it."""
    handler: str
    tier: Tier
    viable: bool
    chosen: bool


def explain(
    resolver: Resolver,
    tag: TagRef,
    value_type: type[Any],
    *args: Any,
    **kwargs: Any,
) -> tuple[Candidate, ...]:
    """
    List every handler matching (tag, type), most specific first.

    viable: accepts this call shape. chosen: would be resolved. No candidate
    is chosen when resolution would fail (none viable, or a tie).
    """
    tag_cls = tag_type(tag)
    matching = sorted(
        (h for h in resolver.handlers if h.matches(tag_cls, value_type)),
        key=lambda h: h.tier,
    )
    viable = [h for h in matching if h.accepts(args, kwargs)]

    chosen = None
    if viable:
        _, winners = rank(viable)
        if len(winners) == 1:
            chosen = winners[0]

    return tuple(
        Candidate(
            handler=h.name,
            tier=h.tier,
            viable=h in viable,
            chosen=h is chosen,
        )
        for h in matching
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("PointStats", "analyze", "Candidate", "explain")
