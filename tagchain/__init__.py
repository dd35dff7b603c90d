"""
tagchain — tag-dispatched customization points with fluent chaining.

    from tagchain import Tag, AnyType, points

    class Add(Tag): ...
    class Sort(Tag): ...

    def add(value: int, amount: int) -> int:
        return value + amount

    def sort(values: list) -> None:
        values.sort()

    resolver = points().on(Add, int, add).on(Sort, AnyType, sort).compile()

    resolver.wrap(5).apply(Add, 2).apply(Add, 3).unwrapped   # 10
    resolver.wrap([3, 1, 2]).apply(Sort).unwrapped            # [1, 2, 3]

    from tagchain import adapter as A   # out-parameter errors → OperationFailed
"""

from tagchain._types import (
    Tag,
    TagRef,
    Ref,
    ExactType,
    AnyType,
    ALL_TYPES,
    ExactSignature,
    AnySignature,
    ALL_SIGNATURES,
    Tier,
    Shape,
    tag_type,
)
from tagchain._errors import (
    CustomizationPointError,
    NoApplicableCustomizationPoint,
    AmbiguousCustomizationPoint,
    OperationFailed,
)
from tagchain._policy import Check, Policy
from tagchain._handler import Call, Handler
from tagchain._resolver import Resolver
from tagchain._wrapper import Wrapper
from tagchain._chain import Chain, Plan
from tagchain._builder import Declaration, Points, points
from tagchain._analyze import PointStats, Candidate, analyze, explain
from tagchain import adapter

__version__ = "0.1.0"

__all__ = (
    # Identity & selectors
    "Tag",
    "TagRef",
    "Ref",
    "ExactType",
    "AnyType",
    "ALL_TYPES",
    "ExactSignature",
    "AnySignature",
    "ALL_SIGNATURES",
    "Tier",
    "Shape",
    "tag_type",
    # Errors
    "CustomizationPointError",
    "NoApplicableCustomizationPoint",
    "AmbiguousCustomizationPoint",
    "OperationFailed",
    # Configuration
    "Check",
    "Policy",
    # Dispatch
    "Call",
    "Handler",
    "Resolver",
    "Declaration",
    "Points",
    "points",
    # Chaining
    "Wrapper",
    "Chain",
    "Plan",
    # Analysis
    "PointStats",
    "Candidate",
    "analyze",
    "explain",
    # Submodules
    "adapter",
)
