"""
SQL operator implementations and default registry.

Usage::

    from rowguard.compiler.operators import DEFAULT_SQL_REGISTRY

    predicate = DEFAULT_SQL_REGISTRY.apply(FilterOperator.EQ, '"status"', "active", params)
"""

from __future__ import annotations

from ..strategy import SQLOperatorRegistry
from .null import IsNotNullOperator, IsNullOperator
from .set import InOperator, NotInOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    LikeOperator,
    NotEqualOperator,
)
from .string import ContainsOperator, EndsWithOperator, StartsWithOperator


def build_default_sql_registry() -> SQLOperatorRegistry:
    """Create a registry with all built-in operators."""
    registry = SQLOperatorRegistry()
    registry.register_all(
        # Standard comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        LikeOperator(),
        # Set
        InOperator(),
        NotInOperator(),
        # String
        ContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
        # Null
        IsNullOperator(),
        IsNotNullOperator(),
    )
    return registry


DEFAULT_SQL_REGISTRY: SQLOperatorRegistry = build_default_sql_registry()

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "SQLOperatorRegistry",
    "build_default_sql_registry",
]
