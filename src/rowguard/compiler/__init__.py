from __future__ import annotations

from .compiler import FilterCompiler, WhereClause, compile_filters
from .operators import DEFAULT_SQL_REGISTRY, build_default_sql_registry
from .strategy import ParameterList, SQLOperator, SQLOperatorRegistry

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "FilterCompiler",
    "ParameterList",
    "SQLOperator",
    "SQLOperatorRegistry",
    "WhereClause",
    "build_default_sql_registry",
    "compile_filters",
]
