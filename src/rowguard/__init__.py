"""
rowguard: compile tenant-aware, row-level-secured data-access requests
into parameterized SQL for PostgreSQL, MySQL and SQLite.
"""

from __future__ import annotations

from .access import AccessCompiler, AccessRequest
from .compiler import (
    DEFAULT_SQL_REGISTRY,
    FilterCompiler,
    SQLOperator,
    SQLOperatorRegistry,
    WhereClause,
    build_default_sql_registry,
    compile_filters,
)
from .config import DataAccess, RowGuardConfig
from .ddl import (
    ColumnDefinition,
    ForeignKeyReference,
    LogicalType,
    ReferentialAction,
    SchemaCompiler,
)
from .dialects import (
    Dialect,
    get_dialect,
    normalize_direction,
    placeholder,
    quote_identifier,
)
from .exceptions import (
    ExecutionError,
    InvalidIdentifierError,
    NotFoundError,
    PolicyMismatchError,
    RecordNotFoundError,
    RowGuardError,
    UnsupportedDialectError,
    UnsupportedOperatorError,
    ValidationError,
)
from .execution import (
    ExecutionResult,
    RecordingExecutor,
    SQLAlchemyExecutor,
    SQLExecutor,
    UnsafeRawAccess,
)
from .gateway import EntityGateway
from .models import (
    CompiledStatement,
    Filter,
    FilterGroup,
    QueryOptions,
    SortField,
    StatementKind,
)
from .operators import Combinator, FilterOperator, SortDirection
from .query import Query, QueryScope
from .rls import (
    ConditionMetadata,
    RequestContext,
    RestrictionGroup,
    RLSCondition,
    RLSPolicyResolver,
    RolePriority,
    UserContext,
    resolve_policy_filters,
)
from .statements import StatementAssembler
from .tenancy import (
    MultiTenancyResolver,
    TenancyConfig,
    TenancyStrategy,
    inject_filter,
    inject_write_data,
    resolve_table,
    resolve_tenant_id,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "AccessCompiler",
    "AccessRequest",
    "ColumnDefinition",
    "Combinator",
    "CompiledStatement",
    "ConditionMetadata",
    "DataAccess",
    "Dialect",
    "EntityGateway",
    "ExecutionError",
    "ExecutionResult",
    "Filter",
    "FilterCompiler",
    "FilterGroup",
    "FilterOperator",
    "ForeignKeyReference",
    "InvalidIdentifierError",
    "LogicalType",
    "MultiTenancyResolver",
    "NotFoundError",
    "PolicyMismatchError",
    "Query",
    "QueryOptions",
    "QueryScope",
    "RLSCondition",
    "RLSPolicyResolver",
    "RecordNotFoundError",
    "RecordingExecutor",
    "ReferentialAction",
    "RequestContext",
    "RestrictionGroup",
    "RolePriority",
    "RowGuardConfig",
    "RowGuardError",
    "SQLAlchemyExecutor",
    "SQLExecutor",
    "SQLOperator",
    "SQLOperatorRegistry",
    "SchemaCompiler",
    "SortDirection",
    "SortField",
    "StatementAssembler",
    "StatementKind",
    "TenancyConfig",
    "TenancyStrategy",
    "UnsafeRawAccess",
    "UnsupportedDialectError",
    "UnsupportedOperatorError",
    "UserContext",
    "ValidationError",
    "WhereClause",
    "build_default_sql_registry",
    "compile_filters",
    "get_dialect",
    "inject_filter",
    "inject_write_data",
    "normalize_direction",
    "placeholder",
    "quote_identifier",
    "resolve_policy_filters",
    "resolve_table",
    "resolve_tenant_id",
]
