"""
Multi-tenancy resolution.

A tenant is isolated in one of three ways: its own schema, a table-name
prefix, or a discriminator column. The default tenant (``"public"``) is
never given a discriminator filter, which is the escape hatch for
single-tenant deployments running the ``column`` strategy.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator

from .dialects.base import is_identifier_segment, validate_identifier
from .exceptions import InvalidIdentifierError
from .models import Filter, coerce_filters
from .operators import FilterOperator

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .models import FilterLike

DEFAULT_TENANT_ID = "public"


class TenancyStrategy(str, Enum):
    SCHEMA = "schema"
    TABLE_PREFIX = "table-prefix"
    COLUMN = "column"
    NONE = "none"


class TenancyConfig(BaseModel):
    """How tenants are isolated."""

    model_config = ConfigDict(frozen=True)

    strategy: TenancyStrategy = TenancyStrategy.NONE
    column_name: str = "tenant_id"
    separator: str = "_"
    default_tenant: str = DEFAULT_TENANT_ID

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("_", "-")
        return value

    @field_validator("column_name")
    @classmethod
    def _check_column(cls, value: str) -> str:
        validate_identifier(value)
        return value


def resolve_tenant_id(
    tenant_id: str | None, default: str = DEFAULT_TENANT_ID
) -> str:
    """Trim ``tenant_id``; blank or missing ids become the default tenant."""
    if tenant_id is None:
        return default
    text = str(tenant_id).strip()
    return text or default


class MultiTenancyResolver:
    """Applies one :class:`TenancyConfig` to tables, filters and writes."""

    def __init__(self, config: TenancyConfig | None = None) -> None:
        self.config = config or TenancyConfig()

    @property
    def strategy(self) -> TenancyStrategy:
        return self.config.strategy

    def resolve_table(self, table: str, tenant_id: str | None) -> str:
        """
        Physical table name for ``tenant_id``.

        Under the schema and table-prefix strategies the tenant becomes part
        of the name, so it must be one bare identifier segment; a dotted
        tenant would otherwise select a different schema.
        """
        if self.strategy not in (TenancyStrategy.SCHEMA, TenancyStrategy.TABLE_PREFIX):
            return table
        tenant = resolve_tenant_id(tenant_id, self.config.default_tenant)
        if not is_identifier_segment(tenant):
            raise InvalidIdentifierError(tenant, tenant)
        if self.strategy is TenancyStrategy.SCHEMA:
            return f"{tenant}.{table}"
        return f"{tenant}{self.config.separator}{table}"

    def inject_filter(
        self,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None,
        tenant_id: str | None,
    ) -> list[FilterLike]:
        """Return ``filters`` with the tenant discriminator appended last."""
        result = coerce_filters(filters)
        if self._discriminates(tenant_id):
            result.append(
                Filter(
                    field=self.config.column_name,
                    operator=FilterOperator.EQ,
                    value=resolve_tenant_id(tenant_id, self.config.default_tenant),
                )
            )
        return result

    def inject_write_data(
        self, data: Mapping[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        result = dict(data)
        if self._discriminates(tenant_id):
            result[self.config.column_name] = resolve_tenant_id(
                tenant_id, self.config.default_tenant
            )
        return result

    def _discriminates(self, tenant_id: str | None) -> bool:
        if self.strategy is not TenancyStrategy.COLUMN:
            return False
        tenant = resolve_tenant_id(tenant_id, self.config.default_tenant)
        return tenant != self.config.default_tenant


def resolve_table(
    table: str, tenant_id: str | None, config: TenancyConfig | None = None
) -> str:
    return MultiTenancyResolver(config).resolve_table(table, tenant_id)


def inject_filter(
    filters: Sequence[FilterLike | Mapping[str, Any]] | None,
    tenant_id: str | None,
    config: TenancyConfig | None = None,
) -> list[FilterLike]:
    return MultiTenancyResolver(config).inject_filter(filters, tenant_id)


def inject_write_data(
    data: Mapping[str, Any],
    tenant_id: str | None,
    config: TenancyConfig | None = None,
) -> dict[str, Any]:
    return MultiTenancyResolver(config).inject_write_data(data, tenant_id)


__all__ = [
    "DEFAULT_TENANT_ID",
    "MultiTenancyResolver",
    "TenancyConfig",
    "TenancyStrategy",
    "inject_filter",
    "inject_write_data",
    "resolve_table",
    "resolve_tenant_id",
]
