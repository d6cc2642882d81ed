"""
Configuration and wiring.

``RowGuardConfig`` validates plain mappings (for example loaded from
JSON); ``DataAccess.from_config`` builds the compiler, policy resolver,
tenancy resolver and gateway from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .access import AccessCompiler, AccessRequest
from .ddl import SchemaCompiler
from .dialects import get_dialect
from .execution import UnsafeRawAccess
from .gateway import EntityGateway
from .query import Query, QueryScope
from .rls import RestrictionGroup, RLSPolicyResolver, RolePriority
from .tenancy import MultiTenancyResolver, TenancyConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .execution import SQLExecutor


class RowGuardConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dialect: str = "postgres"
    tenancy: TenancyConfig = Field(default_factory=TenancyConfig)
    role_restrictions: dict[str, tuple[RestrictionGroup, ...]] = Field(
        default_factory=dict, alias="roleRestrictions"
    )
    role_priority: list[str] | dict[str, int] | None = Field(
        default=None, alias="rolePriority"
    )
    deny_unmatched_roles: bool = Field(default=False, alias="denyUnmatchedRoles")

    @field_validator("dialect")
    @classmethod
    def _check_dialect(cls, value: str) -> str:
        return get_dialect(value).name

    @field_validator("role_restrictions", mode="before")
    @classmethod
    def _wrap_single_group(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        wrapped: dict[str, Any] = {}
        for role, groups in value.items():
            single = isinstance(groups, (dict, RestrictionGroup))
            wrapped[str(role)] = [groups] if single else groups
        return wrapped


class DataAccess:
    """One configured entry point: compile, query and execute."""

    def __init__(
        self,
        access: AccessCompiler,
        executor: SQLExecutor,
        *,
        deny_unmatched_roles: bool = False,
    ) -> None:
        self.access = access
        self.executor = executor
        self.gateway = EntityGateway(
            access, executor, deny_unmatched_roles=deny_unmatched_roles
        )
        self.schema = SchemaCompiler(access.dialect)

    @classmethod
    def from_config(
        cls,
        config: RowGuardConfig | Mapping[str, Any],
        executor: SQLExecutor,
    ) -> DataAccess:
        if not isinstance(config, RowGuardConfig):
            config = RowGuardConfig.model_validate(config)
        policies = RLSPolicyResolver(
            config.role_restrictions,
            priority=RolePriority.coerce(config.role_priority),
        )
        access = AccessCompiler(
            config.dialect,
            tenancy=MultiTenancyResolver(config.tenancy),
            policies=policies,
        )
        return cls(access, executor, deny_unmatched_roles=config.deny_unmatched_roles)

    @property
    def policies(self) -> RLSPolicyResolver:
        return self.access.policies

    def set_role_restrictions(self, role_restrictions: Mapping[str, Any]) -> None:
        self.access.policies.set_role_restrictions(role_restrictions)

    def query(self, table: str, *, tenant_id: str | None = None) -> Query:
        scope = QueryScope(self.access, tenant_id=tenant_id, executor=self.executor)
        return scope.table(table)

    def request(self, table: str, **kwargs: Any) -> AccessRequest:
        return AccessRequest(table=table, **kwargs)

    def unsafe_raw_access(self, reason: str | None = None) -> UnsafeRawAccess:
        return UnsafeRawAccess(self.executor, reason=reason)


__all__ = ["DataAccess", "RowGuardConfig"]
