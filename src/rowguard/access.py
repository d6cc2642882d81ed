"""
Access compilation: one entity-level request in, one scoped statement out.

Every statement is scoped the same way:

1. the table name is resolved for the tenant (schema or prefix strategy);
2. caller filters come first, then the row-restriction filters of the
   winning role, then the tenant discriminator (column strategy).

Parameters are numbered in that order. Writes keep the same scope: the
row-restriction and tenant filters are ANDed after the id predicate of
UPDATE and DELETE, and INSERT payloads get the tenant column.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .models import QueryOptions, coerce_filters
from .rls import RequestContext, RLSPolicyResolver
from .rls.resolver import ResolvedPolicy
from .statements import StatementAssembler
from .tenancy import MultiTenancyResolver, TenancyConfig

if TYPE_CHECKING:
    from .compiler import SQLOperatorRegistry
    from .dialects import Dialect
    from .models import CompiledStatement, FilterLike


@dataclass(frozen=True)
class AccessRequest:
    """
    Everything the entity layer knows about one data-access call.

    ``filters`` and ``options`` accept plain mappings; ``tenant_id`` falls
    back to the context's tenant.
    """

    table: str
    filters: tuple[FilterLike, ...] = ()
    options: QueryOptions = field(default_factory=QueryOptions)
    tenant_id: str | None = None
    context: RequestContext = field(default_factory=RequestContext)
    caller_inputs: Mapping[str, Any] = field(default_factory=dict)
    id_column: str = "id"

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(coerce_filters(self.filters)))
        if not isinstance(self.options, QueryOptions):
            object.__setattr__(self, "options", QueryOptions.from_dict(self.options))
        object.__setattr__(self, "context", RequestContext.coerce(self.context))
        object.__setattr__(
            self, "caller_inputs", MappingProxyType(dict(self.caller_inputs or {}))
        )

    @property
    def effective_tenant(self) -> str | None:
        return self.tenant_id if self.tenant_id is not None else self.context.tenant_id


class AccessCompiler:
    """Apply tenancy and row restrictions, then assemble the statement."""

    def __init__(
        self,
        dialect: Dialect | str,
        *,
        tenancy: MultiTenancyResolver | TenancyConfig | None = None,
        policies: RLSPolicyResolver | None = None,
        registry: SQLOperatorRegistry | None = None,
    ) -> None:
        self.assembler = StatementAssembler(dialect, registry=registry)
        self.dialect = self.assembler.dialect
        if not isinstance(tenancy, MultiTenancyResolver):
            tenancy = MultiTenancyResolver(tenancy)
        self.tenancy = tenancy
        self.policies = policies if policies is not None else RLSPolicyResolver()

    # -- scope ---------------------------------------------------------------

    def resolve_policy(self, request: AccessRequest) -> ResolvedPolicy:
        return self.policies.resolve_policy(request.context, request.caller_inputs)

    def resolve_table(self, request: AccessRequest) -> str:
        return self.tenancy.resolve_table(request.table, request.effective_tenant)

    def scope_filters(
        self,
        request: AccessRequest,
        base: Sequence[FilterLike] = (),
        *,
        policy: ResolvedPolicy | None = None,
    ) -> list[FilterLike]:
        """``base`` filters, then row restrictions, then the tenant filter."""
        policy = policy if policy is not None else self.resolve_policy(request)
        filters = list(base) + list(policy.filters)
        return self.tenancy.inject_filter(filters, request.effective_tenant)

    # -- reads ---------------------------------------------------------------

    def compile_select(
        self, request: AccessRequest, *, policy: ResolvedPolicy | None = None
    ) -> CompiledStatement:
        filters = self.scope_filters(request, request.filters, policy=policy)
        return self.assembler.build_select(
            self.resolve_table(request), filters, request.options
        )

    def compile_count(
        self, request: AccessRequest, *, policy: ResolvedPolicy | None = None
    ) -> CompiledStatement:
        filters = self.scope_filters(request, request.filters, policy=policy)
        return self.assembler.build_count(self.resolve_table(request), filters)

    def compile_find_by_id(
        self,
        request: AccessRequest,
        record_id: Any,
        *,
        policy: ResolvedPolicy | None = None,
    ) -> CompiledStatement:
        filters = self.scope_filters(request, request.filters, policy=policy)
        return self.assembler.build_find_by_id(
            self.resolve_table(request), request.id_column, record_id, filters
        )

    # -- writes --------------------------------------------------------------

    def compile_insert(
        self, request: AccessRequest, data: Mapping[str, Any]
    ) -> CompiledStatement:
        payload = self.tenancy.inject_write_data(data, request.effective_tenant)
        return self.assembler.build_insert(self.resolve_table(request), payload)

    def compile_update(
        self,
        request: AccessRequest,
        record_id: Any,
        data: Mapping[str, Any],
        *,
        policy: ResolvedPolicy | None = None,
    ) -> CompiledStatement:
        filters = self.scope_filters(request, request.filters, policy=policy)
        return self.assembler.build_update(
            self.resolve_table(request), request.id_column, record_id, data, filters
        )

    def compile_delete(
        self,
        request: AccessRequest,
        record_id: Any,
        *,
        policy: ResolvedPolicy | None = None,
    ) -> CompiledStatement:
        filters = self.scope_filters(request, request.filters, policy=policy)
        return self.assembler.build_delete(
            self.resolve_table(request), request.id_column, record_id, filters
        )


__all__ = ["AccessCompiler", "AccessRequest"]
