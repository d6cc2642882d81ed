"""
Chainable query construction.

Every builder method returns a new :class:`Query`; the receiver is never
changed, so a preconfigured base query can be shared between concurrent
callers. Configuration that does not change per query (access compiler,
tenant, executor) lives in a frozen :class:`QueryScope`.

Usage::

    scope = QueryScope(AccessCompiler("postgres"), executor=executor)
    base = scope.table("tickets").where("status", "open")
    mine = base.where("owner_id", user_id).order_by("created_at", "desc")
    rows = await mine.limit(20).get()
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .access import AccessCompiler, AccessRequest
from .exceptions import UnsupportedOperatorError, ValidationError
from .models import Filter, FilterGroup, QueryOptions, SortField
from .operators import Combinator, FilterOperator, SortDirection
from .rls import RequestContext

if TYPE_CHECKING:
    from .execution import SQLExecutor
    from .models import CompiledStatement, FilterLike

_MISSING: Any = object()


def _shorthand_filter(field_name: str, value: Any) -> Filter:
    if value is _MISSING:
        return Filter(field_name)
    if isinstance(value, (str, FilterOperator)):
        try:
            operator = FilterOperator.parse(value)
        except UnsupportedOperatorError:
            return Filter(field_name, value=value)
        if not operator.takes_value:
            return Filter(field_name, operator)
        raise ValidationError(
            {
                field_name: [
                    f"where({field_name!r}, {value!r}) names the {operator.value!r} "
                    "operator without a value; pass the value as a third argument"
                ]
            }
        )
    return Filter(field_name, value=value)


@dataclass(frozen=True)
class QueryScope:
    """Read-only configuration shared by every query built from it."""

    access: AccessCompiler
    tenant_id: str | None = None
    executor: SQLExecutor | None = None

    def with_tenant(self, tenant_id: str | None) -> QueryScope:
        return replace(self, tenant_id=tenant_id)

    def with_executor(self, executor: SQLExecutor) -> QueryScope:
        return replace(self, executor=executor)

    def table(self, name: str) -> Query:
        return Query(scope=self, table_name=name)


@dataclass(frozen=True)
class Query:
    scope: QueryScope
    table_name: str | None = None
    filters: tuple[FilterLike, ...] = ()
    options: QueryOptions = field(default_factory=QueryOptions)
    context: RequestContext = field(default_factory=RequestContext)
    caller_inputs: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    id_column: str = "id"

    # -- builders ------------------------------------------------------------

    def select(self, *fields: str) -> Query:
        options = replace(self.options, select_fields=tuple(fields))
        return replace(self, options=options)

    def from_(self, table: str) -> Query:
        return replace(self, table_name=table)

    def where(
        self,
        field_name: str | Filter,
        operator: Any = _MISSING,
        value: Any = _MISSING,
    ) -> Query:
        """
        ``where("a", 1)`` is equality; ``where("a", "gt", 1)`` names the
        operator; a ready :class:`Filter` is appended as is.

        In the two-argument form a second argument that names an operator
        is ambiguous and raises, except for the null checks, which take no
        value (``where("a", "is_null")``). Compare against such a string
        with ``where("a", "eq", "gt")``.
        """
        if isinstance(field_name, Filter):
            item = field_name
        elif value is _MISSING:
            item = _shorthand_filter(field_name, operator)
        else:
            item = Filter(field_name, operator, value)
        return replace(self, filters=self.filters + (item,))

    def where_group(
        self, *filters: Filter, combinator: Combinator | str = Combinator.OR
    ) -> Query:
        group = FilterGroup(tuple(filters), combinator)
        return replace(self, filters=self.filters + (group,))

    def order_by(self, field_name: str, direction: SortDirection | str = "ASC") -> Query:
        ordering = self.options.order_by + (SortField(field_name, direction),)
        return replace(self, options=replace(self.options, order_by=ordering))

    def limit(self, limit: int) -> Query:
        return replace(self, options=replace(self.options, limit=limit))

    def offset(self, offset: int) -> Query:
        return replace(self, options=replace(self.options, offset=offset))

    def with_tenant(self, tenant_id: str | None) -> Query:
        return replace(self, scope=self.scope.with_tenant(tenant_id))

    def with_context(
        self,
        context: RequestContext | Mapping[str, Any] | None,
        caller_inputs: Mapping[str, Any] | None = None,
    ) -> Query:
        return replace(
            self,
            context=RequestContext.coerce(context),
            caller_inputs=MappingProxyType(dict(caller_inputs or {})),
        )

    # -- compilation ---------------------------------------------------------

    def to_request(self) -> AccessRequest:
        if not self.table_name:
            raise ValidationError({"table": ["No table selected; call from_() first"]})
        return AccessRequest(
            table=self.table_name,
            filters=self.filters,
            options=self.options,
            tenant_id=self.scope.tenant_id,
            context=self.context,
            caller_inputs=self.caller_inputs,
            id_column=self.id_column,
        )

    def to_statement(self) -> CompiledStatement:
        return self.scope.access.compile_select(self.to_request())

    def to_count_statement(self) -> CompiledStatement:
        return self.scope.access.compile_count(self.to_request())

    # -- execution -----------------------------------------------------------

    async def get(self) -> list[dict[str, Any]]:
        statement = self.to_statement()
        return await self._executor().query(statement.sql, statement.params)

    async def first(self) -> dict[str, Any] | None:
        rows = await self.limit(1).get()
        return rows[0] if rows else None

    async def count(self) -> int:
        statement = self.to_count_statement()
        rows = await self._executor().query(statement.sql, statement.params)
        return int(rows[0]["count"]) if rows else 0

    def _executor(self) -> SQLExecutor:
        if self.scope.executor is None:
            raise ValidationError({"executor": ["Query scope has no executor"]})
        return self.scope.executor


__all__ = ["Query", "QueryScope"]
