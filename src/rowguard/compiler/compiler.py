"""
Compile a filter list into a ``WHERE`` clause and positional parameters.

Uses the strategy pattern: each operator is an isolated class in
``operators/``, registered in a ``SQLOperatorRegistry``.
``FilterCompiler`` walks the filter list in caller order and delegates
each predicate to the registry, so placeholder numbering always follows
emission order.

Sub-clauses
-----------
``compile_predicates`` is the entry point for callers that need the
predicates without the ``WHERE`` keyword, starting at an arbitrary
parameter offset (e.g. the guard filters appended after an UPDATE's id
predicate). ``FilterGroup`` members are compiled into one parenthesized
sub-clause joined by the group's combinator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..dialects import get_dialect
from ..models import Filter, FilterGroup, coerce_filters
from .operators import DEFAULT_SQL_REGISTRY
from .strategy import ParameterList

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from ..dialects import Dialect
    from ..models import FilterLike
    from .strategy import SQLOperatorRegistry


@dataclass(frozen=True)
class WhereClause:
    """A compiled ``WHERE`` clause (empty string when there is no filter)."""

    clause: str
    params: tuple[Any, ...] = ()

    def __iter__(self) -> Iterator[Any]:
        yield self.clause
        yield list(self.params)

    def __bool__(self) -> bool:
        return bool(self.clause)


class FilterCompiler:
    """Dialect-bound filter compiler."""

    def __init__(
        self,
        dialect: Dialect | str,
        *,
        registry: SQLOperatorRegistry | None = None,
    ) -> None:
        self.dialect = get_dialect(dialect)
        self.registry = registry or DEFAULT_SQL_REGISTRY

    def new_params(self) -> ParameterList:
        return ParameterList(self.dialect)

    def compile(
        self,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None,
        params: ParameterList | None = None,
    ) -> WhereClause:
        """Compile ``filters`` into ``WHERE p1 AND p2 ...``."""
        sink = params if params is not None else self.new_params()
        predicates = self.compile_predicates(filters, sink)
        if not predicates:
            return WhereClause("", sink.values)
        return WhereClause(f"WHERE {' AND '.join(predicates)}", sink.values)

    def compile_predicates(
        self,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None,
        params: ParameterList,
    ) -> list[str]:
        """Compile each filter or group into a predicate, in order."""
        predicates: list[str] = []
        for item in coerce_filters(filters):
            if isinstance(item, FilterGroup):
                grouped = self.compile_group(item, params)
                if grouped:
                    predicates.append(grouped)
            else:
                predicates.append(self.compile_filter(item, params))
        return predicates

    def compile_filter(self, item: Filter, params: ParameterList) -> str:
        column = self.dialect.quote_identifier(item.field)
        return self.registry.apply(item.operator, column, item.value, params)

    def compile_group(self, group: FilterGroup, params: ParameterList) -> str | None:
        """
        Compile a group into ``(p1 OR p2 ...)``.

        Returns ``None`` for an empty group; a single predicate is returned
        without parentheses.
        """
        parts = [self.compile_filter(f, params) for f in group.filters]
        if not parts:
            return None
        if len(parts) == 1:
            return parts[0]
        return f"({f' {group.combinator.value} '.join(parts)})"


def compile_filters(
    filters: Sequence[FilterLike | Mapping[str, Any]] | None,
    dialect: Dialect | str,
    *,
    registry: SQLOperatorRegistry | None = None,
) -> WhereClause:
    """
    Build a ``WHERE`` clause from a filter list.

    Args:
        filters: Filters (or ``{"field", "operator", "value"}`` mappings)
            in caller order.
        dialect: Target dialect or its name.
        registry: Optional custom operator registry. Falls back to
            ``DEFAULT_SQL_REGISTRY``.

    Returns:
        ``WhereClause`` with ``clause`` and ``params``; unpackable as
        ``clause, params = compile_filters(...)``.
    """
    return FilterCompiler(dialect, registry=registry).compile(filters)
