"""
Statement assembly for SELECT / COUNT / FIND-BY-ID / INSERT / UPDATE /
DELETE.

Identifiers always pass through the dialect; values always pass through
placeholders. Clauses that are absent are omitted entirely.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .compiler import FilterCompiler
from .exceptions import ValidationError
from .models import CompiledStatement, QueryOptions, StatementKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .compiler import SQLOperatorRegistry
    from .compiler.strategy import ParameterList
    from .dialects import Dialect
    from .models import FilterLike

logger = logging.getLogger(__name__)


class StatementAssembler:
    """Compose complete statements for one dialect."""

    def __init__(
        self,
        dialect: Dialect | str,
        *,
        registry: SQLOperatorRegistry | None = None,
    ) -> None:
        self.filters = FilterCompiler(dialect, registry=registry)
        self.dialect = self.filters.dialect

    def quote(self, name: str) -> str:
        return self.dialect.quote_identifier(name)

    # -- reads ---------------------------------------------------------------

    def build_select(
        self,
        table: str,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None = None,
        options: QueryOptions | None = None,
    ) -> CompiledStatement:
        options = options or QueryOptions()
        where = self.filters.compile(filters)
        parts = [f"SELECT {self._projection(options)} FROM {self.quote(table)}"]
        parts.append(where.clause)
        parts.append(self._order_by(options))
        parts.append(self._pagination(options))
        return self._finish(
            " ".join(p for p in parts if p),
            where.params,
            StatementKind.SELECT,
            table,
        )

    def build_count(
        self,
        table: str,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None = None,
    ) -> CompiledStatement:
        where = self.filters.compile(filters)
        sql = f"SELECT COUNT(*) as count FROM {self.quote(table)} {where.clause}"
        return self._finish(sql.strip(), where.params, StatementKind.COUNT, table)

    def build_find_by_id(
        self,
        table: str,
        id_column: str,
        record_id: Any,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None = None,
    ) -> CompiledStatement:
        params = self.filters.new_params()
        where = self._id_where(id_column, record_id, filters, params)
        sql = f"SELECT * FROM {self.quote(table)} {where} LIMIT 1"
        return self._finish(
            sql, params.values, StatementKind.FIND_BY_ID, table, id_column=id_column
        )

    # -- writes --------------------------------------------------------------

    def build_insert(
        self,
        table: str,
        data: Mapping[str, Any],
        *,
        returning: bool | None = None,
    ) -> CompiledStatement:
        """
        Column order follows ``data``'s key order. Dialects that support
        it get ``RETURNING *`` unless ``returning=False``.
        """
        if not data:
            raise ValidationError({"data": ["Insert requires at least one column"]})
        params = self.filters.new_params()
        columns = ", ".join(self.quote(c) for c in data)
        values = ", ".join(params.extend(list(data.values())))
        sql = f"INSERT INTO {self.quote(table)} ({columns}) VALUES ({values})"
        use_returning = (
            self.dialect.supports_returning if returning is None else returning
        )
        if use_returning and self.dialect.supports_returning:
            sql += " RETURNING *"
        else:
            use_returning = False
        return self._finish(
            sql, params.values, StatementKind.INSERT, table, returning=use_returning
        )

    def build_update(
        self,
        table: str,
        id_column: str,
        record_id: Any,
        data: Mapping[str, Any],
        filters: Sequence[FilterLike | Mapping[str, Any]] | None = None,
    ) -> CompiledStatement:
        """
        ``UPDATE t SET c1 = ?, ... WHERE <id_column> = ?``.

        ``filters`` are ANDed after the id predicate so a write can keep
        the same tenant and row scope as a read.
        """
        if not data:
            raise ValidationError({"data": ["Update requires at least one column"]})
        params = self.filters.new_params()
        sets = ", ".join(f"{self.quote(c)} = {params.add(v)}" for c, v in data.items())
        where = self._id_where(id_column, record_id, filters, params)
        sql = f"UPDATE {self.quote(table)} SET {sets} {where}"
        return self._finish(
            sql, params.values, StatementKind.UPDATE, table, id_column=id_column
        )

    def build_delete(
        self,
        table: str,
        id_column: str,
        record_id: Any,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None = None,
    ) -> CompiledStatement:
        params = self.filters.new_params()
        where = self._id_where(id_column, record_id, filters, params)
        sql = f"DELETE FROM {self.quote(table)} {where}"
        return self._finish(
            sql, params.values, StatementKind.DELETE, table, id_column=id_column
        )

    # -- internals -----------------------------------------------------------

    def _id_where(
        self,
        id_column: str,
        record_id: Any,
        filters: Sequence[FilterLike | Mapping[str, Any]] | None,
        params: ParameterList,
    ) -> str:
        if not id_column:
            raise ValidationError({"id_column": ["An id column is required"]})
        if record_id is None:
            raise ValidationError({"id": ["An id value is required"]})
        predicates = [f"{self.quote(id_column)} = {params.add(record_id)}"]
        predicates.extend(self.filters.compile_predicates(filters, params))
        return f"WHERE {' AND '.join(predicates)}"

    def _projection(self, options: QueryOptions) -> str:
        if not options.select_fields:
            return "*"
        return ", ".join(self.quote(f) for f in options.select_fields)

    def _order_by(self, options: QueryOptions) -> str:
        if not options.order_by:
            return ""
        parts = [f"{self.quote(o.field)} {o.direction.value}" for o in options.order_by]
        return f"ORDER BY {', '.join(parts)}"

    def _pagination(self, options: QueryOptions) -> str:
        return self.dialect.limit_clause(options.limit, options.offset)

    def _finish(
        self,
        sql: str,
        params: tuple[Any, ...],
        kind: StatementKind,
        table: str,
        *,
        id_column: str | None = None,
        returning: bool = False,
    ) -> CompiledStatement:
        logger.debug(
            "Compiled %s statement for %s (%d params): %s",
            kind.value,
            table,
            len(params),
            sql,
        )
        return CompiledStatement(
            sql=sql,
            params=params,
            kind=kind,
            table=table,
            id_column=id_column,
            returning=returning,
        )
