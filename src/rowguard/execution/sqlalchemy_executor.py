"""
SQLAlchemy-backed :class:`SQLExecutor`.

Compiled statements use the dialect's positional placeholders (``$1`` or
``?``); they are rewritten to named binds and run through
:func:`sqlalchemy.text` on an async engine or connection.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from ..exceptions import ExecutionError
from .ports import ExecutionResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from sqlalchemy.engine import CursorResult

logger = logging.getLogger(__name__)

# quoted literals and identifiers are matched first so placeholders inside
# them are left alone
_TOKEN = re.compile(
    r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|`[^`]*`|\$(?P<num>\d+)|(?P<q>\?)"""
)


def to_named_binds(sql: str, params: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """
    Rewrite ``$N`` / ``?`` placeholders into ``:pN`` binds.

    >>> to_named_binds('SELECT * FROM "t" WHERE "a" = $1', [5])
    ('SELECT * FROM "t" WHERE "a" = :p0', {'p0': 5})
    """
    values = list(params)
    position = 0

    def replace(match: re.Match[str]) -> str:
        nonlocal position
        if match.group("num") is not None:
            return f":p{int(match.group('num')) - 1}"
        if match.group("q") is not None:
            index = position
            position += 1
            return f":p{index}"
        return match.group(0)

    rewritten = _TOKEN.sub(replace, sql)
    return rewritten, {f"p{i}": v for i, v in enumerate(values)}


class SQLAlchemyExecutor:
    """
    Runs statements on an ``AsyncEngine`` (one transaction per call) or on
    a caller-owned ``AsyncConnection``.
    """

    def __init__(self, bind: AsyncEngine | AsyncConnection) -> None:
        self._bind = bind

    @property
    def dialect_name(self) -> str:
        return self._bind.dialect.name

    async def query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        try:
            async with self._connection() as conn:
                result = await self._send(conn, sql, params)
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as exc:
            logger.error("Query failed: %s", sql)
            raise ExecutionError("query", sql, exc) from exc

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        try:
            async with self._connection() as conn:
                result = await self._send(conn, sql, params)
                return self._normalize(result)
        except SQLAlchemyError as exc:
            logger.error("Statement failed: %s", sql)
            raise ExecutionError("execute", sql, exc) from exc

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLAlchemyExecutor]:
        """
        Yield an executor bound to one connection; commits on success,
        rolls back on error.
        """
        if isinstance(self._bind, AsyncEngine):
            async with self._bind.begin() as conn:
                yield SQLAlchemyExecutor(conn)
        elif self._bind.in_transaction():
            async with self._bind.begin_nested():
                yield self
        else:
            async with self._bind.begin():
                yield self

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        if isinstance(self._bind, AsyncEngine):
            async with self._bind.begin() as conn:
                yield conn
        else:
            yield self._bind

    async def _send(
        self, conn: AsyncConnection, sql: str, params: Sequence[Any]
    ) -> CursorResult[Any]:
        statement, binds = to_named_binds(sql, params)
        return await conn.execute(text(statement), binds)

    def _normalize(self, result: CursorResult[Any]) -> ExecutionResult:
        # postgres reports generated ids through RETURNING only
        last_id = None
        if self.dialect_name != "postgresql":
            last_id = result.lastrowid or None
        return ExecutionResult(changes=max(result.rowcount, 0), last_insert_id=last_id)


__all__ = ["SQLAlchemyExecutor", "to_named_binds"]
