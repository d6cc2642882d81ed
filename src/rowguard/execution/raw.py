"""
Unrestricted SQL access.

``UnsafeRawAccess`` runs caller-written SQL with no tenant scoping and no
row restrictions. It is only obtainable by name, never from the compiled
statement API, and every use is logged at WARNING.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import ExecutionResult, SQLExecutor

logger = logging.getLogger(__name__)


class UnsafeRawAccess:
    def __init__(self, executor: SQLExecutor, *, reason: str | None = None) -> None:
        self._executor = executor
        self.reason = reason

    async def query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        self._warn("query", sql)
        return await self._executor.query(sql, params)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        self._warn("execute", sql)
        return await self._executor.execute(sql, params)

    @property
    def executor(self) -> SQLExecutor:
        """The underlying executor, bypassing every policy."""
        self._warn("access executor", None)
        return self._executor

    def _warn(self, action: str, sql: str | None) -> None:
        logger.warning(
            "Unsafe raw access (%s) bypasses tenancy and row restrictions%s%s",
            action,
            f" [{self.reason}]" if self.reason else "",
            f": {sql}" if sql else "",
        )
