"""Protocol for the SQL execution engine that runs compiled statements."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ExecutionResult:
    """Normalized outcome of a write: affected rows and the generated id."""

    changes: int = 0
    last_insert_id: Any = None


@runtime_checkable
class SQLExecutor(Protocol):
    """
    Runs ``(sql, params)`` pairs. Connecting, pooling, transactions and
    driver result shapes are the executor's business.
    """

    async def query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        """Run a row-returning statement."""
        ...

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        """Run a write and report affected rows."""
        ...
