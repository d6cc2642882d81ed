"""In-memory executor for test assertions."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .ports import ExecutionResult

logger = logging.getLogger(__name__)


@dataclass
class RecordedStatement:
    """Record of one executed statement."""

    method: str
    sql: str
    params: tuple[Any, ...]


class RecordingExecutor:
    """
    Test double (Fake) that records every statement and replays queued
    responses.

    Without a queued response, ``query`` returns no rows and ``execute``
    reports one changed row.
    """

    def __init__(self) -> None:
        self.statements: list[RecordedStatement] = []
        self._rows: deque[list[dict[str, Any]]] = deque()
        self._results: deque[ExecutionResult] = deque()

    def queue_rows(self, rows: Sequence[dict[str, Any]]) -> RecordingExecutor:
        self._rows.append([dict(r) for r in rows])
        return self

    def queue_result(
        self, changes: int = 1, last_insert_id: Any = None
    ) -> RecordingExecutor:
        self._results.append(ExecutionResult(changes, last_insert_id))
        return self

    async def query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        self.statements.append(RecordedStatement("query", sql, tuple(params)))
        return self._rows.popleft() if self._rows else []

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        self.statements.append(RecordedStatement("execute", sql, tuple(params)))
        return self._results.popleft() if self._results else ExecutionResult(1)

    @property
    def last(self) -> RecordedStatement:
        if not self.statements:
            raise AssertionError("No statement was executed")
        return self.statements[-1]

    def clear(self) -> None:
        self.statements.clear()
        self._rows.clear()
        self._results.clear()
