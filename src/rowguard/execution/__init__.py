"""Execution boundary: run compiled statements against a database."""

from __future__ import annotations

from .memory import RecordedStatement, RecordingExecutor
from .ports import ExecutionResult, SQLExecutor
from .raw import UnsafeRawAccess
from .sqlalchemy_executor import SQLAlchemyExecutor, to_named_binds

__all__ = [
    "ExecutionResult",
    "RecordedStatement",
    "RecordingExecutor",
    "SQLAlchemyExecutor",
    "SQLExecutor",
    "UnsafeRawAccess",
    "to_named_binds",
]
