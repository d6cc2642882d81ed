"""
Exception hierarchy for rowguard.

All exceptions inherit from ``RowGuardError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class RowGuardError(Exception):
    """Root exception for the entire rowguard toolkit."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidIdentifierError(RowGuardError, ValueError):
    """A table or column name failed the bare-identifier grammar."""

    def __init__(self, identifier: str, segment: str | None = None) -> None:
        self.identifier = identifier
        self.segment = segment
        super().__init__(f"Invalid identifier: {identifier!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_IDENTIFIER",
            "identifier": self.identifier,
            "segment": self.segment,
        }


class UnsupportedOperatorError(RowGuardError):
    """
    Unknown filter operator.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(
            str(operator), valid_operators, n=3, cutoff=0.6
        )

        message = f"Unsupported operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class UnsupportedDialectError(RowGuardError):
    """Raised when a dialect name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Unsupported dialect: {name!r}. Available: {', '.join(sorted(available))}"
        )


class ValidationError(RowGuardError):
    """Raised when request input is structurally invalid.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "errors": self.errors,
        }


class PolicyMismatchError(RowGuardError):
    """None of the caller's roles has a configured restriction."""

    def __init__(self, roles: list[str]) -> None:
        self.roles = roles
        super().__init__(f"No row restriction configured for roles {roles!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "POLICY_MISMATCH",
            "roles": self.roles,
        }


class NotFoundError(RowGuardError):
    """Raised when a record or resource is not found."""


class RecordNotFoundError(NotFoundError):
    """An UPDATE or DELETE by id affected zero rows."""

    def __init__(self, table: str, record_id: object) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f"No record found in {table} with id={record_id!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "NOT_FOUND",
            "table": self.table,
            "id": self.record_id,
        }


class ExecutionError(RowGuardError):
    """Raised when the SQL execution engine fails to run a statement."""

    def __init__(self, operation: str, sql: str, cause: BaseException) -> None:
        self.operation = operation
        self.sql = sql
        self.cause = cause
        super().__init__(f"Failed to {operation}: {cause}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "EXECUTION_ERROR",
            "operation": self.operation,
            "message": str(self.cause),
        }


__all__: list[str] = [
    "ExecutionError",
    "InvalidIdentifierError",
    "NotFoundError",
    "PolicyMismatchError",
    "RecordNotFoundError",
    "RowGuardError",
    "UnsupportedDialectError",
    "UnsupportedOperatorError",
    "ValidationError",
]
