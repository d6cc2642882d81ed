from __future__ import annotations

from typing import ClassVar

from .base import Dialect


class PostgresDialect(Dialect):
    name = "postgres"
    supports_returning = True
    type_map: ClassVar[dict[str, str]] = {
        "string": "VARCHAR(255)",
        "text": "TEXT",
        "integer": "INTEGER",
        "boolean": "BOOLEAN",
        "date": "DATE",
        "datetime": "TIMESTAMP",
        "json": "JSONB",
        "uuid": "UUID",
    }

    def placeholder(self, index: int) -> str:
        return f"${index + 1}"

    def auto_increment_clause(self) -> str | None:
        return "GENERATED ALWAYS AS IDENTITY"
