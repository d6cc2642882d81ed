from __future__ import annotations

from typing import ClassVar

from .base import Dialect


class SQLiteDialect(Dialect):
    name = "sqlite"
    supports_schemas = False
    type_map: ClassVar[dict[str, str]] = {
        "string": "TEXT",
        "text": "TEXT",
        "integer": "INTEGER",
        "boolean": "INTEGER",
        "date": "TEXT",
        "datetime": "TEXT",
        "json": "TEXT",
        "uuid": "TEXT",
    }

    def placeholder(self, index: int) -> str:
        return "?"

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        if limit is None and offset is not None:
            return f"LIMIT -1 OFFSET {int(offset)}"
        return super().limit_clause(limit, offset)

    def format_bool(self, value: bool) -> str:
        return "1" if value else "0"
