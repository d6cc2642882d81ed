from __future__ import annotations

from typing import ClassVar

from .base import Dialect

_MAX_ROWS = 18446744073709551615


class MySQLDialect(Dialect):
    name = "mysql"
    quote_char = "`"
    type_map: ClassVar[dict[str, str]] = {
        "string": "VARCHAR(255)",
        "text": "TEXT",
        "integer": "INT",
        "boolean": "BOOLEAN",
        "date": "DATE",
        "datetime": "DATETIME",
        "json": "JSON",
        "uuid": "VARCHAR(36)",
    }

    def placeholder(self, index: int) -> str:
        return "?"

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        # OFFSET is only valid after LIMIT
        if limit is None and offset is not None:
            limit = _MAX_ROWS
        return super().limit_clause(limit, offset)

    def auto_increment_clause(self) -> str | None:
        return "AUTO_INCREMENT"
