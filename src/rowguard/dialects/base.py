"""
Dialect strategy: identifier quoting, placeholders and DDL rendering.

Every identifier that reaches SQL text passes through
:meth:`Dialect.quote_identifier`; it is the only guard between caller
supplied names and the statement text.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ..exceptions import InvalidIdentifierError

IDENTIFIER_PATTERN = re.compile(r"[_a-zA-Z][_a-zA-Z0-9]*")


def is_identifier_segment(segment: str) -> bool:
    # fullmatch: a trailing newline must not satisfy the grammar
    return IDENTIFIER_PATTERN.fullmatch(segment) is not None


def validate_identifier(name: str) -> list[str]:
    """Split ``name`` on ``.`` and validate every segment."""
    text = str(name)
    segments = text.split(".")
    for segment in segments:
        if not is_identifier_segment(segment):
            raise InvalidIdentifierError(text, segment)
    return segments


class Dialect(ABC):
    """Per-database quoting, placeholder and type-mapping rules."""

    name: ClassVar[str]
    quote_char: ClassVar[str] = '"'
    supports_returning: ClassVar[bool] = False
    supports_schemas: ClassVar[bool] = True
    type_map: ClassVar[dict[str, str]] = {}

    def quote_identifier(self, name: str) -> str:
        q = self.quote_char
        return ".".join(f"{q}{segment}{q}" for segment in validate_identifier(name))

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Placeholder for the zero-based parameter ``index``."""
        ...

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        clauses: list[str] = []
        if limit is not None:
            clauses.append(f"LIMIT {int(limit)}")
        if offset is not None:
            clauses.append(f"OFFSET {int(offset)}")
        return " ".join(clauses)

    # -- DDL -----------------------------------------------------------------

    def column_type(self, logical_type: str) -> str:
        key = str(logical_type).lower()
        return self.type_map.get(key, key.upper())

    def format_default(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, str) and value.upper() == "CURRENT_TIMESTAMP":
            return "CURRENT_TIMESTAMP"
        if isinstance(value, bool):
            return self.format_bool(value)
        if isinstance(value, (int, float)):
            return repr(value)
        escaped = str(value).replace("'", "''")
        return f"'{escaped}'"

    def format_bool(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    def auto_increment_clause(self) -> str | None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
