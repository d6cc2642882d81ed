"""
Dialect profiles and the name -> dialect registry.

Usage::

    from rowguard.dialects import get_dialect, quote_identifier

    quote_identifier("app.users", "postgres")   # '"app"."users"'
    get_dialect("mysql").placeholder(3)          # '?'
"""

from __future__ import annotations

from typing import Any

from ..exceptions import UnsupportedDialectError
from ..operators import SortDirection
from .base import IDENTIFIER_PATTERN, Dialect, validate_identifier
from .mysql import MySQLDialect
from .postgres import PostgresDialect
from .sqlite import SQLiteDialect

_DIALECTS: dict[str, Dialect] = {}


def register_dialect(dialect: Dialect, *aliases: str) -> None:
    _DIALECTS[dialect.name] = dialect
    for alias in aliases:
        _DIALECTS[alias] = dialect


register_dialect(PostgresDialect(), "postgresql", "pg")
register_dialect(MySQLDialect(), "mariadb")
register_dialect(SQLiteDialect(), "sqlite3")


def get_dialect(dialect: Dialect | str) -> Dialect:
    """Return the registered dialect for ``dialect`` (instances pass through)."""
    if isinstance(dialect, Dialect):
        return dialect
    key = str(dialect).strip().lower()
    found = _DIALECTS.get(key)
    if found is None:
        raise UnsupportedDialectError(key, list(_DIALECTS))
    return found


def quote_identifier(name: str, dialect: Dialect | str) -> str:
    return get_dialect(dialect).quote_identifier(name)


def placeholder(index: int, dialect: Dialect | str) -> str:
    return get_dialect(dialect).placeholder(index)


def normalize_direction(direction: Any) -> SortDirection:
    return SortDirection.normalize(direction)


__all__ = [
    "IDENTIFIER_PATTERN",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_dialect",
    "normalize_direction",
    "placeholder",
    "quote_identifier",
    "register_dialect",
    "validate_identifier",
]
