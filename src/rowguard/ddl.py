"""
Schema statements: CREATE TABLE from column definitions, tenant schema
create/drop/list and catalog introspection queries.

Only statements are produced here; running them (and deciding when) is
the installer's job.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .dialects import get_dialect
from .exceptions import ValidationError
from .models import CompiledStatement, StatementKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .dialects import Dialect


class LogicalType(str, Enum):
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    JSON = "json"
    UUID = "uuid"


class ReferentialAction(str, Enum):
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    NO_ACTION = "NO ACTION"


class ForeignKeyReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    table: str
    column: str = "id"
    on_delete: ReferentialAction | None = None
    on_update: ReferentialAction | None = None


class ColumnDefinition(BaseModel):
    """Immutable column definition used to render ``CREATE TABLE``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: LogicalType = LogicalType.STRING
    nullable: bool = True
    unique: bool = False
    primary_key: bool = Field(default=False, alias="primaryKey")
    auto_increment: bool = Field(default=False, alias="autoIncrement")
    default: Any = None
    references: ForeignKeyReference | None = None

    @property
    def has_default(self) -> bool:
        """True when ``default`` was given, even as ``None``."""
        return "default" in self.model_fields_set


class SchemaCompiler:
    """Dialect-bound DDL and catalog statement builder."""

    def __init__(self, dialect: Dialect | str) -> None:
        self.dialect = get_dialect(dialect)

    def quote(self, name: str) -> str:
        return self.dialect.quote_identifier(name)

    def create_table(
        self,
        table: str,
        columns: Sequence[ColumnDefinition],
        *,
        if_not_exists: bool = True,
    ) -> CompiledStatement:
        if not columns:
            raise ValidationError({"columns": ["A table needs at least one column"]})
        column_defs = [self._column_sql(c) for c in columns]
        constraints = [
            self._foreign_key_sql(c.name, c.references)
            for c in columns
            if c.references is not None
        ]
        guard = "IF NOT EXISTS " if if_not_exists else ""
        body = ", ".join(column_defs + constraints)
        return CompiledStatement(
            sql=f"CREATE TABLE {guard}{self.quote(table)} ({body})",
            kind=StatementKind.DDL,
            table=table,
        )

    def create_schema(self, schema: str) -> CompiledStatement:
        self._require_schemas()
        keyword = "DATABASE" if self.dialect.name == "mysql" else "SCHEMA"
        return CompiledStatement(
            sql=f"CREATE {keyword} IF NOT EXISTS {self.quote(schema)}",
            kind=StatementKind.DDL,
        )

    def drop_schema(self, schema: str, *, cascade: bool = True) -> CompiledStatement:
        self._require_schemas()
        if self.dialect.name == "mysql":
            sql = f"DROP DATABASE IF EXISTS {self.quote(schema)}"
        else:
            sql = f"DROP SCHEMA IF EXISTS {self.quote(schema)}"
            if cascade:
                sql += " CASCADE"
        return CompiledStatement(sql=sql, kind=StatementKind.DDL)

    def list_schemas(self) -> CompiledStatement:
        self._require_schemas()
        if self.dialect.name == "mysql":
            sql = (
                "SELECT SCHEMA_NAME AS schema_name FROM information_schema.SCHEMATA "
                "WHERE SCHEMA_NAME NOT IN "
                "('information_schema', 'mysql', 'performance_schema', 'sys')"
            )
        else:
            sql = (
                "SELECT schema_name FROM information_schema.schemata "
                "WHERE schema_name NOT IN "
                "('information_schema', 'pg_catalog', 'pg_toast')"
            )
        return CompiledStatement(sql=sql, kind=StatementKind.SELECT)

    def table_exists(self, table: str, schema: str | None = None) -> CompiledStatement:
        ph = self.dialect.placeholder
        if self.dialect.name == "sqlite":
            sql = (
                "SELECT name FROM sqlite_master "
                f"WHERE type = 'table' AND name = {ph(0)} LIMIT 1"
            )
            return CompiledStatement(sql=sql, params=(table,), kind=StatementKind.SELECT)
        if self.dialect.name == "mysql":
            sql = (
                "SELECT table_name FROM information_schema.tables "
                f"WHERE table_schema = DATABASE() AND table_name = {ph(0)} LIMIT 1"
            )
            return CompiledStatement(sql=sql, params=(table,), kind=StatementKind.SELECT)
        sql = (
            "SELECT table_name FROM information_schema.tables "
            f"WHERE table_schema = {ph(0)} AND table_name = {ph(1)} LIMIT 1"
        )
        return CompiledStatement(
            sql=sql, params=(schema or "public", table), kind=StatementKind.SELECT
        )

    def table_columns(self, table: str, schema: str | None = None) -> CompiledStatement:
        ph = self.dialect.placeholder
        if self.dialect.name == "sqlite":
            return CompiledStatement(
                sql=f"PRAGMA table_info({self.quote(table)})",
                kind=StatementKind.SELECT,
            )
        if self.dialect.name == "mysql":
            sql = (
                "SELECT COLUMN_NAME AS name, DATA_TYPE AS type, "
                "IS_NULLABLE = 'YES' AS nullable, COLUMN_DEFAULT AS `default` "
                "FROM information_schema.columns "
                f"WHERE table_schema = DATABASE() AND table_name = {ph(0)} "
                "ORDER BY ORDINAL_POSITION"
            )
            return CompiledStatement(sql=sql, params=(table,), kind=StatementKind.SELECT)
        sql = (
            "SELECT column_name AS name, data_type AS type, "
            "is_nullable = 'YES' AS nullable, column_default AS \"default\" "
            "FROM information_schema.columns "
            f"WHERE table_schema = {ph(0)} AND table_name = {ph(1)} "
            "ORDER BY ordinal_position"
        )
        return CompiledStatement(
            sql=sql, params=(schema or "public", table), kind=StatementKind.SELECT
        )

    # -- internals -----------------------------------------------------------

    def _column_sql(self, column: ColumnDefinition) -> str:
        parts = [self.quote(column.name), self.dialect.column_type(column.type.value)]
        if column.auto_increment:
            clause = self.dialect.auto_increment_clause()
            if clause:
                parts.append(clause)
        if column.has_default:
            parts.append(f"DEFAULT {self.dialect.format_default(column.default)}")
        # PRIMARY KEY already implies NOT NULL
        if not column.nullable and not column.primary_key:
            parts.append("NOT NULL")
        if column.unique:
            parts.append("UNIQUE")
        if column.primary_key:
            parts.append("PRIMARY KEY")
        return " ".join(parts)

    def _foreign_key_sql(self, name: str, ref: ForeignKeyReference) -> str:
        parts = [
            f"FOREIGN KEY ({self.quote(name)})",
            f"REFERENCES {self.quote(ref.table)}({self.quote(ref.column)})",
        ]
        if ref.on_delete is not None:
            parts.append(f"ON DELETE {ref.on_delete.value}")
        if ref.on_update is not None:
            parts.append(f"ON UPDATE {ref.on_update.value}")
        return " ".join(parts)

    def _require_schemas(self) -> None:
        if not self.dialect.supports_schemas:
            raise ValidationError(
                {"dialect": [f"{self.dialect.name} does not support schemas"]}
            )
