"""Tests for statement assembly across dialects."""

from __future__ import annotations

import pytest

from rowguard.exceptions import InvalidIdentifierError, ValidationError
from rowguard.models import Filter, QueryOptions, SortField, StatementKind
from rowguard.operators import SortDirection
from rowguard.statements import StatementAssembler


@pytest.fixture
def pg() -> StatementAssembler:
    return StatementAssembler("postgres")


@pytest.fixture
def lite() -> StatementAssembler:
    return StatementAssembler("sqlite")


class TestSelect:
    def test_bare_select(self, pg: StatementAssembler) -> None:
        stmt = pg.build_select("users")
        assert stmt.sql == 'SELECT * FROM "users"'
        assert stmt.params == ()
        assert stmt.kind is StatementKind.SELECT

    def test_full_select(self, pg: StatementAssembler) -> None:
        options = QueryOptions(
            order_by=(SortField("name"), SortField("created_at", "desc")),
            limit=10,
            offset=20,
        )
        stmt = pg.build_select("users", [Filter("active", "eq", True)], options)
        assert stmt.sql == (
            'SELECT * FROM "users" WHERE "active" = $1 '
            'ORDER BY "name" ASC, "created_at" DESC LIMIT 10 OFFSET 20'
        )
        assert stmt.params == (True,)

    def test_projection(self, lite: StatementAssembler) -> None:
        stmt = lite.build_select("users", options=QueryOptions(select_fields=("id", "name")))
        assert stmt.sql == 'SELECT "id", "name" FROM "users"'

    def test_projection_is_validated(self, lite: StatementAssembler) -> None:
        with pytest.raises(InvalidIdentifierError):
            lite.build_select("users", options=QueryOptions(select_fields=("*",)))

    def test_invalid_direction_sorts_ascending(self, pg: StatementAssembler) -> None:
        options = QueryOptions.from_dict(
            {"orderBy": [{"field": "name", "direction": "sideways"}]}
        )
        assert pg.build_select("t", options=options).sql.endswith('ORDER BY "name" ASC')

    def test_schema_qualified_table(self, pg: StatementAssembler) -> None:
        assert pg.build_select("acme.users").sql == 'SELECT * FROM "acme"."users"'

    def test_offset_without_limit_on_sqlite(self, lite: StatementAssembler) -> None:
        stmt = lite.build_select("t", options=QueryOptions(offset=5))
        assert stmt.sql == 'SELECT * FROM "t" LIMIT -1 OFFSET 5'

    def test_unsafe_table_name(self, pg: StatementAssembler) -> None:
        with pytest.raises(InvalidIdentifierError):
            pg.build_select("users; DROP TABLE x")


class TestCount:
    def test_count_without_filters(self, pg: StatementAssembler) -> None:
        stmt = pg.build_count("users")
        assert stmt.sql == 'SELECT COUNT(*) as count FROM "users"'
        assert stmt.kind is StatementKind.COUNT

    def test_count_with_filters(self) -> None:
        stmt = StatementAssembler("mysql").build_count("users", [Filter("a", "eq", 1)])
        assert stmt.sql == "SELECT COUNT(*) as count FROM `users` WHERE `a` = ?"
        assert stmt.params == (1,)


class TestFindById:
    def test_find_by_id(self, pg: StatementAssembler) -> None:
        stmt = pg.build_find_by_id("users", "user_id", 9)
        assert stmt.sql == 'SELECT * FROM "users" WHERE "user_id" = $1 LIMIT 1'
        assert stmt.params == (9,)
        assert stmt.id_column == "user_id"

    def test_find_by_id_with_guard(self, pg: StatementAssembler) -> None:
        stmt = pg.build_find_by_id("users", "id", 9, [Filter("tenant_id", "eq", "acme")])
        assert stmt.sql == (
            'SELECT * FROM "users" WHERE "id" = $1 AND "tenant_id" = $2 LIMIT 1'
        )
        assert stmt.params == (9, "acme")


class TestInsert:
    def test_postgres_returning(self, pg: StatementAssembler) -> None:
        stmt = pg.build_insert("users", {"name": "ann", "age": 3})
        assert stmt.sql == (
            'INSERT INTO "users" ("name", "age") VALUES ($1, $2) RETURNING *'
        )
        assert stmt.params == ("ann", 3)
        assert stmt.returning is True

    @pytest.mark.parametrize("dialect", ["mysql", "sqlite"])
    def test_no_returning_elsewhere(self, dialect: str) -> None:
        stmt = StatementAssembler(dialect).build_insert("users", {"name": "ann"})
        assert "RETURNING" not in stmt.sql
        assert stmt.returning is False

    def test_returning_can_be_disabled(self, pg: StatementAssembler) -> None:
        stmt = pg.build_insert("users", {"name": "ann"}, returning=False)
        assert stmt.sql == 'INSERT INTO "users" ("name") VALUES ($1)'

    def test_empty_insert(self, pg: StatementAssembler) -> None:
        with pytest.raises(ValidationError):
            pg.build_insert("users", {})


class TestUpdate:
    def test_update_uses_explicit_id_column(self, pg: StatementAssembler) -> None:
        stmt = pg.build_update("users", "user_id", 4, {"name": "bo", "age": 5})
        assert stmt.sql == (
            'UPDATE "users" SET "name" = $1, "age" = $2 WHERE "user_id" = $3'
        )
        assert stmt.params == ("bo", 5, 4)

    def test_update_guard_filters_follow_id(self, lite: StatementAssembler) -> None:
        stmt = lite.build_update(
            "users", "id", 4, {"name": "bo"}, [Filter("tenant_id", "eq", "acme")]
        )
        assert stmt.sql == (
            'UPDATE "users" SET "name" = ? WHERE "id" = ? AND "tenant_id" = ?'
        )
        assert stmt.params == ("bo", 4, "acme")

    def test_update_requires_id(self, pg: StatementAssembler) -> None:
        with pytest.raises(ValidationError):
            pg.build_update("users", "id", None, {"a": 1})
        with pytest.raises(ValidationError):
            pg.build_update("users", "", 1, {"a": 1})

    def test_empty_update(self, pg: StatementAssembler) -> None:
        with pytest.raises(ValidationError):
            pg.build_update("users", "id", 1, {})


class TestDelete:
    def test_delete(self) -> None:
        stmt = StatementAssembler("mysql").build_delete("users", "uid", "abc")
        assert stmt.sql == "DELETE FROM `users` WHERE `uid` = ?"
        assert stmt.params == ("abc",)
        assert stmt.kind is StatementKind.DELETE

    def test_delete_with_group_guard(self, pg: StatementAssembler) -> None:
        from rowguard.models import FilterGroup

        group = FilterGroup((Filter("a", "eq", 1), Filter("b", "eq", 2)))
        stmt = pg.build_delete("t", "id", 1, [group])
        assert stmt.sql == 'DELETE FROM "t" WHERE "id" = $1 AND ("a" = $2 OR "b" = $3)'


class TestQueryOptions:
    def test_negative_limit(self) -> None:
        with pytest.raises(ValidationError):
            QueryOptions(limit=-1)

    def test_non_integer_offset(self) -> None:
        with pytest.raises(ValidationError):
            QueryOptions(offset=1.5)  # type: ignore[arg-type]

    def test_from_dict_accepts_aliases(self) -> None:
        options = QueryOptions.from_dict(
            {"orderBy": ["-created_at"], "limit": "5", "select": "id"}
        )
        assert options.order_by == (SortField("created_at", SortDirection.DESC),)
        assert options.limit == 5
        assert options.select_fields == ("id",)

    def test_merge(self) -> None:
        merged = QueryOptions(order_by=("a",), limit=5).merge(
            QueryOptions(order_by=("b",), offset=2)
        )
        assert [o.field for o in merged.order_by] == ["a", "b"]
        assert (merged.limit, merged.offset) == (5, 2)

    def test_with_pagination_keeps_other_fields(self) -> None:
        options = QueryOptions(order_by=("a",), limit=5).with_pagination(offset=10)
        assert options.to_dict() == {
            "order_by": [{"field": "a", "direction": "ASC"}],
            "limit": 5,
            "offset": 10,
        }
