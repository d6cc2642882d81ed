"""Tests for multi-tenancy resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from rowguard.exceptions import InvalidIdentifierError
from rowguard.models import Filter
from rowguard.operators import FilterOperator
from rowguard.tenancy import (
    MultiTenancyResolver,
    TenancyConfig,
    TenancyStrategy,
    inject_filter,
    inject_write_data,
    resolve_table,
    resolve_tenant_id,
)

COLUMN = TenancyConfig(strategy="column")


class TestResolveTable:
    def test_schema_strategy_qualifies(self) -> None:
        config = TenancyConfig(strategy=TenancyStrategy.SCHEMA)
        assert resolve_table("users", "acme", config) == "acme.users"

    def test_table_prefix_strategy(self) -> None:
        config = TenancyConfig(strategy="table-prefix")
        assert resolve_table("users", "acme", config) == "acme_users"

    def test_custom_separator(self) -> None:
        config = TenancyConfig(strategy="table_prefix", separator="__")
        assert resolve_table("users", "acme", config) == "acme__users"

    @pytest.mark.parametrize("strategy", ["column", "none"])
    def test_other_strategies_leave_table(self, strategy: str) -> None:
        config = TenancyConfig(strategy=strategy)
        assert resolve_table("users", "acme", config) == "users"

    def test_missing_tenant_uses_default(self) -> None:
        config = TenancyConfig(strategy="schema")
        assert resolve_table("users", None, config) == "public.users"

    @pytest.mark.parametrize("strategy", ["schema", "table-prefix"])
    @pytest.mark.parametrize("tenant", ["other.secret", "a.b", "ac me", "1acme"])
    def test_tenant_must_be_a_single_segment(self, strategy: str, tenant: str) -> None:
        config = TenancyConfig(strategy=strategy)
        with pytest.raises(InvalidIdentifierError) as exc_info:
            resolve_table("users", tenant, config)
        assert exc_info.value.segment == tenant

    def test_column_strategy_does_not_name_tables_after_tenant(self) -> None:
        assert resolve_table("users", "other.secret", COLUMN) == "users"


class TestInjectFilter:
    def test_column_strategy_appends_tenant_filter(self) -> None:
        assert inject_filter([], "acme", COLUMN) == [
            Filter("tenant_id", FilterOperator.EQ, "acme")
        ]

    def test_default_tenant_gets_no_filter(self) -> None:
        assert inject_filter([], "public", COLUMN) == []
        assert inject_filter([], None, COLUMN) == []
        assert inject_filter([], "  ", COLUMN) == []

    def test_tenant_filter_goes_last(self) -> None:
        filters = inject_filter([{"field": "a", "value": 1}], "acme", COLUMN)
        assert [f.field for f in filters] == ["a", "tenant_id"]

    def test_custom_column(self) -> None:
        config = TenancyConfig(strategy="column", column_name="org_id")
        assert inject_filter([], "acme", config)[0].field == "org_id"

    @pytest.mark.parametrize("strategy", ["schema", "table-prefix", "none"])
    def test_non_column_strategies_add_nothing(self, strategy: str) -> None:
        assert inject_filter([], "acme", TenancyConfig(strategy=strategy)) == []

    def test_input_is_not_mutated(self) -> None:
        original = [Filter("a", "eq", 1)]
        inject_filter(original, "acme", COLUMN)
        assert original == [Filter("a", "eq", 1)]


class TestInjectWriteData:
    def test_column_strategy_sets_tenant(self) -> None:
        assert inject_write_data({"name": "x"}, "acme", COLUMN) == {
            "name": "x",
            "tenant_id": "acme",
        }

    def test_default_tenant_leaves_data(self) -> None:
        assert inject_write_data({"name": "x"}, "public", COLUMN) == {"name": "x"}

    def test_tenant_overrides_caller_value(self) -> None:
        data = inject_write_data({"tenant_id": "other"}, "acme", COLUMN)
        assert data == {"tenant_id": "acme"}


class TestConfig:
    def test_defaults(self) -> None:
        config = TenancyConfig()
        assert config.strategy is TenancyStrategy.NONE
        assert config.column_name == "tenant_id"
        assert config.separator == "_"
        assert config.default_tenant == "public"

    def test_unknown_strategy(self) -> None:
        with pytest.raises(PydanticValidationError):
            TenancyConfig(strategy="sharded")

    def test_column_name_must_be_identifier(self) -> None:
        with pytest.raises(PydanticValidationError):
            TenancyConfig(strategy="column", column_name="tenant id")

    def test_custom_default_tenant(self) -> None:
        resolver = MultiTenancyResolver(
            TenancyConfig(strategy="column", default_tenant="main")
        )
        assert resolver.inject_filter([], "main") == []
        assert resolver.inject_filter([], "public")[0].value == "public"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(" acme ", "acme"), ("", "public"), (None, "public"), ("\t", "public")],
)
def test_resolve_tenant_id(raw: str | None, expected: str) -> None:
    assert resolve_tenant_id(raw) == expected
