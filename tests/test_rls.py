"""Tests for row-level security policy resolution."""

from __future__ import annotations

import threading

import pytest

from rowguard.compiler import compile_filters
from rowguard.exceptions import UnsupportedOperatorError, ValidationError
from rowguard.models import Filter, FilterGroup
from rowguard.operators import Combinator, FilterOperator
from rowguard.rls import (
    RequestContext,
    RestrictionGroup,
    RLSCondition,
    RLSPolicyResolver,
    RolePriority,
    UserContext,
    resolve_policy_filters,
    resolve_value,
    select_role,
)


def _ctx(roles, **user):
    return RequestContext(user=UserContext(roles=roles, **user))


class TestRoleSelection:
    def test_highest_numeric_role_wins(self, resolver, alice) -> None:
        # roles "3" and "5" both match; "5" owns the owner_id restriction
        filters = resolver.resolve(alice)
        assert filters[0] == Filter("owner_id", "eq", 7)

    def test_numeric_order_not_lexical(self) -> None:
        assert select_role(["9", "10"]) == "10"

    def test_named_roles_use_caller_order(self) -> None:
        assert select_role(["editor", "admin"]) == "editor"
        assert select_role(["admin", "editor"]) == "admin"

    def test_numeric_beats_named(self) -> None:
        assert select_role(["admin", "2"]) == "2"

    def test_explicit_priority_list(self) -> None:
        priority = RolePriority.from_order(["admin", "editor", "viewer"])
        assert select_role(["viewer", "editor"], priority) == "editor"

    def test_explicit_rank_map(self) -> None:
        priority = RolePriority.coerce({"3": 10, "5": 1})
        assert select_role(["3", "5"], priority) == "3"

    def test_unranked_roles_rank_below_ranked(self) -> None:
        priority = RolePriority.from_order(["admin"])
        assert select_role(["guest", "admin"], priority) == "admin"

    def test_all_unranked_falls_back_to_caller_order(self) -> None:
        priority = RolePriority.from_order(["admin"])
        assert select_role(["guest", "member"], priority) == "guest"

    def test_priority_changes_winner(self, role_restrictions, alice) -> None:
        resolver = RLSPolicyResolver(role_restrictions, priority=["3", "5"])
        assert resolver.resolve(alice) == [Filter("department", "eq", "sales")]

    def test_no_matching_role_adds_nothing(self, resolver) -> None:
        policy = resolver.resolve_policy(_ctx(["guest"]))
        assert not policy.matched
        assert policy.filters == ()

    def test_missing_user_defaults_to_public(self) -> None:
        resolver = RLSPolicyResolver(
            {"public": [{"conditions": [{"field": "published", "value": True}]}]}
        )
        assert resolver.resolve(None) == [Filter("published", "eq", True)]
        assert resolver.resolve({"user": {"id": 1}}) == [
            Filter("published", "eq", True)
        ]


class TestConditions:
    def test_context_tokens(self, resolver) -> None:
        ctx = _ctx(["support"], id=42)
        (group,) = resolver.resolve(ctx)
        assert group == FilterGroup(
            (Filter("status", "eq", "open"), Filter("assignee_id", "eq", 42)),
            Combinator.OR,
        )

    def test_department_token(self, resolver) -> None:
        ctx = _ctx(["3"], department="ops")
        assert resolver.resolve(ctx) == [Filter("department", "eq", "ops")]

    def test_extra_user_attributes_are_tokens(self) -> None:
        ctx = RequestContext.model_validate(
            {"user": {"id": 1, "roles": ["r"], "region": "eu"}}
        )
        assert resolve_value("currentUser.region", ctx) == "eu"
        assert resolve_value("$context.user.region", ctx) == "eu"

    def test_unknown_token_resolves_to_none(self) -> None:
        ctx = _ctx(["r"])
        assert resolve_value("currentUser.nothing", ctx) is None
        assert resolve_value("currentUser.id", RequestContext()) is None

    def test_literals_pass_through(self) -> None:
        ctx = _ctx(["r"])
        assert resolve_value("currentUserXid", ctx) == "currentUserXid"
        assert resolve_value(5, ctx) == 5

    def test_list_token_becomes_in(self) -> None:
        resolver = RLSPolicyResolver(
            {"r": [{"conditions": [{"field": "team_id", "value": "currentUser.teams"}]}]}
        )
        ctx = RequestContext.model_validate(
            {"user": {"roles": ["r"], "teams": [1, 2]}}
        )
        assert resolver.resolve(ctx) == [Filter("team_id", "in", [1, 2])]

    def test_nin_condition_passes_through(self) -> None:
        resolver = RLSPolicyResolver(
            {
                "r": [
                    {
                        "conditions": [
                            {"field": "state", "operator": "notIn", "value": ["x", "y"]}
                        ]
                    }
                ]
            }
        )
        (item,) = resolver.resolve(_ctx(["r"]))
        assert item.operator is FilterOperator.NIN
        clause, params = compile_filters([item], "postgres")
        assert clause == 'WHERE "state" NOT IN ($1, $2)'
        assert params == ["x", "y"]

    def test_null_operators(self) -> None:
        resolver = RLSPolicyResolver(
            {"r": [{"conditions": [{"field": "deleted_at", "operator": "isNull"}]}]}
        )
        (item,) = resolver.resolve(_ctx(["r"]))
        assert compile_filters([item], "sqlite").clause == 'WHERE "deleted_at" IS NULL'

    def test_unknown_condition_operator(self) -> None:
        with pytest.raises(UnsupportedOperatorError):
            RLSCondition(field="a", operator="between", value=1)

    def test_only_first_group_is_used(self) -> None:
        resolver = RLSPolicyResolver(
            {
                "r": [
                    {"conditions": [{"field": "a", "value": 1}]},
                    {"conditions": [{"field": "b", "value": 2}]},
                ]
            }
        )
        assert resolver.resolve(_ctx(["r"])) == [Filter("a", "eq", 1)]

    def test_single_group_mapping_is_accepted(self) -> None:
        resolver = RLSPolicyResolver({"r": {"conditions": [{"field": "a", "value": 1}]}})
        assert resolver.resolve(_ctx(["r"])) == [Filter("a", "eq", 1)]


class TestExposedConditions:
    def test_caller_input_overrides_exposed_value(self, resolver) -> None:
        ctx = _ctx(["5"], id=7)
        filters = resolver.resolve(ctx, {"priority": "urgent"})
        assert filters == [
            Filter("owner_id", "eq", 7),
            Filter("priority", "eq", "urgent"),
        ]

    def test_non_exposed_ignores_caller_input(self, resolver) -> None:
        ctx = _ctx(["3"], department="sales")
        filters = resolver.resolve(ctx, {"department": "finance"})
        assert filters == [Filter("department", "eq", "sales")]

    def test_exposed_without_input_uses_static_value(self, resolver) -> None:
        filters = resolver.resolve(_ctx(["5"], id=7))
        assert filters[1] == Filter("priority", "eq", "high")

    def test_option_outside_metadata_is_rejected(self, resolver) -> None:
        with pytest.raises(ValidationError) as exc_info:
            resolver.resolve(_ctx(["5"], id=7), {"priority": "low"})
        assert "priority" in exc_info.value.errors

    def test_list_input_becomes_in(self, resolver) -> None:
        filters = resolver.resolve(_ctx(["5"], id=7), {"priority": ["high", "urgent"]})
        assert filters[1] == Filter("priority", "in", ["high", "urgent"])

    def test_number_metadata(self) -> None:
        resolver = RLSPolicyResolver(
            {
                "r": [
                    {
                        "conditions": [
                            {
                                "field": "level",
                                "operator": "lte",
                                "value": 3,
                                "exposed": True,
                                "metadata": {"type": "number", "min": 1, "max": 5},
                            }
                        ]
                    }
                ]
            }
        )
        ctx = _ctx(["r"])
        assert resolver.resolve(ctx, {"level": "4"}) == [Filter("level", "eq", 4)]
        with pytest.raises(ValidationError):
            resolver.resolve(ctx, {"level": "9"})
        with pytest.raises(ValidationError):
            resolver.resolve(ctx, {"level": "zero"})

    def test_exposed_conditions_for_selected_role(self, resolver, alice) -> None:
        exposed = resolver.exposed_conditions(alice)
        assert [c.field for c in exposed] == ["priority"]

    def test_exposed_conditions_without_match(self, resolver) -> None:
        assert resolver.exposed_conditions(_ctx(["guest"])) == []


class TestRestrictionReplacement:
    def test_set_role_restrictions_swaps_policy(self, resolver) -> None:
        resolver.set_role_restrictions({"guest": [{"conditions": [{"field": "x", "value": 1}]}]})
        assert resolver.resolve(_ctx(["guest"])) == [Filter("x", "eq", 1)]
        assert resolver.resolve(_ctx(["5"])) == []

    def test_restrictions_are_read_only(self, resolver) -> None:
        with pytest.raises(TypeError):
            resolver.role_restrictions["x"] = ()  # type: ignore[index]

    def test_caller_mapping_changes_do_not_leak(self) -> None:
        source = {"r": [{"conditions": [{"field": "a", "value": 1}]}]}
        resolver = RLSPolicyResolver(source)
        source["r"] = [{"conditions": [{"field": "b", "value": 2}]}]
        assert resolver.resolve(_ctx(["r"])) == [Filter("a", "eq", 1)]

    def test_concurrent_swaps_never_mix_policies(self) -> None:
        policy_a = {"r": [{"conditions": [{"field": "a", "value": 1}, {"field": "a2", "value": 1}]}]}
        policy_b = {"r": [{"conditions": [{"field": "b", "value": 2}, {"field": "b2", "value": 2}]}]}
        resolver = RLSPolicyResolver(policy_a)
        ctx = _ctx(["r"])
        seen: list[tuple[str, ...]] = []
        errors: list[BaseException] = []

        def read() -> None:
            try:
                for _ in range(200):
                    seen.append(tuple(f.field for f in resolver.resolve(ctx)))
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        def write() -> None:
            for i in range(200):
                resolver.set_role_restrictions(policy_a if i % 2 else policy_b)

        threads = [threading.Thread(target=read) for _ in range(4)]
        threads.append(threading.Thread(target=write))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert set(seen) <= {("a", "a2"), ("b", "b2")}


class TestModels:
    def test_group_has_one_combinator(self) -> None:
        group = RestrictionGroup.model_validate({"conditions": [], "combinator": "or"})
        assert group.combinator is Combinator.OR

    def test_roles_are_strings(self) -> None:
        assert UserContext(roles=[3, 5]).roles == ("3", "5")

    def test_one_shot_resolution(self, role_restrictions) -> None:
        filters = resolve_policy_filters(
            role_restrictions, {"user": {"id": 1, "roles": ["3"], "department": "x"}}
        )
        assert filters == [Filter("department", "eq", "x")]
