"""
RLS policy resolution: pick one role's restriction group and turn its
conditions into filters.

Restrictions are swapped wholesale via :meth:`RLSPolicyResolver.set_role_restrictions`;
every resolution reads one immutable snapshot, so a concurrent swap never
produces a half-applied policy.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..exceptions import ValidationError
from ..models import Filter, FilterGroup, FilterLike
from ..operators import Combinator, FilterOperator
from .models import (
    ConditionValueType,
    RequestContext,
    RestrictionGroup,
    RLSCondition,
    freeze_restrictions,
)
from .priority import RolePriority, select_role
from .tokens import resolve_value

logger = logging.getLogger(__name__)

DEFAULT_ROLES: tuple[str, ...] = ("public",)

_LIST_OPERATORS = {
    FilterOperator.EQ: FilterOperator.IN,
    FilterOperator.NEQ: FilterOperator.NIN,
}


@dataclass(frozen=True)
class ResolvedPolicy:
    """Outcome of a resolution; ``role is None`` means no role matched."""

    role: str | None = None
    group: RestrictionGroup | None = None
    filters: tuple[FilterLike, ...] = field(default=())

    @property
    def matched(self) -> bool:
        return self.role is not None


def context_roles(context: RequestContext) -> tuple[str, ...]:
    return context.roles or DEFAULT_ROLES


def validate_exposed_input(condition: RLSCondition, value: Any) -> Any:
    """Check a caller-supplied value against the condition's metadata."""
    meta = condition.metadata
    if meta is None:
        return value
    if meta.type is ConditionValueType.NUMBER:
        values = value if isinstance(value, list) else [value]
        numbers = [_as_number(condition.field, v) for v in values]
        for number in numbers:
            if meta.min is not None and number < meta.min:
                raise ValidationError(
                    {condition.field: [f"Value must be at least {meta.min:g}"]}
                )
            if meta.max is not None and number > meta.max:
                raise ValidationError(
                    {condition.field: [f"Value must be at most {meta.max:g}"]}
                )
        return numbers if isinstance(value, list) else numbers[0]
    if meta.options is not None:
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item not in meta.options:
                raise ValidationError({condition.field: [f"Invalid option: {item!r}"]})
    return value


def _as_number(field_name: str, value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValidationError({field_name: ["Value must be a number"]})
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        raise ValidationError({field_name: ["Value must be a number"]}) from None
    return int(number) if number.is_integer() else number


def condition_filter(
    condition: RLSCondition,
    context: RequestContext,
    caller_inputs: Mapping[str, Any],
) -> Filter:
    """Build the filter for one condition."""
    if condition.exposed and condition.field in caller_inputs:
        value = validate_exposed_input(condition, caller_inputs[condition.field])
        operator = FilterOperator.IN if isinstance(value, list) else FilterOperator.EQ
        return Filter(condition.field, operator, value)

    value = resolve_value(condition.value, context)
    operator = condition.operator
    if isinstance(value, (list, tuple)) and operator in _LIST_OPERATORS:
        operator = _LIST_OPERATORS[operator]
        value = list(value)
    return Filter(condition.field, operator, value)


def group_filters(
    group: RestrictionGroup,
    context: RequestContext,
    caller_inputs: Mapping[str, Any],
) -> list[FilterLike]:
    filters = [condition_filter(c, context, caller_inputs) for c in group.conditions]
    if group.combinator is Combinator.OR and filters:
        return [FilterGroup(tuple(filters), Combinator.OR)]
    return list(filters)


class RLSPolicyResolver:
    """
    Holds one immutable role -> restriction-groups mapping and resolves
    request contexts against it.
    """

    def __init__(
        self,
        role_restrictions: Mapping[str, Any] | None = None,
        *,
        priority: RolePriority | Sequence[str] | Mapping[str, int] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._restrictions: Mapping[str, tuple[RestrictionGroup, ...]] = (
            MappingProxyType(freeze_restrictions(role_restrictions))
        )
        self.priority = RolePriority.coerce(priority)

    @property
    def role_restrictions(self) -> Mapping[str, tuple[RestrictionGroup, ...]]:
        return self._restrictions

    def set_role_restrictions(self, role_restrictions: Mapping[str, Any] | None) -> None:
        """Replace the whole policy table; resolutions in flight keep their snapshot."""
        snapshot = MappingProxyType(freeze_restrictions(role_restrictions))
        with self._lock:
            self._restrictions = snapshot
        logger.debug("Role restrictions replaced: %d roles", len(snapshot))

    def select_role(
        self,
        context: RequestContext | Mapping[str, Any] | None,
        restrictions: Mapping[str, tuple[RestrictionGroup, ...]] | None = None,
    ) -> str | None:
        ctx = RequestContext.coerce(context)
        table = self._restrictions if restrictions is None else restrictions
        candidates = [role for role in context_roles(ctx) if role in table]
        return select_role(candidates, self.priority)

    def resolve_policy(
        self,
        context: RequestContext | Mapping[str, Any] | None,
        caller_inputs: Mapping[str, Any] | None = None,
    ) -> ResolvedPolicy:
        ctx = RequestContext.coerce(context)
        restrictions = self._restrictions
        role = self.select_role(ctx, restrictions)
        if role is None:
            if restrictions:
                logger.info(
                    "No row restriction matches roles %s", list(context_roles(ctx))
                )
            return ResolvedPolicy()
        groups = restrictions[role]
        if not groups:
            return ResolvedPolicy(role=role)
        group = groups[0]
        filters = group_filters(group, ctx, caller_inputs or {})
        logger.debug(
            "Applied row restriction for role %r: %d conditions (%s)",
            role,
            len(group.conditions),
            group.combinator.value,
        )
        return ResolvedPolicy(role=role, group=group, filters=tuple(filters))

    def resolve(
        self,
        context: RequestContext | Mapping[str, Any] | None,
        caller_inputs: Mapping[str, Any] | None = None,
    ) -> list[FilterLike]:
        return list(self.resolve_policy(context, caller_inputs).filters)

    def exposed_conditions(
        self, context: RequestContext | Mapping[str, Any] | None
    ) -> list[RLSCondition]:
        restrictions = self._restrictions
        role = self.select_role(context, restrictions)
        if role is None or not restrictions[role]:
            return []
        return [c for c in restrictions[role][0].conditions if c.exposed]


def resolve_policy_filters(
    role_restrictions: Mapping[str, Any] | None,
    context: RequestContext | Mapping[str, Any] | None,
    caller_inputs: Mapping[str, Any] | None = None,
    *,
    priority: RolePriority | Sequence[str] | Mapping[str, int] | None = None,
) -> list[FilterLike]:
    """One-shot resolution without keeping a resolver around."""
    resolver = RLSPolicyResolver(role_restrictions, priority=priority)
    return resolver.resolve(context, caller_inputs)


__all__ = [
    "DEFAULT_ROLES",
    "RLSPolicyResolver",
    "ResolvedPolicy",
    "condition_filter",
    "resolve_policy_filters",
    "validate_exposed_input",
]
