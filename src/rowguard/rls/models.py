"""
Row-level security policy models.

A role maps to an ordered list of restriction groups; only the first
group of the winning role is applied. Policies are plain pydantic value
objects so they can be loaded straight from JSON.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..operators import Combinator, FilterOperator


class ConditionValueType(str, Enum):
    NUMBER = "number"
    STRING = "string"


class ConditionMetadata(BaseModel):
    """Constraints on caller input for an exposed condition."""

    model_config = ConfigDict(frozen=True)

    type: ConditionValueType = ConditionValueType.STRING
    min: float | None = None
    max: float | None = None
    options: tuple[str, ...] | None = None


class RLSCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    operator: FilterOperator = FilterOperator.EQ
    value: Any = None
    exposed: bool = False
    metadata: ConditionMetadata | None = None

    @field_validator("operator", mode="before")
    @classmethod
    def _parse_operator(cls, value: Any) -> FilterOperator:
        return FilterOperator.parse(value)


class RestrictionGroup(BaseModel):
    """Conditions joined by exactly one combinator."""

    model_config = ConfigDict(frozen=True)

    conditions: tuple[RLSCondition, ...] = ()
    combinator: Combinator = Combinator.AND

    @field_validator("combinator", mode="before")
    @classmethod
    def _parse_combinator(cls, value: Any) -> Combinator:
        return Combinator.parse(value)


RoleRestrictions = Mapping[str, tuple[RestrictionGroup, ...]]


def freeze_restrictions(
    restrictions: Mapping[str, Any] | None,
) -> dict[str, tuple[RestrictionGroup, ...]]:
    """
    Normalize a role -> groups mapping (models or plain dicts) into
    immutable groups keyed by string role labels.
    """
    frozen: dict[str, tuple[RestrictionGroup, ...]] = {}
    for role, groups in (restrictions or {}).items():
        if isinstance(groups, (RestrictionGroup, Mapping)):
            groups = [groups]
        frozen[str(role)] = tuple(
            g if isinstance(g, RestrictionGroup) else RestrictionGroup.model_validate(g)
            for g in groups
        )
    return frozen


class UserContext(BaseModel):
    """The acting user. Unknown attributes are kept for token lookup."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: Any = None
    roles: tuple[str, ...] = ()
    department: Any = None

    @field_validator("roles", mode="before")
    @classmethod
    def _coerce_roles(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (str, int)):
            return (str(value),)
        return tuple(str(v) for v in value)

    def attribute(self, name: str) -> Any:
        """Look up a declared or extra attribute; missing names are ``None``."""
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name)


class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: UserContext | None = None
    tenant_id: str | None = Field(default=None, alias="tenantId")

    @classmethod
    def coerce(cls, value: RequestContext | Mapping[str, Any] | None) -> RequestContext:
        if value is None:
            return cls()
        if isinstance(value, RequestContext):
            return value
        return cls.model_validate(value)

    @property
    def roles(self) -> tuple[str, ...]:
        if self.user is None:
            return ()
        return self.user.roles


__all__ = [
    "ConditionMetadata",
    "ConditionValueType",
    "RLSCondition",
    "RequestContext",
    "RestrictionGroup",
    "RoleRestrictions",
    "UserContext",
    "freeze_restrictions",
]
