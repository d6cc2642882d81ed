from .models import (
    ConditionMetadata,
    ConditionValueType,
    RequestContext,
    RestrictionGroup,
    RLSCondition,
    RoleRestrictions,
    UserContext,
    freeze_restrictions,
)
from .priority import RolePriority, select_role
from .resolver import (
    DEFAULT_ROLES,
    ResolvedPolicy,
    RLSPolicyResolver,
    resolve_policy_filters,
    validate_exposed_input,
)
from .tokens import is_context_token, resolve_value

__all__ = [
    "DEFAULT_ROLES",
    "ConditionMetadata",
    "ConditionValueType",
    "RLSCondition",
    "RLSPolicyResolver",
    "RequestContext",
    "ResolvedPolicy",
    "RestrictionGroup",
    "RolePriority",
    "RoleRestrictions",
    "UserContext",
    "freeze_restrictions",
    "is_context_token",
    "resolve_policy_filters",
    "resolve_value",
    "select_role",
    "validate_exposed_input",
]
