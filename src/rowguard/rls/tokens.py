"""Context tokens: condition values substituted from the acting user."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import RequestContext

TOKEN_PREFIXES = ("currentUser.", "$context.user.")


def token_attribute(value: Any) -> str | None:
    """Return the user attribute named by ``value``, or ``None`` for literals."""
    if not isinstance(value, str):
        return None
    for prefix in TOKEN_PREFIXES:
        if value.startswith(prefix):
            name = value[len(prefix):]
            return name or None
    return None


def is_context_token(value: Any) -> bool:
    return token_attribute(value) is not None


def resolve_value(value: Any, context: RequestContext) -> Any:
    """
    Substitute a context token with the user's attribute.

    Tokens that name a missing attribute, or appear without a user,
    resolve to ``None``.
    """
    name = token_attribute(value)
    if name is None:
        return value
    if context.user is None:
        return None
    return context.user.attribute(name)
