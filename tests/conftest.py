"""Shared fixtures for rowguard tests."""

from __future__ import annotations

import pytest

from rowguard.execution import RecordingExecutor
from rowguard.rls import RequestContext, RLSPolicyResolver


@pytest.fixture
def role_restrictions():
    """Two numeric roles and a named role with an OR group."""
    return {
        "3": [
            {
                "combinator": "AND",
                "conditions": [
                    {"field": "department", "operator": "eq", "value": "currentUser.department"},
                ],
            }
        ],
        "5": [
            {
                "combinator": "AND",
                "conditions": [
                    {"field": "owner_id", "operator": "eq", "value": "currentUser.id"},
                    {
                        "field": "priority",
                        "operator": "eq",
                        "value": "high",
                        "exposed": True,
                        "metadata": {"type": "string", "options": ["high", "urgent"]},
                    },
                ],
            }
        ],
        "support": [
            {
                "combinator": "OR",
                "conditions": [
                    {"field": "status", "operator": "eq", "value": "open"},
                    {"field": "assignee_id", "operator": "eq", "value": "$context.user.id"},
                ],
            }
        ],
    }


@pytest.fixture
def resolver(role_restrictions):
    return RLSPolicyResolver(role_restrictions)


@pytest.fixture
def alice():
    return RequestContext.model_validate(
        {"user": {"id": 7, "roles": ["3", "5"], "department": "sales"}}
    )


@pytest.fixture
def executor():
    return RecordingExecutor()
