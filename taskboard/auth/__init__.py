"""
Authentication and authorization.

Design principles:
1. One pure decision function (`authorize`) for every resource
2. Role hierarchy is data, not code, so it can be reconfigured
3. Services supply already-loaded facts; the engine never fetches
4. Bearer tokens are verified statelessly
"""

from taskboard.auth.capabilities import (
    Action,
    ActionRule,
    ProjectRole,
    RoleHierarchy,
    THREE_TIER,
    TWO_TIER,
    get_hierarchy,
)
from taskboard.auth.policies import (
    Decision,
    authorize,
    role_of,
    get_current_user_id,
)
from taskboard.auth.context import AuthContext
from taskboard.auth.jwt import (
    create_session_token,
    verify_session,
    hash_password,
    verify_password,
)

__all__ = [
    # Engine
    "authorize",
    "role_of",
    "Decision",
    "AuthContext",
    "get_current_user_id",
    # Types
    "Action",
    "ActionRule",
    "ProjectRole",
    "RoleHierarchy",
    "THREE_TIER",
    "TWO_TIER",
    "get_hierarchy",
    # Credentials
    "create_session_token",
    "verify_session",
    "hash_password",
    "verify_password",
]
