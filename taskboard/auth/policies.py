"""
Policies - the single authorization engine.

`authorize()` is a pure function of (caller, membership, action).
It never fetches anything: callers load the project (and the ticket or
comment, for ownership actions) and pass the facts in. Every mutating
operation on projects, tickets, comments and labels goes through it.

The FastAPI side is `get_current_user_id`, which turns a bearer token
into a user id for the route handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from taskboard.auth.capabilities import (
    ACTION_RULES,
    THREE_TIER,
    Action,
    ProjectRole,
    RoleHierarchy,
)
from taskboard.auth.jwt import verify_session

if TYPE_CHECKING:
    from taskboard.core.models import Member


# =============================================================================
# Decision
# =============================================================================


@dataclass(frozen=True)
class Decision:
    """
    Outcome of an authorization check.
    
    `reason` is for logs only. Clients always get a uniform "Access denied".
    """
    
    allowed: bool
    reason: str = ""
    
    def __bool__(self) -> bool:
        return self.allowed
    
    @classmethod
    def allow(cls) -> Decision:
        return cls(True)
    
    @classmethod
    def deny(cls, reason: str) -> Decision:
        return cls(False, reason)


def role_of(user_id: str | None, members: Iterable[Member]) -> ProjectRole | None:
    """The role user_id holds in a membership list, or None."""
    if user_id is None:
        return None
    for member in members:
        if member.user_id == user_id:
            return ProjectRole(member.role)
    return None


# =============================================================================
# The engine
# =============================================================================


def authorize(
    user_id: str,
    members: Iterable[Member],
    action: Action,
    *,
    resource_owner_id: str | None = None,
    subject_id: str | None = None,
    hierarchy: RoleHierarchy = THREE_TIER,
) -> Decision:
    """
    Decide whether user_id may perform action.
    
    Args:
        user_id: The caller
        members: The project's membership list, already loaded
        action: What the caller wants to do
        resource_owner_id: Creator/author, for ownership-based actions
        subject_id: Target user, for membership-management actions
        hierarchy: Enabled roles and their order
    
    Returns:
        Decision (truthy when allowed)
    """
    members = list(members)
    rule = ACTION_RULES[action]
    
    # Creator/author only, whatever the caller's role
    if rule.ownership:
        if resource_owner_id is not None and user_id == resource_owner_id:
            return Decision.allow()
        return Decision.deny(f"{action.value} is reserved to the resource's author")
    
    role = role_of(user_id, members)
    if role is None:
        return Decision.deny("not a project member")
    
    if not hierarchy.at_least(role, rule.min_role):
        return Decision.deny(
            f"{action.value} requires {hierarchy.ceil(rule.min_role).value}, caller is {role.value}"
        )
    
    if rule.manages_member and subject_id is not None:
        subject_role = role_of(subject_id, members)
        if subject_role == ProjectRole.OWNER:
            return Decision.deny("the project owner cannot be removed or demoted")
        if subject_role is not None and not hierarchy.outranks(role, subject_role):
            return Decision.deny(
                f"{role.value} cannot manage a member with role {subject_role.value}"
            )
    
    return Decision.allow()


# =============================================================================
# FastAPI dependency: bearer token -> user id
# =============================================================================


bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str:
    """Resolve the caller from `Authorization: Bearer <token>`."""
    token = credentials.credentials if credentials else None
    return verify_session(token)
