"""
Roles, actions and the rules that connect them.

This defines WHAT each role may do, not HOW we check it.
The actual checking happens in policies.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class ProjectRole(str, Enum):
    """Role a user has within a specific project."""
    
    OWNER = "owner"      # Exactly one per project, cannot be removed or demoted
    ADMIN = "admin"      # Can edit the project and manage plain members
    MEMBER = "member"    # Can work on tickets and comments


class Action(str, Enum):
    """Everything a caller can attempt on a project or its contents."""
    
    # Project
    PROJECT_VIEW = "project.view"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"
    
    # Membership
    MEMBER_ADD = "member.add"
    MEMBER_REMOVE = "member.remove"
    ADMIN_ADD = "admin.add"
    ADMIN_REMOVE = "admin.remove"
    
    # Tickets
    TICKET_LIST = "ticket.list"
    TICKET_CREATE = "ticket.create"
    TICKET_UPDATE = "ticket.update"
    TICKET_DELETE = "ticket.delete"
    
    # Comments
    COMMENT_READ = "comment.read"
    COMMENT_CREATE = "comment.create"
    COMMENT_UPDATE = "comment.update"
    COMMENT_DELETE = "comment.delete"
    
    # Labels
    LABEL_READ = "label.read"
    LABEL_CREATE = "label.create"
    LABEL_DELETE = "label.delete"


# =============================================================================
# Role Hierarchy
# =============================================================================


# Canonical order, least privileged first
ROLE_ORDER: tuple[ProjectRole, ...] = (
    ProjectRole.MEMBER,
    ProjectRole.ADMIN,
    ProjectRole.OWNER,
)


class RoleHierarchy:
    """
    An ordered set of enabled roles.
    
    Required roles missing from the hierarchy collapse upwards: in a
    two-tier hierarchy (member, owner) anything that needs "admin" needs
    "owner". Held roles collapse downwards, so a stored "admin" acts as
    a plain member there.
    """
    
    def __init__(self, tiers: Iterable[ProjectRole]):
        tiers = tuple(tiers)
        if ProjectRole.OWNER not in tiers or ProjectRole.MEMBER not in tiers:
            raise ValueError("A role hierarchy needs at least member and owner")
        self.tiers = tuple(r for r in ROLE_ORDER if r in tiers)
    
    def __contains__(self, role: ProjectRole) -> bool:
        return role in self.tiers
    
    def ceil(self, role: ProjectRole) -> ProjectRole:
        """Lowest enabled tier at or above role (used for requirements)."""
        start = ROLE_ORDER.index(role)
        for candidate in ROLE_ORDER[start:]:
            if candidate in self.tiers:
                return candidate
        return ProjectRole.OWNER

    def floor(self, role: ProjectRole) -> ProjectRole:
        """Highest enabled tier at or below role (used for held roles)."""
        stop = ROLE_ORDER.index(role)
        for candidate in reversed(ROLE_ORDER[:stop + 1]):
            if candidate in self.tiers:
                return candidate
        return ProjectRole.MEMBER

    def rank(self, role: ProjectRole) -> int:
        return self.tiers.index(self.floor(role)) + 1

    def at_least(self, role: ProjectRole, required: ProjectRole) -> bool:
        return self.rank(role) >= self.tiers.index(self.ceil(required)) + 1

    def outranks(self, role: ProjectRole, other: ProjectRole) -> bool:
        return self.rank(role) > self.rank(other)
    
    def __repr__(self) -> str:
        return f"<RoleHierarchy({', '.join(r.value for r in self.tiers)})>"


THREE_TIER = RoleHierarchy([ProjectRole.MEMBER, ProjectRole.ADMIN, ProjectRole.OWNER])
TWO_TIER = RoleHierarchy([ProjectRole.MEMBER, ProjectRole.OWNER])

ROLE_MODELS: dict[str, RoleHierarchy] = {
    "three_tier": THREE_TIER,
    "two_tier": TWO_TIER,
}


def get_hierarchy(role_model: str) -> RoleHierarchy:
    try:
        return ROLE_MODELS[role_model]
    except KeyError:
        raise ValueError(
            f"Unknown role model '{role_model}'. Choose from: {sorted(ROLE_MODELS)}"
        )


# =============================================================================
# Action Rules
# =============================================================================


@dataclass(frozen=True)
class ActionRule:
    """
    How an action is decided.
    
    min_role: lowest role allowed (None for ownership-based actions)
    ownership: allowed only for the resource's creator/author
    manages_member: caller must also outrank the target member's role
    """
    
    min_role: ProjectRole | None = None
    ownership: bool = False
    manages_member: bool = False


ACTION_RULES: dict[Action, ActionRule] = {
    Action.PROJECT_VIEW: ActionRule(ProjectRole.MEMBER),
    Action.PROJECT_UPDATE: ActionRule(ProjectRole.ADMIN),
    Action.PROJECT_DELETE: ActionRule(ProjectRole.OWNER),
    
    Action.MEMBER_ADD: ActionRule(ProjectRole.ADMIN, manages_member=True),
    Action.MEMBER_REMOVE: ActionRule(ProjectRole.ADMIN, manages_member=True),
    Action.ADMIN_ADD: ActionRule(ProjectRole.OWNER, manages_member=True),
    Action.ADMIN_REMOVE: ActionRule(ProjectRole.OWNER, manages_member=True),
    
    Action.TICKET_LIST: ActionRule(ProjectRole.MEMBER),
    Action.TICKET_CREATE: ActionRule(ProjectRole.MEMBER),
    Action.TICKET_UPDATE: ActionRule(ProjectRole.MEMBER),
    Action.TICKET_DELETE: ActionRule(ownership=True),
    
    Action.COMMENT_READ: ActionRule(ProjectRole.MEMBER),
    Action.COMMENT_CREATE: ActionRule(ProjectRole.MEMBER),
    Action.COMMENT_UPDATE: ActionRule(ownership=True),
    Action.COMMENT_DELETE: ActionRule(ownership=True),
    
    Action.LABEL_READ: ActionRule(ProjectRole.MEMBER),
    Action.LABEL_CREATE: ActionRule(ProjectRole.MEMBER),
    Action.LABEL_DELETE: ActionRule(ProjectRole.ADMIN),
}
