"""
Auth context - the "who can do what" for one project.

Built by services from a freshly loaded project, never cached across
requests, so role changes take effect immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from taskboard.auth.capabilities import THREE_TIER, Action, ProjectRole, RoleHierarchy
from taskboard.auth.policies import Decision, authorize, role_of
from taskboard.core.errors import AuthorizationError

if TYPE_CHECKING:
    from taskboard.core.models import Member, Project

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """
    Authorization context for a caller within a project.
    
    Usage in services:
        ctx = AuthContext.for_project(user_id, project, hierarchy)
        ctx.require(Action.TICKET_CREATE)
        if ctx.can(Action.PROJECT_DELETE):
            ...
    """
    
    user_id: str
    project_id: str
    members: list[Member] = field(default_factory=list)
    hierarchy: RoleHierarchy = THREE_TIER
    
    @classmethod
    def for_project(
        cls,
        user_id: str,
        project: Project,
        hierarchy: RoleHierarchy = THREE_TIER,
    ) -> AuthContext:
        return cls(
            user_id=user_id,
            project_id=project.id,
            members=list(project.members),
            hierarchy=hierarchy,
        )
    
    @property
    def project_role(self) -> ProjectRole | None:
        return role_of(self.user_id, self.members)
    
    @property
    def is_member(self) -> bool:
        return self.project_role is not None
    
    @property
    def is_owner(self) -> bool:
        return self.project_role == ProjectRole.OWNER
    
    def check(
        self,
        action: Action,
        *,
        resource_owner_id: str | None = None,
        subject_id: str | None = None,
    ) -> Decision:
        return authorize(
            self.user_id,
            self.members,
            action,
            resource_owner_id=resource_owner_id,
            subject_id=subject_id,
            hierarchy=self.hierarchy,
        )
    
    def can(self, action: Action, **kwargs) -> bool:
        return bool(self.check(action, **kwargs))
    
    def require(self, action: Action, **kwargs) -> None:
        """Raise AuthorizationError unless the action is allowed."""
        decision = self.check(action, **kwargs)
        if not decision:
            logger.info(
                f"Denied {action.value} on {self.project_id} for {self.user_id}: {decision.reason}"
            )
            raise AuthorizationError("Access denied")
    
    def permissions(self) -> dict:
        """Role-based permissions, camelCase like the rest of the API."""
        return {
            "role": self.project_role.value if self.project_role else None,
            "canEdit": self.can(Action.PROJECT_UPDATE),
            "canDelete": self.can(Action.PROJECT_DELETE),
            "canManageMembers": self.can(Action.MEMBER_ADD),
            "canManageAdmins": self.can(Action.ADMIN_ADD),
        }
