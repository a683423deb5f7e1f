"""
Project Service.

Project lifecycle and membership. Every mutation reloads the project and
re-checks the caller's role through the authorization engine.
"""

from __future__ import annotations

import logging

from taskboard.auth.capabilities import Action, ProjectRole
from taskboard.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from taskboard.core.models import Member, Project, User
from taskboard.core.schemas import MemberAdd, ProjectCreate, ProjectUpdate
from taskboard.core.utils import normalize_email
from taskboard.services.base import Service
from taskboard.storage.base import Collections

logger = logging.getLogger(__name__)


class ProjectService(Service):
    """Projects and their membership lists."""
    
    # =========================================================================
    # Lifecycle
    # =========================================================================
    
    async def create_project(self, owner_id: str, data: ProjectCreate) -> Project:
        """Create a project whose only member is its owner."""
        project = Project(
            title=data.title,
            description=data.description,
            status=data.status,
            created_by=owner_id,
            members=[Member(user_id=owner_id, role=ProjectRole.OWNER)],
        )
        await self._save(Collections.PROJECTS, project)
        logger.info(f"Project {project.id} created by {owner_id}")
        return project
    
    async def list_projects(self, user_id: str) -> list[Project]:
        """Every project user_id is a member of, newest first."""
        docs = await self.db.query(Collections.PROJECTS, {"member_ids": user_id})
        projects = [Project.model_validate(d) for d in docs]
        return sorted(projects, key=lambda p: p.created_at, reverse=True)
    
    async def get_project(self, user_id: str, project_id: str) -> Project:
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.PROJECT_VIEW)
        return project
    
    async def update_project(self, user_id: str, project_id: str, data: ProjectUpdate) -> Project:
        """Apply a partial update. An empty patch changes nothing."""
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.PROJECT_UPDATE)
        
        changes = data.patch()
        if not changes:
            return project
        
        project.update(**changes)
        await self._save(Collections.PROJECTS, project)
        logger.info(f"Project {project_id} updated by {user_id}: {sorted(changes)}")
        return project
    
    async def delete_project(self, user_id: str, project_id: str) -> None:
        """
        Delete a project and everything scoped to it.
        
        Children go first (comments, tickets, labels), the project last, so
        a failure part way leaves the project in place rather than orphans.
        Already-deleted children are not restored.
        """
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.PROJECT_DELETE)
        
        steps = [
            (Collections.COMMENTS, {"project_id": project.id}),
            (Collections.TICKETS, {"project_id": project.id}),
            (Collections.LABELS, {"project_id": project.id}),
        ]
        try:
            for collection, filters in steps:
                count = await self.db.delete_many(collection, filters)
                logger.debug(f"Deleted {count} {collection} of project {project.id}")
            await self.db.delete(Collections.PROJECTS, project.id)
        except Exception as e:
            logger.exception(f"Cascade delete of project {project.id} failed")
            raise InternalError("Project deletion failed") from e
        
        logger.info(f"Project {project.id} deleted by {user_id}")
    
    # =========================================================================
    # Membership
    # =========================================================================
    
    async def _resolve_user(self, target: MemberAdd) -> User:
        if target.user_id:
            doc = await self.db.get(Collections.USERS, target.user_id)
        else:
            docs = await self.db.query(
                Collections.USERS, {"email": normalize_email(target.email)}, limit=1
            )
            doc = docs[0] if docs else None
        if doc is None:
            raise NotFoundError("User not found")
        return User.model_validate(doc)
    
    def _require_admin_tier(self) -> None:
        if ProjectRole.ADMIN not in self.hierarchy:
            raise ValidationError("admin role is not enabled")
    
    async def add_member(self, user_id: str, project_id: str, target: MemberAdd) -> Project:
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.MEMBER_ADD)
        
        user = await self._resolve_user(target)
        if project.get_member(user.id):
            raise ConflictError("User is already a member of this project")
        
        project.members.append(Member(user_id=user.id, role=ProjectRole.MEMBER))
        project.update()
        await self._save(Collections.PROJECTS, project)
        logger.info(f"{user.id} added to project {project_id} by {user_id}")
        return project
    
    async def remove_member(self, user_id: str, project_id: str, member_id: str) -> Project:
        """Remove a member entirely. The owner can never be removed."""
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.MEMBER_REMOVE, subject_id=member_id)
        
        if not project.get_member(member_id):
            raise NotFoundError("Member not found")
        
        project.members = [m for m in project.members if m.user_id != member_id]
        project.update()
        await self._save(Collections.PROJECTS, project)
        logger.info(f"{member_id} removed from project {project_id} by {user_id}")
        return project
    
    async def add_admin(self, user_id: str, project_id: str, target: MemberAdd) -> Project:
        """Promote a member to admin, or add a new user directly as admin."""
        self._require_admin_tier()
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.ADMIN_ADD)
        
        user = await self._resolve_user(target)
        # Re-check against the target now that we know who it is
        ctx.require(Action.ADMIN_ADD, subject_id=user.id)
        
        member = project.get_member(user.id)
        if member is None:
            project.members.append(Member(user_id=user.id, role=ProjectRole.ADMIN))
        elif member.role == ProjectRole.ADMIN:
            raise ConflictError("User is already an admin")
        else:
            member.role = ProjectRole.ADMIN
        
        project.update()
        await self._save(Collections.PROJECTS, project)
        logger.info(f"{user.id} made admin of project {project_id} by {user_id}")
        return project
    
    async def remove_admin(self, user_id: str, project_id: str, admin_id: str) -> Project:
        """Demote an admin to plain member."""
        self._require_admin_tier()
        project, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.ADMIN_REMOVE, subject_id=admin_id)
        
        member = project.get_member(admin_id)
        if member is None or member.role != ProjectRole.ADMIN:
            raise NotFoundError("Admin not found")
        
        member.role = ProjectRole.MEMBER
        project.update()
        await self._save(Collections.PROJECTS, project)
        logger.info(f"{admin_id} demoted in project {project_id} by {user_id}")
        return project
