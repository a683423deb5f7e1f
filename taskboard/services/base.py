"""
Base class for all services.

Services own one entity each and follow the same sequence for every
operation: load -> authorize -> mutate -> persist. They raise the domain
errors from taskboard.core.errors and never deal with HTTP.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from pydantic import BaseModel

from taskboard.auth.capabilities import THREE_TIER, RoleHierarchy
from taskboard.auth.context import AuthContext
from taskboard.core.errors import NotFoundError
from taskboard.core.models import Project
from taskboard.storage.base import Collections, StorageProvider

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class Service:
    """
    Shared plumbing for the entity services.
    
    Example:
        class TicketService(Service):
            async def get_ticket(self, user_id, ticket_id):
                ticket = await self._load(Collections.TICKETS, ticket_id, Ticket, "Ticket")
                _, ctx = await self._project_context(user_id, ticket.project_id)
                ctx.require(Action.TICKET_LIST)
                return ticket
    """
    
    def __init__(self, storage: StorageProvider, hierarchy: RoleHierarchy = THREE_TIER):
        self.storage = storage
        self.hierarchy = hierarchy
    
    @property
    def db(self):
        return self.storage.metadata
    
    async def _load(self, collection: str, id: str, model: type[M], label: str) -> M:
        """Fetch one document and validate it, or raise NotFoundError."""
        doc = await self.db.get(collection, id)
        if doc is None:
            raise NotFoundError(f"{label} not found")
        return model.model_validate(doc)
    
    async def _save(self, collection: str, obj: BaseModel) -> None:
        await self.db.save(collection, obj.id, obj.model_dump())
    
    async def _load_project(self, project_id: str) -> Project:
        return await self._load(Collections.PROJECTS, project_id, Project, "Project")
    
    def context(self, user_id: str, project: Project) -> AuthContext:
        return AuthContext.for_project(user_id, project, self.hierarchy)
    
    async def _project_context(self, user_id: str, project_id: str) -> tuple[Project, AuthContext]:
        """Load a project fresh and build the caller's context for it."""
        project = await self._load_project(project_id)
        return project, self.context(user_id, project)
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(hierarchy={self.hierarchy!r})>"
