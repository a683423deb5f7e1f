"""
Ticket Service.

Tickets live inside a project. Any member may create, read and update
them; only the creator may delete one, whatever their role.
"""

from __future__ import annotations

import logging

from taskboard.auth.capabilities import Action
from taskboard.core.errors import InternalError, ValidationError
from taskboard.core.models import Ticket
from taskboard.core.schemas import TicketCreate, TicketUpdate
from taskboard.services.base import Service
from taskboard.storage.base import Collections

logger = logging.getLogger(__name__)


class TicketService(Service):
    """Tickets scoped to projects."""
    
    async def _load_ticket(self, ticket_id: str) -> Ticket:
        return await self._load(Collections.TICKETS, ticket_id, Ticket, "Ticket")
    
    async def _check_labels(self, project_id: str, label_ids: list[str]) -> list[str]:
        """Labels must exist and belong to the ticket's project."""
        unique_ids = list(dict.fromkeys(label_ids))
        for label_id in unique_ids:
            doc = await self.db.get(Collections.LABELS, label_id)
            if doc is None or doc.get("project_id") != project_id:
                raise ValidationError(f"Unknown label: {label_id}")
        return unique_ids
    
    # =========================================================================
    # Read
    # =========================================================================
    
    async def list_tickets(self, user_id: str, project_id: str) -> list[Ticket]:
        """All tickets of a project, newest first."""
        _, ctx = await self._project_context(user_id, project_id)
        ctx.require(Action.TICKET_LIST)
        
        docs = await self.db.query(Collections.TICKETS, {"project_id": project_id})
        tickets = [Ticket.model_validate(d) for d in docs]
        return sorted(tickets, key=lambda t: t.created_at, reverse=True)
    
    async def get_ticket(self, user_id: str, ticket_id: str) -> Ticket:
        # Existence first: a missing ticket is 404 for everyone
        ticket = await self._load_ticket(ticket_id)
        _, ctx = await self._project_context(user_id, ticket.project_id)
        ctx.require(Action.TICKET_LIST)
        return ticket
    
    # =========================================================================
    # Write
    # =========================================================================
    
    async def create_ticket(self, user_id: str, data: TicketCreate) -> Ticket:
        """
        Create a ticket in data.project_id.
        
        Assignees are stored as given; they are not required to be
        project members.
        """
        project, ctx = await self._project_context(user_id, data.project_id)
        ctx.require(Action.TICKET_CREATE)
        
        ticket = Ticket(
            project_id=project.id,
            title=data.title,
            description=data.description,
            estimation_date=data.estimation_date,
            assignees=list(dict.fromkeys(data.assignees)),
            labels=await self._check_labels(project.id, data.labels),
            created_by=user_id,
        )
        await self._save(Collections.TICKETS, ticket)
        logger.info(f"Ticket {ticket.id} created in {project.id} by {user_id}")
        return ticket
    
    async def update_ticket(self, user_id: str, ticket_id: str, data: TicketUpdate) -> Ticket:
        """Partial update. Status may move between any two values."""
        ticket = await self._load_ticket(ticket_id)
        _, ctx = await self._project_context(user_id, ticket.project_id)
        ctx.require(Action.TICKET_UPDATE)
        
        changes = data.patch()
        if not changes:
            return ticket
        
        if "labels" in changes:
            changes["labels"] = await self._check_labels(ticket.project_id, changes["labels"])
        if "assignees" in changes:
            changes["assignees"] = list(dict.fromkeys(changes["assignees"]))
        
        ticket.update(**changes)
        await self._save(Collections.TICKETS, ticket)
        logger.info(f"Ticket {ticket_id} updated by {user_id}: {sorted(changes)}")
        return ticket
    
    async def delete_ticket(self, user_id: str, ticket_id: str) -> None:
        """Creator only. Deletes the ticket's comments first."""
        ticket = await self._load_ticket(ticket_id)
        _, ctx = await self._project_context(user_id, ticket.project_id)
        ctx.require(Action.TICKET_DELETE, resource_owner_id=ticket.created_by)
        
        try:
            count = await self.db.delete_many(Collections.COMMENTS, {"ticket_id": ticket.id})
            await self.db.delete(Collections.TICKETS, ticket.id)
        except Exception as e:
            logger.exception(f"Cascade delete of ticket {ticket.id} failed")
            raise InternalError("Ticket deletion failed") from e
        
        logger.info(f"Ticket {ticket_id} deleted by {user_id} ({count} comments)")
