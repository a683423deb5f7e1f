"""
Ticket routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import get_caller_id, get_ticket_service
from taskboard.core.models import Ticket
from taskboard.core.schemas import TicketCreate, TicketUpdate
from taskboard.services import TicketService

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


@router.get("/project/{project_id}", response_model=list[Ticket])
async def list_project_tickets(
    project_id: str,
    user_id: str = Depends(get_caller_id),
    tickets: TicketService = Depends(get_ticket_service),
):
    """All tickets of a project, newest first."""
    return await tickets.list_tickets(user_id, project_id)


@router.get("/{ticket_id}", response_model=Ticket)
async def get_ticket(
    ticket_id: str,
    user_id: str = Depends(get_caller_id),
    tickets: TicketService = Depends(get_ticket_service),
):
    return await tickets.get_ticket(user_id, ticket_id)


@router.post("", response_model=Ticket, status_code=201)
async def create_ticket(
    data: TicketCreate,
    user_id: str = Depends(get_caller_id),
    tickets: TicketService = Depends(get_ticket_service),
):
    return await tickets.create_ticket(user_id, data)


@router.patch("/{ticket_id}", response_model=Ticket)
async def update_ticket(
    ticket_id: str,
    data: TicketUpdate,
    user_id: str = Depends(get_caller_id),
    tickets: TicketService = Depends(get_ticket_service),
):
    return await tickets.update_ticket(user_id, ticket_id, data)


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    user_id: str = Depends(get_caller_id),
    tickets: TicketService = Depends(get_ticket_service),
):
    """Only the ticket's creator may delete it."""
    await tickets.delete_ticket(user_id, ticket_id)
    return {"message": "Ticket deleted"}
