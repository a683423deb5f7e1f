"""
Process-wide state and the FastAPI dependencies that expose it.

State is initialised explicitly by the app lifespan. Nothing here
connects lazily: using a dependency before startup is a bug.
"""

from __future__ import annotations

from fastapi import Depends

from taskboard.auth.policies import get_current_user_id
from taskboard.integrations.sentry import set_user
from taskboard.services import (
    CommentService,
    LabelService,
    ProjectService,
    TicketService,
    UserService,
)
from taskboard.storage import StorageProvider


class AppState:
    """Application state - initialized at startup."""
    
    storage: StorageProvider
    users: UserService
    projects: ProjectService
    tickets: TicketService
    comments: CommentService
    labels: LabelService


state = AppState()


def _get(name: str):
    try:
        return getattr(state, name)
    except AttributeError:
        raise RuntimeError(f"App state '{name}' used before startup")


def get_user_service() -> UserService:
    return _get("users")


def get_project_service() -> ProjectService:
    return _get("projects")


def get_ticket_service() -> TicketService:
    return _get("tickets")


def get_comment_service() -> CommentService:
    return _get("comments")


def get_label_service() -> LabelService:
    return _get("labels")


async def get_caller_id(user_id: str = Depends(get_current_user_id)) -> str:
    """Authenticated caller, tagged on error reports."""
    set_user(user_id)
    return user_id
