"""
Core domain: models, errors and shared utilities.
"""

from taskboard.core.errors import (
    TaskBoardError,
    ValidationError,
    ConflictError,
    AuthError,
    AuthorizationError,
    NotFoundError,
    InternalError,
)
from taskboard.core.models import (
    User,
    UserPublic,
    UserSummary,
    Member,
    Project,
    ProjectStatus,
    Ticket,
    TicketStatus,
    Comment,
    Label,
)

__all__ = [
    # Errors
    "TaskBoardError",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "AuthorizationError",
    "NotFoundError",
    "InternalError",
    # Models
    "User",
    "UserPublic",
    "UserSummary",
    "Member",
    "Project",
    "ProjectStatus",
    "Ticket",
    "TicketStatus",
    "Comment",
    "Label",
]
