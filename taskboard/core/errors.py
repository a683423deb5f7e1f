"""
Error taxonomy.

Services raise these deliberately; the API layer maps each one to its
HTTP status code in a single place (see taskboard.api.app).
"""

from __future__ import annotations


class TaskBoardError(Exception):
    """Base class for every domain error."""
    
    status_code: int = 500
    default_message: str = "Internal server error"
    
    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskBoardError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Invalid request"


class ConflictError(TaskBoardError):
    """Duplicate unique key (e.g. email already registered)."""
    status_code = 400
    default_message = "Resource already exists"


class AuthError(TaskBoardError):
    """Missing, invalid or expired credentials."""
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(TaskBoardError):
    """Authenticated, but not allowed to perform the action."""
    status_code = 403
    default_message = "Access denied"


class NotFoundError(TaskBoardError):
    """Entity does not exist."""
    status_code = 404
    default_message = "Not found"


class InternalError(TaskBoardError):
    """Unexpected persistence or runtime fault."""
    status_code = 500
