"""
Services - one per entity, all sharing the authorization engine.
"""

from taskboard.services.base import Service
from taskboard.services.users import UserService
from taskboard.services.projects import ProjectService
from taskboard.services.tickets import TicketService
from taskboard.services.comments import CommentService
from taskboard.services.labels import LabelService

__all__ = [
    "Service",
    "UserService",
    "ProjectService",
    "TicketService",
    "CommentService",
    "LabelService",
]
