"""
Comment Service.

Threaded comments on tickets. Members of the ticket's project can read
and post; only the author can edit or delete a comment.
"""

from __future__ import annotations

import logging

from taskboard.auth.capabilities import Action
from taskboard.auth.context import AuthContext
from taskboard.core.models import Comment, Ticket
from taskboard.core.schemas import CommentCreate, CommentUpdate
from taskboard.core.utils import utc_now
from taskboard.services.base import Service
from taskboard.storage.base import Collections

logger = logging.getLogger(__name__)


class CommentService(Service):
    """Comments scoped to tickets."""
    
    async def _load_comment(self, comment_id: str) -> Comment:
        return await self._load(Collections.COMMENTS, comment_id, Comment, "Comment")
    
    async def _ticket_context(self, user_id: str, ticket_id: str) -> tuple[Ticket, AuthContext]:
        ticket = await self._load(Collections.TICKETS, ticket_id, Ticket, "Ticket")
        _, ctx = await self._project_context(user_id, ticket.project_id)
        return ticket, ctx
    
    async def list_comments(self, user_id: str, ticket_id: str) -> list[Comment]:
        """A ticket's thread, oldest first."""
        ticket, ctx = await self._ticket_context(user_id, ticket_id)
        ctx.require(Action.COMMENT_READ)
        
        docs = await self.db.query(Collections.COMMENTS, {"ticket_id": ticket.id})
        comments = [Comment.model_validate(d) for d in docs]
        return sorted(comments, key=lambda c: c.created_at)
    
    async def get_comment(self, user_id: str, comment_id: str) -> Comment:
        comment = await self._load_comment(comment_id)
        _, ctx = await self._project_context(user_id, comment.project_id)
        ctx.require(Action.COMMENT_READ)
        return comment
    
    async def create_comment(self, user_id: str, data: CommentCreate) -> Comment:
        ticket, ctx = await self._ticket_context(user_id, data.ticket_id)
        ctx.require(Action.COMMENT_CREATE)
        
        comment = Comment(
            ticket_id=ticket.id,
            project_id=ticket.project_id,
            author_id=user_id,
            content=data.content,
        )
        await self._save(Collections.COMMENTS, comment)
        logger.info(f"Comment {comment.id} posted on {ticket.id} by {user_id}")
        return comment
    
    async def update_comment(self, user_id: str, comment_id: str, data: CommentUpdate) -> Comment:
        """Author only; no role overrides this."""
        comment = await self._load_comment(comment_id)
        _, ctx = await self._project_context(user_id, comment.project_id)
        ctx.require(Action.COMMENT_UPDATE, resource_owner_id=comment.author_id)
        
        comment.content = data.content
        comment.updated_at = utc_now()
        await self._save(Collections.COMMENTS, comment)
        return comment
    
    async def delete_comment(self, user_id: str, comment_id: str) -> None:
        """Author only; no role overrides this."""
        comment = await self._load_comment(comment_id)
        _, ctx = await self._project_context(user_id, comment.project_id)
        ctx.require(Action.COMMENT_DELETE, resource_owner_id=comment.author_id)
        
        await self.db.delete(Collections.COMMENTS, comment.id)
        logger.info(f"Comment {comment_id} deleted by {user_id}")
