"""
Comment routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import get_caller_id, get_comment_service
from taskboard.core.models import Comment
from taskboard.core.schemas import CommentCreate, CommentUpdate
from taskboard.services import CommentService

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/ticket/{ticket_id}", response_model=list[Comment])
async def list_ticket_comments(
    ticket_id: str,
    user_id: str = Depends(get_caller_id),
    comments: CommentService = Depends(get_comment_service),
):
    """A ticket's thread, oldest first."""
    return await comments.list_comments(user_id, ticket_id)


@router.get("/{comment_id}", response_model=Comment)
async def get_comment(
    comment_id: str,
    user_id: str = Depends(get_caller_id),
    comments: CommentService = Depends(get_comment_service),
):
    return await comments.get_comment(user_id, comment_id)


@router.post("", response_model=Comment, status_code=201)
async def create_comment(
    data: CommentCreate,
    user_id: str = Depends(get_caller_id),
    comments: CommentService = Depends(get_comment_service),
):
    return await comments.create_comment(user_id, data)


@router.patch("/{comment_id}", response_model=Comment)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    user_id: str = Depends(get_caller_id),
    comments: CommentService = Depends(get_comment_service),
):
    return await comments.update_comment(user_id, comment_id, data)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    user_id: str = Depends(get_caller_id),
    comments: CommentService = Depends(get_comment_service),
):
    await comments.delete_comment(user_id, comment_id)
    return {"message": "Comment deleted"}
