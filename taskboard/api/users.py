"""
User routes: own profile and user lookup (for inviting members).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from taskboard.api.dependencies import get_caller_id, get_user_service
from taskboard.core.models import UserPublic, UserSummary
from taskboard.core.schemas import ProfileUpdate
from taskboard.services import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
async def get_me(
    user_id: str = Depends(get_caller_id),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_user(user_id)
    return user.to_public()


@router.patch("/me", response_model=UserPublic)
async def update_me(
    data: ProfileUpdate,
    user_id: str = Depends(get_caller_id),
    users: UserService = Depends(get_user_service),
):
    user = await users.update_profile(user_id, data)
    return user.to_public()


@router.get("/search", response_model=list[UserSummary])
async def search_users(
    email: str = Query(default=""),
    user_id: str = Depends(get_caller_id),
    users: UserService = Depends(get_user_service),
):
    """Case-insensitive partial match on email."""
    return await users.search(email)
