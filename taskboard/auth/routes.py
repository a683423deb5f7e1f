# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/auth/register        - Create account, get a session token
#   POST /api/auth/login           - Get a session token
#   POST /api/auth/forgot-password - Request a password reset token
#   POST /api/auth/reset-password  - Reset password with token
#
# =============================================================================

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import get_user_service
from taskboard.config import get_settings
from taskboard.core.models import Document, UserPublic
from taskboard.core.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from taskboard.services import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Response Models
# =============================================================================

class AuthResponse(Document):
    message: str
    user: UserPublic
    token: str


class MessageResponse(Document):
    message: str
    reset_token: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    users: UserService = Depends(get_user_service),
):
    """Create a new account. Returns a session token on success."""
    user, token = await users.register(data)
    return AuthResponse(message="User created", user=user.to_public(), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """Authenticate and get a session token."""
    user, token = await users.login(data)
    return AuthResponse(message="Logged in", user=user.to_public(), token=token)


@router.post("/forgot-password", response_model=MessageResponse, response_model_exclude_none=True)
async def forgot_password(
    data: ForgotPasswordRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Request a password reset.
    
    Always returns the same message to prevent email enumeration.
    Outside production the token is echoed back, since there is no
    mail transport to deliver it.
    """
    token = await users.request_password_reset(data.email)
    
    response = MessageResponse(
        message="If an account exists with this email, a reset link has been sent"
    )
    if token and not get_settings().is_production:
        response.reset_token = token
    return response


@router.post("/reset-password", response_model=MessageResponse, response_model_exclude_none=True)
async def reset_password(
    data: ResetPasswordRequest,
    users: UserService = Depends(get_user_service),
):
    """Reset password using a token from /forgot-password."""
    await users.reset_password(data.token, data.new_password)
    return MessageResponse(message="Password reset successfully")
