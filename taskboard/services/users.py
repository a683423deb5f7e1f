"""
User Service.

Registration, login, profile and password reset. Owns the users
collection (identity store) and issues session tokens.
"""

from __future__ import annotations

import logging

from taskboard.auth.jwt import (
    create_reset_token,
    create_session_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from taskboard.config import get_settings
from taskboard.core.errors import AuthError, ConflictError, ValidationError
from taskboard.core.models import User, UserSummary
from taskboard.core.schemas import LoginRequest, ProfileUpdate, RegisterRequest
from taskboard.core.utils import normalize_email, utc_now
from taskboard.services.base import Service
from taskboard.storage.base import Collections, DuplicateKeyError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class UserService(Service):
    """Identity store plus credential handling."""
    
    # =========================================================================
    # Lookup
    # =========================================================================
    
    async def get_user(self, user_id: str) -> User:
        return await self._load(Collections.USERS, user_id, User, "User")
    
    async def find_by_email(self, email: str) -> User | None:
        docs = await self.db.query(Collections.USERS, {"email": normalize_email(email)}, limit=1)
        return User.model_validate(docs[0]) if docs else None
    
    async def search(self, email_fragment: str) -> list[UserSummary]:
        """Case-insensitive partial match on email."""
        fragment = email_fragment.strip().lower()
        if not fragment:
            raise ValidationError("email is required")
        
        limit = get_settings().user_search_limit
        results: list[UserSummary] = []
        for doc in await self.db.query(Collections.USERS):
            if fragment in doc.get("email", ""):
                results.append(User.model_validate(doc).to_summary())
                if len(results) >= limit:
                    break
        return results
    
    # =========================================================================
    # Credentials
    # =========================================================================
    
    async def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Create an account and return it with a session token.
        
        Raises:
            ConflictError: the email is already registered (any casing)
        """
        email = normalize_email(data.email)
        if await self.find_by_email(email):
            raise ConflictError("Email already registered")
        
        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            email=email,
            password_hash=hash_password(data.password),
        )
        
        try:
            await self._save(Collections.USERS, user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise ConflictError("Email already registered")
        
        logger.info(f"Registered user {user.id}")
        return user, create_session_token(user.id)
    
    async def login(self, data: LoginRequest) -> tuple[User, str]:
        """
        Authenticate by email and password.
        
        Unknown email and wrong password fail identically.
        """
        user = await self.find_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)
        
        return user, create_session_token(user.id)
    
    # =========================================================================
    # Profile
    # =========================================================================
    
    async def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        user = await self.get_user(user_id)
        changes = data.patch()
        if not changes:
            return user
        
        changes["updated_at"] = utc_now()
        await self.db.update(Collections.USERS, user_id, changes)
        return await self.get_user(user_id)
    
    # =========================================================================
    # Password reset
    # =========================================================================
    
    async def request_password_reset(self, email: str) -> str | None:
        """
        Issue a reset token for the account with this email.
        
        Returns the raw token, or None when no such account exists.
        Only a hash of the token is stored.
        """
        user = await self.find_by_email(email)
        if not user:
            return None
        
        token, token_hash, expires = create_reset_token()
        await self.db.update(Collections.USERS, user.id, {
            "reset_token_hash": token_hash,
            "reset_token_expires_at": expires,
        })
        logger.info(f"Password reset requested for {user.id}")
        return token
    
    async def reset_password(self, token: str, new_password: str) -> User:
        docs = await self.db.query(
            Collections.USERS, {"reset_token_hash": hash_reset_token(token)}, limit=1
        )
        if not docs:
            raise ValidationError("Invalid or expired reset token")
        
        user = User.model_validate(docs[0])
        if not user.reset_token_expires_at or user.reset_token_expires_at < utc_now():
            raise ValidationError("Invalid or expired reset token")
        
        await self.db.update(Collections.USERS, user.id, {
            "password_hash": hash_password(new_password),
            "reset_token_hash": None,
            "reset_token_expires_at": None,
            "updated_at": utc_now(),
        })
        logger.info(f"Password reset completed for {user.id}")
        return await self.get_user(user.id)
