"""
Tests for registration, login, session tokens and password reset.
"""

from datetime import timedelta

import jwt
import pytest

from taskboard.auth.jwt import (
    create_session_token,
    decode_token,
    hash_password,
    verify_password,
    verify_session,
)
from taskboard.config import get_settings
from taskboard.core.errors import AuthError, ConflictError, ValidationError
from taskboard.core.schemas import LoginRequest, ProfileUpdate, RegisterRequest
from taskboard.core.utils import utc_now
from taskboard.storage import Collections

from conftest import make_user


def _sign(payload: dict, key: str | None = None) -> str:
    settings = get_settings()
    return jwt.encode(payload, key or settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


# =============================================================================
# Password hashing
# =============================================================================


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("hunter2")
        assert "hunter2" not in hashed
        assert verify_password("hunter2", hashed)
        assert not verify_password("hunter3", hashed)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-hash")


# =============================================================================
# Session tokens
# =============================================================================


class TestSessionTokens:
    def test_round_trip(self):
        token = create_session_token("user_abc")
        assert verify_session(token) == "user_abc"

    def test_seven_day_expiry(self):
        payload = decode_token(create_session_token("user_abc"))
        assert payload.exp - payload.iat == timedelta(days=7)
        assert payload.type == "session"

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        with pytest.raises(AuthError) as exc:
            verify_session(token)
        assert exc.value.message == "Authentication required"

    def test_garbage_token(self):
        with pytest.raises(AuthError) as exc:
            verify_session("not.a.jwt")
        assert exc.value.message == "Invalid token"

    def test_expired_token(self):
        now = utc_now()
        token = _sign({
            "sub": "user_abc",
            "iat": now - timedelta(days=8),
            "exp": now - timedelta(days=1),
            "type": "session",
        })
        with pytest.raises(AuthError) as exc:
            verify_session(token)
        assert exc.value.message == "Token expired"

    def test_wrong_signature(self):
        now = utc_now()
        token = _sign(
            {"sub": "user_abc", "iat": now, "exp": now + timedelta(days=1), "type": "session"},
            key="someone-elses-secret",
        )
        with pytest.raises(AuthError):
            verify_session(token)

    def test_wrong_token_type(self):
        now = utc_now()
        token = _sign({"sub": "user_abc", "iat": now, "exp": now + timedelta(days=1), "type": "reset"})
        with pytest.raises(AuthError):
            verify_session(token)


# =============================================================================
# Registration and login
# =============================================================================


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register(self, users, storage):
        user, token = await users.register(RegisterRequest(
            first_name="Ada",
            last_name="Lovelace",
            phone="0611111111",
            email="Ada@X.com",
            password="engine",
        ))
        assert user.email == "ada@x.com"
        assert verify_session(token) == user.id
        
        doc = await storage.metadata.get(Collections.USERS, user.id)
        assert doc["password_hash"] != "engine"
        assert verify_password("engine", doc["password_hash"])

    @pytest.mark.asyncio
    async def test_duplicate_email_any_casing(self, users):
        await make_user(users, "ada")
        with pytest.raises(ConflictError):
            await users.register(RegisterRequest(
                first_name="Other",
                last_name="Ada",
                phone="0",
                email="ADA@x.com",
                password="pw",
            ))

    @pytest.mark.asyncio
    async def test_public_view_has_no_credentials(self, users):
        user = await make_user(users, "ada")
        public = user.to_public().model_dump(by_alias=True)
        assert "passwordHash" not in public
        assert public["firstName"] == "Ada"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login(self, users):
        created = await make_user(users, "ada", password="engine")
        user, token = await users.login(LoginRequest(email="ADA@x.com", password="engine"))
        assert user.id == created.id
        assert verify_session(token) == created.id

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable(self, users):
        await make_user(users, "ada", password="engine")
        
        with pytest.raises(AuthError) as wrong_password:
            await users.login(LoginRequest(email="ada@x.com", password="nope"))
        with pytest.raises(AuthError) as unknown_email:
            await users.login(LoginRequest(email="nobody@x.com", password="engine"))
        
        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"


# =============================================================================
# Profile and search
# =============================================================================


class TestProfile:
    @pytest.mark.asyncio
    async def test_update_profile(self, users):
        user = await make_user(users, "ada")
        updated = await users.update_profile(user.id, ProfileUpdate(phone="0699999999"))
        assert updated.phone == "0699999999"
        assert updated.first_name == "Ada"
        assert updated.updated_at >= user.updated_at

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, users):
        user = await make_user(users, "ada")
        same = await users.update_profile(user.id, ProfileUpdate())
        assert same.updated_at == user.updated_at

    @pytest.mark.asyncio
    async def test_search_partial_case_insensitive(self, users):
        await make_user(users, "alice")
        await make_user(users, "alina")
        await make_user(users, "bob")
        
        found = await users.search("ALI")
        assert sorted(u.email for u in found) == ["alice@x.com", "alina@x.com"]

    @pytest.mark.asyncio
    async def test_search_limit(self, users):
        for i in range(12):
            await make_user(users, f"user{i}")
        assert len(await users.search("user")) == get_settings().user_search_limit

    @pytest.mark.asyncio
    async def test_blank_search_rejected(self, users):
        with pytest.raises(ValidationError):
            await users.search("   ")


# =============================================================================
# Password reset
# =============================================================================


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_reset_flow(self, users):
        await make_user(users, "ada", password="old-pw")
        token = await users.request_password_reset("ada@x.com")
        assert token
        
        await users.reset_password(token, "new-pw")
        
        await users.login(LoginRequest(email="ada@x.com", password="new-pw"))
        with pytest.raises(AuthError):
            await users.login(LoginRequest(email="ada@x.com", password="old-pw"))

    @pytest.mark.asyncio
    async def test_unknown_email_returns_none(self, users):
        assert await users.request_password_reset("nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_only_hash_is_stored(self, users, storage):
        user = await make_user(users, "ada")
        token = await users.request_password_reset("ada@x.com")
        doc = await storage.metadata.get(Collections.USERS, user.id)
        assert doc["reset_token_hash"]
        assert doc["reset_token_hash"] != token

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, users):
        await make_user(users, "ada")
        token = await users.request_password_reset("ada@x.com")
        await users.reset_password(token, "new-pw")
        with pytest.raises(ValidationError):
            await users.reset_password(token, "again")

    @pytest.mark.asyncio
    async def test_expired_token(self, users, storage):
        user = await make_user(users, "ada")
        token = await users.request_password_reset("ada@x.com")
        await storage.metadata.update(Collections.USERS, user.id, {
            "reset_token_expires_at": utc_now() - timedelta(minutes=1),
        })
        with pytest.raises(ValidationError):
            await users.reset_password(token, "new-pw")

    @pytest.mark.asyncio
    async def test_bogus_token(self, users):
        with pytest.raises(ValidationError):
            await users.reset_password("made-up", "new-pw")
