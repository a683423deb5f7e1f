# =============================================================================
# Credential Primitives
# =============================================================================
#
#   - one-way password hashes (PBKDF2-SHA256, "<salt>:<hex digest>")
#   - signed session tokens (JWT, HS256 by default, 7 day lifetime)
#   - one-time password reset tokens (only their SHA-256 is persisted)
#
# Nothing here reads or writes storage; UserService persists the results.
#
# =============================================================================

from datetime import datetime, timedelta, timezone
import hashlib
import logging
import secrets

from pydantic import BaseModel
import jwt

from taskboard.config import get_settings
from taskboard.core.errors import AuthError
from taskboard.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)

SESSION = "session"


class SessionClaims(BaseModel):
    """Decoded claims of a session token."""
    sub: str
    exp: datetime
    iat: datetime
    type: str
    jti: str = ""


# =============================================================================
# Passwords
# =============================================================================

def _derive(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=get_settings().password_hash_iterations,
    )
    return digest.hex()


def hash_password(password: str) -> str:
    """One-way hash with a fresh random salt."""
    salt = secrets.token_hex(32)
    return f"{salt}:{_derive(password, salt)}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        salt, expected = password_hash.split(":")
    except (ValueError, AttributeError):
        return False
    return secrets.compare_digest(_derive(password, salt), expected)


# =============================================================================
# Session tokens
# =============================================================================

class TokenError(Exception):
    pass


class TokenExpiredError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


def create_session_token(user_id: str) -> str:
    settings = get_settings()
    issued = utc_now()
    claims = {
        "sub": user_id,
        "iat": issued,
        "exp": issued + timedelta(days=settings.jwt_expire_days),
        "type": SESSION,
        "jti": generate_id("tok"),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> SessionClaims:
    """
    Check signature, expiry and token type.

    Raises:
        TokenExpiredError: past its exp claim
        TokenInvalidError: bad signature, missing claims or not a session token
    """
    settings = get_settings()
    try:
        raw = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("expired")
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(str(e))

    if raw.get("type") != SESSION:
        raise TokenInvalidError(f"wrong token type {raw.get('type')!r}")

    return SessionClaims(
        sub=raw["sub"],
        exp=datetime.fromtimestamp(raw["exp"], tz=timezone.utc),
        iat=datetime.fromtimestamp(raw["iat"], tz=timezone.utc),
        type=raw["type"],
        jti=raw.get("jti", ""),
    )


def verify_session(token: str | None) -> str:
    """Return the user id a session token was issued to."""
    if not token:
        raise AuthError("Authentication required")
    try:
        return decode_token(token).sub
    except TokenExpiredError:
        raise AuthError("Token expired")
    except TokenError as e:
        logger.debug(f"Rejected session token: {e}")
        raise AuthError("Invalid token")


# =============================================================================
# Reset tokens
# =============================================================================

def create_reset_token() -> tuple[str, str, datetime]:
    """Returns (token to hand to the user, hash to store, expiry)."""
    token = secrets.token_urlsafe(32)
    ttl = timedelta(minutes=get_settings().password_reset_expire_minutes)
    return token, hash_reset_token(token), utc_now() + ttl


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
