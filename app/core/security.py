"""Password hashing and JWT creation/verification for authentication."""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import bcrypt
import jwt

from app.core.config import Settings

TokenType = Literal["access", "refresh"]

# Min/max lengths for name and password validation (input validation).
NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str, rounds: int = 12) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def hash_token(token: str) -> str:
    """SHA-256 digest of a refresh token; only the digest is persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _encode(
    user_id: int,
    email: str,
    token_type: TokenType,
    ttl: timedelta,
    settings: Settings,
    extra: dict[str, Any] | None = None,
) -> tuple[str, datetime]:
    now = datetime.now(UTC)
    expire = now + ttl
    payload: dict[str, Any] = {
        "userId": user_id,
        "email": email,
        "type": token_type,
        "iat": now,
        "exp": expire,
    }
    if extra:
        payload.update(extra)
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def create_access_token(user_id: int, email: str, settings: Settings) -> str:
    """Create a short-lived access token carrying userId, email, iat and exp."""
    token, _ = _encode(
        user_id,
        email,
        "access",
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings,
    )
    return token


def create_refresh_token(user_id: int, email: str, settings: Settings) -> tuple[str, datetime]:
    """
    Create a long-lived refresh token; returns (token, expires_at).

    A random jti keeps two tokens minted in the same second distinct.
    """
    return _encode(
        user_id,
        email,
        "refresh",
        timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES),
        settings,
        extra={"jti": secrets.token_urlsafe(16)},
    )


def decode_token(token: str, settings: Settings, expected_type: TokenType) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (userId, email, type, iat, exp).
    Raises jwt.PyJWTError on invalid or expired token, or on a token of the wrong type.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )
    if payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected a {expected_type} token")
    if not isinstance(payload.get("userId"), int):
        raise jwt.InvalidTokenError("Token payload is missing userId")
    return payload
