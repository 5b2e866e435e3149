"""
Access/refresh token issuance, rotation and revocation.

Refresh-token lineage: issued -> valid -> rotated (revoked) or expired. With
REFRESH_TOKEN_STATEFUL every refresh token is persisted (as a SHA-256 digest) and rotated on
use; a rotated or logged-out token is never accepted again. The stateless variant only
checks signature and expiry, so single sessions cannot be revoked.
"""

import logging
from datetime import UTC, datetime
from typing import Any, NamedTuple

import jwt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import UnauthorizedError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
from app.models import RefreshToken, User

logger = logging.getLogger(__name__)


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


def _as_utc(value: datetime) -> datetime:
    """Stored timestamps may come back naive (SQLite); they are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def issue_token_pair(session: Session, user: User, settings: Settings) -> TokenPair:
    """
    Mint an access token and a refresh token for the user.

    In the stateful variant the refresh token row is added and the session committed, which
    also commits any revocation the caller staged in the same transaction.
    """
    access_token = create_access_token(user.id, user.email, settings)
    refresh_token, expires_at = create_refresh_token(user.id, user.email, settings)
    if settings.REFRESH_TOKEN_STATEFUL:
        session.add(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(refresh_token),
                expires_at=expires_at,
                revoked=False,
            )
        )
        session.commit()
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def decode_refresh_token(token: str, settings: Settings) -> dict[str, Any]:
    """Signature, expiry and token-type check; any failure is UnauthorizedError."""
    try:
        return decode_token(token, settings, expected_type="refresh")
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid or expired refresh token")


def rotate_refresh_token(session: Session, token: str, settings: Settings) -> tuple[User, TokenPair]:
    """
    Exchange a refresh token for a new pair and return (user, pair).

    The old row is revoked with a conditional update (revoked = false -> true) and the affected
    row count is checked, so two concurrent refreshes of one token cannot both succeed.
    """
    payload = decode_refresh_token(token, settings)
    user_id = payload["userId"]

    stored: RefreshToken | None = None
    if settings.REFRESH_TOKEN_STATEFUL:
        stored = (
            session.query(RefreshToken)
            .filter(RefreshToken.token_hash == hash_token(token))
            .first()
        )
        if stored is None or stored.user_id != user_id:
            raise UnauthorizedError("Invalid refresh token")
        if stored.revoked:
            logger.warning("Revoked refresh token presented: user_id=%s token_id=%s", user_id, stored.id)
            raise UnauthorizedError("Refresh token has been revoked")
        # Checked independently of the JWT exp claim.
        if _as_utc(stored.expires_at) <= datetime.now(UTC):
            raise UnauthorizedError("Refresh token has expired")

    user = session.get(User, user_id)
    if user is None or not user.active or not user.approved:
        raise UnauthorizedError("User not found or inactive")

    if stored is not None:
        claimed = (
            session.query(RefreshToken)
            .filter(RefreshToken.id == stored.id, RefreshToken.revoked.is_(False))
            .update({RefreshToken.revoked: True}, synchronize_session=False)
        )
        if claimed != 1:
            session.rollback()
            logger.warning("Refresh token rotated concurrently: user_id=%s token_id=%s", user_id, stored.id)
            raise UnauthorizedError("Refresh token has been revoked")

    pair = issue_token_pair(session, user, settings)
    logger.info("Refresh token rotated: user_id=%s", user.id)
    return user, pair


def revoke_refresh_token(session: Session, token: str, settings: Settings) -> None:
    """Logout. Idempotent: unknown or already revoked tokens are not an error."""
    if not settings.REFRESH_TOKEN_STATEFUL:
        return
    revoked = (
        session.query(RefreshToken)
        .filter(RefreshToken.token_hash == hash_token(token), RefreshToken.revoked.is_(False))
        .update({RefreshToken.revoked: True}, synchronize_session=False)
    )
    session.commit()
    if revoked:
        logger.info("Refresh token revoked on logout")


def revoke_all_for_user(session: Session, user_id: int, commit: bool = True) -> int:
    """
    Revoke every live refresh token of a user (log out everywhere). Returns rows revoked.

    With commit=False the update is only staged, so a caller can commit it together with its own
    changes.
    """
    revoked = (
        session.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
        .update({RefreshToken.revoked: True}, synchronize_session=False)
    )
    if commit:
        session.commit()
    if revoked:
        logger.info("Refresh tokens revoked: user_id=%s count=%s", user_id, revoked)
    return revoked


def delete_expired_tokens(session: Session, now: datetime | None = None) -> int:
    """Delete expired or revoked rows. Returns rows deleted."""
    cutoff = now or datetime.now(UTC)
    deleted = (
        session.query(RefreshToken)
        .filter(or_(RefreshToken.expires_at < cutoff, RefreshToken.revoked.is_(True)))
        .delete(synchronize_session=False)
    )
    session.commit()
    return deleted
