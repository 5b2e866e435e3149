"""Sign-up, sign-in, refresh and logout flows. Every token response embeds the caller's modules."""

import logging

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import ConflictError, UnauthorizedError
from app.models import User
from app.schemas.auth import AuthResponse, AuthUser, CurrentUser
from app.services.access import accessible_modules
from app.services.credentials import ensure_account_usable, find_user_by_email, verify_credentials
from app.services.roles import get_role_by_name
from app.services.tokens import (
    TokenPair,
    issue_token_pair,
    revoke_all_for_user,
    revoke_refresh_token,
    rotate_refresh_token,
)
from app.services.users import create_user

logger = logging.getLogger(__name__)


def _auth_response(session: Session, user: User, pair: TokenPair) -> AuthResponse:
    """Modules are resolved now, so role/grant edits since the last login are reflected."""
    return AuthResponse(
        user=AuthUser.model_validate(user),
        modules=accessible_modules(session, user.id),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


def sign_up(session: Session, name: str, email: str, password: str, settings: Settings) -> AuthResponse:
    """
    Register a user with the default role (when that role exists) and issue a token pair.

    New accounts start unapproved; sign-in is refused until an administrator approves them.
    """
    if find_user_by_email(session, email) is not None:
        raise ConflictError("Email already registered")

    default_role = (
        get_role_by_name(session, settings.DEFAULT_ROLE_NAME)
        if settings.DEFAULT_ROLE_NAME
        else None
    )
    user = create_user(
        session,
        name=name,
        email=email,
        password=password,
        settings=settings,
        role_id=default_role.id if default_role is not None else None,
    )
    pair = issue_token_pair(session, user, settings)
    logger.info("User signed up: id=%s", user.id)
    return _auth_response(session, user, pair)


def sign_in(session: Session, email: str, password: str, settings: Settings) -> AuthResponse:
    user = verify_credentials(session, email, password)
    pair = issue_token_pair(session, user, settings)
    logger.info("User signed in: id=%s", user.id)
    return _auth_response(session, user, pair)


def refresh(session: Session, refresh_token: str, settings: Settings) -> AuthResponse:
    user, pair = rotate_refresh_token(session, refresh_token, settings)
    return _auth_response(session, user, pair)


def logout(session: Session, refresh_token: str | None, settings: Settings) -> None:
    """Always succeeds; a missing, unknown or already revoked token is fine."""
    if refresh_token:
        revoke_refresh_token(session, refresh_token, settings)


def logout_everywhere(session: Session, user_id: int) -> int:
    return revoke_all_for_user(session, user_id)


def get_current_user(session: Session, user_id: int) -> CurrentUser:
    """
    Resolve the user behind an access token. Account state is re-checked on every request, so
    deactivation or a pending approval takes effect before the token expires.
    """
    user = session.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    ensure_account_usable(user)
    return CurrentUser.model_validate(user)
