"""Auth routes (sign-up, sign-in, refresh, logout) and auth dependencies (get_current_user, require_role)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.cookies import clear_refresh_cookie, deliver_tokens, read_refresh_token
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import decode_token
from app.models import Role
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    MessageResponse,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
)
from app.services import auth as auth_service
from app.services.access import has_access

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Dependency: require valid Bearer access token and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    try:
        payload = decode_token(credentials.credentials, settings, expected_type="access")
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid or expired token")
    return auth_service.get_current_user(db, payload["userId"])


def require_role(role_name: str | None = None):
    """Dependency factory: the caller's role must be role_name (default: ADMIN_ROLE_NAME)."""

    def _require_role(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> CurrentUser:
        required = role_name or settings.ADMIN_ROLE_NAME
        role = db.get(Role, current_user.role_id) if current_user.role_id is not None else None
        if role is None or role.name != required:
            raise ForbiddenError(f"This action requires {required} role")
        return current_user

    return _require_role


require_admin = require_role()


def require_module_access(module_name: str):
    """Dependency factory: the caller must have effective access to module_name."""

    def _require_module_access(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ) -> CurrentUser:
        if not has_access(db, current_user.id, module_name):
            raise ForbiddenError(f"You don't have access to {module_name}")
        return current_user

    return _require_module_access


@router.post(
    "/signup",
    response_model=AuthResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def sign_up(
    body: SignUpRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Register a new account (assigned the default role, pending approval)."""
    result = auth_service.sign_up(db, body.name, body.email, body.password, settings)
    return deliver_tokens(response, result, settings)


@router.post("/signin", response_model=AuthResponse, response_model_exclude_unset=True)
def sign_in(
    body: SignInRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user, accessible modules and tokens.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    result = auth_service.sign_in(db, body.email, body.password, settings)
    return deliver_tokens(response, result, settings)


@router.post("/refresh", response_model=AuthResponse, response_model_exclude_unset=True)
def refresh(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    body: RefreshRequest | None = None,
) -> AuthResponse:
    """Rotate the refresh token and return a new pair with freshly resolved modules."""
    token = read_refresh_token(request, body, settings)
    if not token:
        raise UnauthorizedError("Refresh token not found")
    result = auth_service.refresh(db, token, settings)
    return deliver_tokens(response, result, settings)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    body: RefreshRequest | None = None,
) -> MessageResponse:
    """Revoke the refresh token (if any) and clear the cookie. Always succeeds."""
    auth_service.logout(db, read_refresh_token(request, body, settings), settings)
    clear_refresh_cookie(response, settings)
    return MessageResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Revoke every refresh token of the caller."""
    auth_service.logout_everywhere(db, current_user.id)
    clear_refresh_cookie(response, settings)
    return MessageResponse(message="Logged out from all sessions")


@router.get("/me", response_model=CurrentUser)
def me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    return current_user
