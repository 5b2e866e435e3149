"""Refresh-token transport: http-only cookie or request/response body."""

from fastapi import Request, Response

from app.core.config import Settings
from app.schemas.auth import AuthResponse, RefreshRequest

REFRESH_COOKIE_PATH = "/"


def set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        max_age=settings.REFRESH_TOKEN_EXPIRE_MINUTES * 60,
        path=REFRESH_COOKIE_PATH,
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
    )


def read_refresh_token(request: Request, body: RefreshRequest | None, settings: Settings) -> str | None:
    """Cookie first, then the body field."""
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if token:
        return token
    if body is not None and body.refresh_token:
        return body.refresh_token
    return None


def deliver_tokens(response: Response, result: AuthResponse, settings: Settings) -> AuthResponse:
    """
    In cookie mode move the refresh token into the cookie and leave it out of the body
    (routes serialize with exclude_unset, so the unset field is dropped).
    """
    if settings.REFRESH_TOKEN_TRANSPORT != "cookie" or result.refresh_token is None:
        return result
    set_refresh_cookie(response, result.refresh_token, settings)
    return AuthResponse(
        user=result.user,
        modules=result.modules,
        access_token=result.access_token,
    )
