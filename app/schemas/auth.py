"""Request/response schemas for auth endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN


class SignUpRequest(BaseModel):
    """Self-service registration."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number")
        return v


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class RefreshRequest(BaseModel):
    """Optional body for refresh/logout; the cookie takes precedence when present."""

    refresh_token: str | None = Field(default=None, description="Refresh token (body transport)")


class AuthUser(BaseModel):
    """User fields embedded in auth responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    approved: bool
    active: bool


class ModuleSummary(BaseModel):
    """A module the caller can access (client menu entry)."""

    module_id: int
    module_name: str
    parent_id: int | None


class AuthResponse(BaseModel):
    """Sign-in / sign-up / refresh payload: user, accessible modules, token pair."""

    model_config = ConfigDict(populate_by_name=True)

    user: AuthUser
    modules: list[ModuleSummary]
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class CurrentUser(BaseModel):
    """Authenticated user for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    approved: bool
    active: bool
    role_id: int | None = None


class MessageResponse(BaseModel):
    message: str
