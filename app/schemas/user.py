"""Request/response schemas for admin user management."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.role import RoleSummary


class UserCreate(BaseModel):
    """Admin-created account. Approved unless stated otherwise."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role_id: int | None = None
    approved: bool = True


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    role_id: int | None = None


class AssignRoleRequest(BaseModel):
    role_id: int


class AdminUserOut(BaseModel):
    """User as shown to administrators (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    approved: bool
    active: bool
    role: RoleSummary | None = None
    created_at: datetime
    updated_at: datetime
