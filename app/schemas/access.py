"""Schemas for effective access, grants and the admin permission views."""

from typing import Literal

from pydantic import BaseModel

from app.schemas.role import RoleSummary

AccessSource = Literal["role", "user", "combined"]


class ModuleAccess(BaseModel):
    """
    Effective access to one module.

    source is "combined" when both a role grant and a direct grant exist. Rows without
    access keep the default source "role".
    """

    module_id: int
    module_name: str
    parent_id: int | None
    has_access: bool
    source: AccessSource = "role"


class AccessCheckResponse(BaseModel):
    module_name: str
    has_access: bool


class RoleGrantRequest(BaseModel):
    role_id: int
    module_id: int


class UserGrantRequest(BaseModel):
    user_id: int
    module_id: int


class UserPermissionsResponse(BaseModel):
    """A user's role summary plus the full effective access matrix."""

    role: RoleSummary | None
    modules: list[ModuleAccess]


class ModuleRef(BaseModel):
    id: int
    name: str


class RoleModulePair(BaseModel):
    role_id: int
    module_id: int


class PermissionsMatrix(BaseModel):
    """Roles × modules; each pair in grants means the role can access the module."""

    roles: list[RoleSummary]
    modules: list[ModuleRef]
    grants: list[RoleModulePair]
