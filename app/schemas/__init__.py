"""Pydantic request/response schemas."""

from app.schemas.access import (
    AccessCheckResponse,
    ModuleAccess,
    PermissionsMatrix,
    RoleGrantRequest,
    UserGrantRequest,
    UserPermissionsResponse,
)
from app.schemas.auth import (
    AuthResponse,
    AuthUser,
    CurrentUser,
    MessageResponse,
    ModuleSummary,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
)
from app.schemas.dashboard import DashboardStats
from app.schemas.health import HealthResponse
from app.schemas.module import ModuleCreate, ModuleOut, ModuleTreeNode, ModuleUpdate
from app.schemas.role import RoleCreate, RoleOut, RoleSummary, RoleUpdate
from app.schemas.user import AdminUserOut, AssignRoleRequest, UserCreate, UserUpdate

__all__ = [
    "AccessCheckResponse",
    "AdminUserOut",
    "AssignRoleRequest",
    "AuthResponse",
    "AuthUser",
    "CurrentUser",
    "DashboardStats",
    "HealthResponse",
    "MessageResponse",
    "ModuleAccess",
    "ModuleCreate",
    "ModuleOut",
    "ModuleSummary",
    "ModuleTreeNode",
    "ModuleUpdate",
    "PermissionsMatrix",
    "RefreshRequest",
    "RoleCreate",
    "RoleGrantRequest",
    "RoleOut",
    "RoleSummary",
    "RoleUpdate",
    "SignInRequest",
    "SignUpRequest",
    "UserCreate",
    "UserGrantRequest",
    "UserPermissionsResponse",
    "UserUpdate",
]
