"""Admin grant routes: role and user module access, matrix view."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.access import (
    ModuleAccess,
    PermissionsMatrix,
    RoleGrantRequest,
    UserGrantRequest,
    UserPermissionsResponse,
)
from app.schemas.auth import MessageResponse
from app.services import access as access_service
from app.services import grants as grant_service

router = APIRouter()


@router.get("/matrix", response_model=PermissionsMatrix)
def get_permissions_matrix(db: Annotated[Session, Depends(get_db)]) -> PermissionsMatrix:
    return access_service.permissions_matrix(db)


@router.post("/role", response_model=MessageResponse)
def grant_role_module(body: RoleGrantRequest, db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    """Idempotent."""
    grant_service.grant_to_role(db, body.role_id, body.module_id)
    return MessageResponse(message="Module access granted to role")


@router.delete("/role/{role_id}/{module_id}", response_model=MessageResponse)
def revoke_role_module(
    role_id: int,
    module_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    grant_service.revoke_from_role(db, role_id, module_id)
    return MessageResponse(message="Module access revoked from role")


@router.get("/role/{role_id}", response_model=list[ModuleAccess])
def get_role_access(role_id: int, db: Annotated[Session, Depends(get_db)]) -> list[ModuleAccess]:
    """All modules with the role's has_access flag."""
    return access_service.role_access(db, role_id)


@router.post("/user", response_model=MessageResponse)
def grant_user_module(body: UserGrantRequest, db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    """Idempotent."""
    grant_service.grant_to_user(db, body.user_id, body.module_id)
    return MessageResponse(message="Module access granted to user")


@router.delete("/user/{user_id}/{module_id}", response_model=MessageResponse)
def revoke_user_module(
    user_id: int,
    module_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    grant_service.revoke_from_user(db, user_id, module_id)
    return MessageResponse(message="Module access revoked from user")


@router.get("/user/{user_id}", response_model=UserPermissionsResponse)
def get_user_permissions(user_id: int, db: Annotated[Session, Depends(get_db)]) -> UserPermissionsResponse:
    """The user's role and effective access to every active module."""
    return access_service.user_permissions(db, user_id)
