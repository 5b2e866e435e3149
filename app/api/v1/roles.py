"""Admin role management routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auth import MessageResponse
from app.schemas.role import RoleCreate, RoleOut, RoleUpdate
from app.schemas.user import AdminUserOut
from app.services import roles as role_service
from app.services.users import admin_views

router = APIRouter()


@router.get("", response_model=list[RoleOut])
def list_roles(
    db: Annotated[Session, Depends(get_db)],
    active_only: bool = False,
) -> list[RoleOut]:
    return role_service.list_roles(db, active_only=active_only)


@router.get("/{role_id}", response_model=RoleOut)
def get_role(role_id: int, db: Annotated[Session, Depends(get_db)]) -> RoleOut:
    return role_service.get_role(db, role_id)


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(body: RoleCreate, db: Annotated[Session, Depends(get_db)]) -> RoleOut:
    return role_service.create_role(db, body.name, body.description, body.active)


@router.put("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: int,
    body: RoleUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> RoleOut:
    return role_service.update_role(db, role_id, body.model_dump(exclude_unset=True))


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(role_id: int, db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    """Fails with 409 while any user holds the role."""
    role_service.delete_role(db, role_id)
    return MessageResponse(message="Role deleted successfully")


@router.get("/{role_id}/users", response_model=list[AdminUserOut])
def list_role_members(role_id: int, db: Annotated[Session, Depends(get_db)]) -> list[AdminUserOut]:
    return admin_views(db, role_service.list_role_members(db, role_id))
