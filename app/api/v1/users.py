"""Admin user management routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.schemas.auth import MessageResponse
from app.schemas.user import AdminUserOut, AssignRoleRequest, UserCreate, UserUpdate
from app.services import users as user_service

router = APIRouter()


@router.get("", response_model=list[AdminUserOut])
def list_users(db: Annotated[Session, Depends(get_db)]) -> list[AdminUserOut]:
    return user_service.admin_views(db, user_service.list_users(db))


@router.get("/pending", response_model=list[AdminUserOut])
def list_pending_users(db: Annotated[Session, Depends(get_db)]) -> list[AdminUserOut]:
    """Accounts waiting for approval, newest first."""
    return user_service.admin_views(db, user_service.list_pending_users(db))


@router.get("/{user_id}", response_model=AdminUserOut)
def get_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> AdminUserOut:
    return user_service.admin_view(db, user_service.get_user(db, user_id))


@router.post("", response_model=AdminUserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AdminUserOut:
    user = user_service.create_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        settings=settings,
        role_id=body.role_id,
        approved=body.approved,
    )
    return user_service.admin_view(db, user)


@router.put("/{user_id}", response_model=AdminUserOut)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> AdminUserOut:
    user = user_service.update_user(db, user_id, body.model_dump(exclude_unset=True))
    return user_service.admin_view(db, user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


@router.post("/{user_id}/approve", response_model=AdminUserOut)
def approve_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> AdminUserOut:
    return user_service.admin_view(db, user_service.approve_user(db, user_id))


@router.post("/{user_id}/activate", response_model=AdminUserOut)
def activate_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> AdminUserOut:
    return user_service.admin_view(db, user_service.activate_user(db, user_id))


@router.post("/{user_id}/deactivate", response_model=AdminUserOut)
def deactivate_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> AdminUserOut:
    """Disable the account and revoke all of its refresh tokens."""
    return user_service.admin_view(db, user_service.deactivate_user(db, user_id))


@router.post("/{user_id}/role", response_model=AdminUserOut)
def assign_role(
    user_id: int,
    body: AssignRoleRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AdminUserOut:
    return user_service.admin_view(db, user_service.assign_role(db, user_id, body.role_id))


@router.delete("/{user_id}/role", response_model=AdminUserOut)
def remove_role(user_id: int, db: Annotated[Session, Depends(get_db)]) -> AdminUserOut:
    return user_service.admin_view(db, user_service.remove_role(db, user_id))
