"""Caller-facing access routes: menu modules, full effective access, point checks."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.access import AccessCheckResponse, ModuleAccess
from app.schemas.auth import CurrentUser, ModuleSummary
from app.services.access import accessible_modules, effective_access, has_access

router = APIRouter()


@router.get("/modules", response_model=list[ModuleSummary])
def get_my_modules(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ModuleSummary]:
    """Modules the caller can access (for rendering navigation)."""
    return accessible_modules(db, current_user.id)


@router.get("/effective", response_model=list[ModuleAccess])
def get_my_effective_access(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ModuleAccess]:
    """Every active module with the caller's has_access flag and grant source."""
    return effective_access(db, current_user.id)


@router.get("/check/{module_name}", response_model=AccessCheckResponse)
def check_access(
    module_name: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AccessCheckResponse:
    return AccessCheckResponse(
        module_name=module_name,
        has_access=has_access(db, current_user.id, module_name),
    )
