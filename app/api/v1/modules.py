"""Admin module management routes (hierarchy included)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auth import MessageResponse
from app.schemas.module import ModuleCreate, ModuleOut, ModuleTreeNode, ModuleUpdate
from app.services import modules as module_service

router = APIRouter()


@router.get("", response_model=list[ModuleOut])
def list_modules(
    db: Annotated[Session, Depends(get_db)],
    active_only: bool = False,
) -> list[ModuleOut]:
    return module_service.list_modules(db, active_only=active_only)


@router.get("/tree", response_model=list[ModuleTreeNode])
def get_module_tree(
    db: Annotated[Session, Depends(get_db)],
    active_only: bool = False,
) -> list[ModuleTreeNode]:
    """Root modules with their children nested recursively."""
    return module_service.build_module_tree(db, active_only=active_only)


@router.get("/roots", response_model=list[ModuleOut])
def list_root_modules(
    db: Annotated[Session, Depends(get_db)],
    active_only: bool = False,
) -> list[ModuleOut]:
    return module_service.list_root_modules(db, active_only=active_only)


@router.get("/{module_id}", response_model=ModuleOut)
def get_module(module_id: int, db: Annotated[Session, Depends(get_db)]) -> ModuleOut:
    return module_service.get_module(db, module_id)


@router.get("/{module_id}/submodules", response_model=list[ModuleOut])
def list_sub_modules(
    module_id: int,
    db: Annotated[Session, Depends(get_db)],
    active_only: bool = False,
) -> list[ModuleOut]:
    return module_service.list_sub_modules(db, module_id, active_only=active_only)


@router.post("", response_model=ModuleOut, status_code=status.HTTP_201_CREATED)
def create_module(body: ModuleCreate, db: Annotated[Session, Depends(get_db)]) -> ModuleOut:
    return module_service.create_module(
        db,
        name=body.name,
        description=body.description,
        parent_id=body.parent_id,
        active=body.active,
    )


@router.put("/{module_id}", response_model=ModuleOut)
def update_module(
    module_id: int,
    body: ModuleUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ModuleOut:
    """Partial update; 409 when the new parent would create a cycle."""
    return module_service.update_module(db, module_id, body.model_dump(exclude_unset=True))


@router.post("/{module_id}/activate", response_model=ModuleOut)
def activate_module(module_id: int, db: Annotated[Session, Depends(get_db)]) -> ModuleOut:
    return module_service.set_module_active(db, module_id, True)


@router.post("/{module_id}/deactivate", response_model=ModuleOut)
def deactivate_module(module_id: int, db: Annotated[Session, Depends(get_db)]) -> ModuleOut:
    return module_service.set_module_active(db, module_id, False)


@router.delete("/{module_id}", response_model=MessageResponse)
def delete_module(module_id: int, db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    """Fails with 409 while the module has sub-modules."""
    module_service.delete_module(db, module_id)
    return MessageResponse(message="Module deleted successfully")
