"""Module hierarchy: create/update with parent and cycle checks, guarded delete, tree building."""

import logging
from collections import defaultdict
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.errors import ConflictError, NotFoundError
from app.models import Module
from app.schemas.module import ModuleOut, ModuleTreeNode
from app.services.grants import delete_grants_for_module

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "parent_id", "active")
DUPLICATE_NAME = "Module with this name already exists under this parent"


def _ordered(query: Query) -> Query:
    """Sibling order used everywhere: newest first, then name."""
    return query.order_by(Module.created_at.desc(), Module.name.asc())


def _find_in_scope(
    session: Session,
    name: str,
    parent_id: int | None,
    exclude_id: int | None = None,
) -> Module | None:
    """Module with this name under the same parent (None = root scope), if any."""
    query = session.query(Module).filter(Module.name == name)
    if parent_id is None:
        query = query.filter(Module.parent_id.is_(None))
    else:
        query = query.filter(Module.parent_id == parent_id)
    if exclude_id is not None:
        query = query.filter(Module.id != exclude_id)
    return query.first()


def _commit_unique(session: Session) -> None:
    """Commit; a lost race on the per-scope name index becomes ConflictError."""
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(DUPLICATE_NAME)


def _check_new_parent(session: Session, module_id: int, parent_id: int) -> None:
    """
    Reject a parent that does not exist, is the module itself, or has the module
    among its ancestors (walks the chain up to the root).
    """
    if parent_id == module_id:
        raise ConflictError("Module cannot be its own parent")
    parent = session.get(Module, parent_id)
    if parent is None:
        raise NotFoundError("Parent module not found")

    visited: set[int] = {parent.id}
    current = parent
    while current.parent_id is not None:
        if current.parent_id == module_id:
            raise ConflictError("Circular reference detected in module hierarchy")
        if current.parent_id in visited:
            # Pre-existing loop that does not involve module_id; stop walking.
            break
        visited.add(current.parent_id)
        next_parent = session.get(Module, current.parent_id)
        if next_parent is None:
            break
        current = next_parent


def get_module(session: Session, module_id: int) -> Module:
    module = session.get(Module, module_id)
    if module is None:
        raise NotFoundError("Module not found")
    return module


def get_module_by_name(session: Session, name: str, active_only: bool = True) -> Module | None:
    """First module with this name (oldest first); inactive modules are skipped by default."""
    query = session.query(Module).filter(Module.name == name)
    if active_only:
        query = query.filter(Module.active.is_(True))
    return query.order_by(Module.id.asc()).first()


def list_modules(session: Session, active_only: bool = False) -> list[Module]:
    query = session.query(Module)
    if active_only:
        query = query.filter(Module.active.is_(True))
    return _ordered(query).all()


def list_root_modules(session: Session, active_only: bool = False) -> list[Module]:
    query = session.query(Module).filter(Module.parent_id.is_(None))
    if active_only:
        query = query.filter(Module.active.is_(True))
    return _ordered(query).all()


def list_sub_modules(session: Session, parent_id: int, active_only: bool = False) -> list[Module]:
    """Direct children of parent_id only."""
    get_module(session, parent_id)
    query = session.query(Module).filter(Module.parent_id == parent_id)
    if active_only:
        query = query.filter(Module.active.is_(True))
    return _ordered(query).all()


def build_module_tree(session: Session, active_only: bool = False) -> list[ModuleTreeNode]:
    """
    Full forest: modules grouped by parent_id, children attached recursively to each root.

    With active_only, children of an inactive module are not reachable and are left out.
    """
    modules = list_modules(session, active_only=active_only)
    children_by_parent: dict[int | None, list[Module]] = defaultdict(list)
    for module in modules:
        children_by_parent[module.parent_id].append(module)

    def _attach(parent_id: int | None) -> list[ModuleTreeNode]:
        return [
            ModuleTreeNode(
                **ModuleOut.model_validate(module).model_dump(),
                children=_attach(module.id),
            )
            for module in children_by_parent.get(parent_id, [])
        ]

    return _attach(None)


def create_module(
    session: Session,
    name: str,
    description: str | None = None,
    parent_id: int | None = None,
    active: bool = True,
) -> Module:
    """Create a module. Raises NotFoundError for a missing parent, ConflictError for a name clash."""
    if parent_id is not None and session.get(Module, parent_id) is None:
        raise NotFoundError("Parent module not found")
    if _find_in_scope(session, name, parent_id) is not None:
        raise ConflictError(DUPLICATE_NAME)

    module = Module(
        name=name,
        description=description,
        parent_id=parent_id,
        active=active,
    )
    session.add(module)
    _commit_unique(session)
    session.refresh(module)
    logger.info("Module created: id=%s name=%s parent_id=%s", module.id, module.name, module.parent_id)
    return module


def update_module(session: Session, module_id: int, changes: dict[str, Any]) -> Module:
    """
    Apply a partial update. Only keys present in changes are touched; parent_id=None moves
    the module to the root. All checks run before anything is written, so a rejected update
    leaves the hierarchy unchanged.
    """
    module = get_module(session, module_id)
    changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    # name and active are not nullable; an explicit null means "leave as is".
    for key in ("name", "active"):
        if key in changes and changes[key] is None:
            del changes[key]

    new_name = changes.get("name", module.name)
    new_parent_id = changes.get("parent_id", module.parent_id)

    if "parent_id" in changes and new_parent_id is not None and new_parent_id != module.parent_id:
        _check_new_parent(session, module.id, new_parent_id)
    if new_name != module.name or new_parent_id != module.parent_id:
        if _find_in_scope(session, new_name, new_parent_id, exclude_id=module.id) is not None:
            raise ConflictError(DUPLICATE_NAME)

    for key, value in changes.items():
        setattr(module, key, value)
    _commit_unique(session)
    session.refresh(module)
    logger.info("Module updated: id=%s fields=%s", module.id, sorted(changes))
    return module


def set_module_active(session: Session, module_id: int, active: bool) -> Module:
    return update_module(session, module_id, {"active": active})


def delete_module(session: Session, module_id: int) -> None:
    """Delete a childless module and every role/user grant referencing it."""
    module = get_module(session, module_id)
    has_children = (
        session.query(Module.id).filter(Module.parent_id == module.id).first() is not None
    )
    if has_children:
        raise ConflictError(
            "Cannot delete module with sub-modules. Delete or reassign sub-modules first."
        )

    removed = delete_grants_for_module(session, module.id)
    session.delete(module)
    session.commit()
    logger.info("Module deleted: id=%s grants_removed=%s", module_id, removed)
