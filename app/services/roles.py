"""Role management: unique names, guarded deletion with grant cascade."""

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.models import Role, User
from app.services.grants import delete_grants_for_role

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "active")
DUPLICATE_NAME = "Role with this name already exists"


def get_role(session: Session, role_id: int) -> Role:
    role = session.get(Role, role_id)
    if role is None:
        raise NotFoundError("Role not found")
    return role


def get_role_by_name(session: Session, name: str) -> Role | None:
    return session.query(Role).filter(Role.name == name).first()


def list_roles(session: Session, active_only: bool = False) -> list[Role]:
    query = session.query(Role)
    if active_only:
        query = query.filter(Role.active.is_(True))
    return query.order_by(Role.id.asc()).all()


def _commit_unique(session: Session) -> None:
    """Commit; a unique-constraint race on the name becomes ConflictError."""
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(DUPLICATE_NAME)


def create_role(
    session: Session,
    name: str,
    description: str | None = None,
    active: bool = True,
) -> Role:
    if get_role_by_name(session, name) is not None:
        raise ConflictError(DUPLICATE_NAME)
    role = Role(name=name, description=description, active=active)
    session.add(role)
    _commit_unique(session)
    session.refresh(role)
    logger.info("Role created: id=%s name=%s", role.id, role.name)
    return role


def update_role(session: Session, role_id: int, changes: dict[str, Any]) -> Role:
    role = get_role(session, role_id)
    changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    for key in ("name", "active"):
        if key in changes and changes[key] is None:
            del changes[key]
    if "name" in changes and changes["name"] != role.name:
        if get_role_by_name(session, changes["name"]) is not None:
            raise ConflictError(DUPLICATE_NAME)

    for key, value in changes.items():
        setattr(role, key, value)
    _commit_unique(session)
    session.refresh(role)
    return role


def count_role_members(session: Session, role_id: int) -> int:
    return session.query(func.count(User.id)).filter(User.role_id == role_id).scalar() or 0


def delete_role(session: Session, role_id: int) -> None:
    """Delete a role nobody holds, together with its module grants."""
    role = get_role(session, role_id)
    if count_role_members(session, role.id) > 0:
        raise ConflictError("Cannot delete role. Users are assigned to this role.")

    removed = delete_grants_for_role(session, role.id)
    session.delete(role)
    session.commit()
    logger.info("Role deleted: id=%s grants_removed=%s", role_id, removed)


def list_role_members(session: Session, role_id: int) -> list[User]:
    get_role(session, role_id)
    return (
        session.query(User)
        .filter(User.role_id == role_id)
        .order_by(User.name.asc())
        .all()
    )
