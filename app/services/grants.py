"""Role→module and user→module grants (simplified has-access model)."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Module, Role, RoleModule, User, UserModule

logger = logging.getLogger(__name__)


def _require(session: Session, model: type, entity_id: int, label: str) -> None:
    if session.get(model, entity_id) is None:
        raise NotFoundError(f"{label} not found")


def _insert_once(session: Session, grant: RoleModule | UserModule, *criteria) -> bool:
    """
    Insert a grant row unless it exists. Returns True when a row was written.

    A concurrent insert of the same pair surfaces as IntegrityError and counts as success.
    """
    if session.query(type(grant)).filter(*criteria).first() is not None:
        return False
    session.add(grant)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        return False
    return True


def grant_to_role(session: Session, role_id: int, module_id: int) -> None:
    """Idempotent: granting an existing pair again is a no-op."""
    _require(session, Role, role_id, "Role")
    _require(session, Module, module_id, "Module")
    if _insert_once(
        session,
        RoleModule(role_id=role_id, module_id=module_id),
        RoleModule.role_id == role_id,
        RoleModule.module_id == module_id,
    ):
        logger.info("Module granted to role: role_id=%s module_id=%s", role_id, module_id)


def grant_to_user(session: Session, user_id: int, module_id: int) -> None:
    """Idempotent: granting an existing pair again is a no-op."""
    _require(session, User, user_id, "User")
    _require(session, Module, module_id, "Module")
    if _insert_once(
        session,
        UserModule(user_id=user_id, module_id=module_id),
        UserModule.user_id == user_id,
        UserModule.module_id == module_id,
    ):
        logger.info("Module granted to user: user_id=%s module_id=%s", user_id, module_id)


def revoke_from_role(session: Session, role_id: int, module_id: int) -> None:
    """Delete the pair if present; absent pairs are not an error."""
    deleted = (
        session.query(RoleModule)
        .filter(RoleModule.role_id == role_id, RoleModule.module_id == module_id)
        .delete(synchronize_session=False)
    )
    session.commit()
    if deleted:
        logger.info("Module revoked from role: role_id=%s module_id=%s", role_id, module_id)


def revoke_from_user(session: Session, user_id: int, module_id: int) -> None:
    """Delete the pair if present; absent pairs are not an error."""
    deleted = (
        session.query(UserModule)
        .filter(UserModule.user_id == user_id, UserModule.module_id == module_id)
        .delete(synchronize_session=False)
    )
    session.commit()
    if deleted:
        logger.info("Module revoked from user: user_id=%s module_id=%s", user_id, module_id)


def role_module_ids(session: Session, role_id: int | None) -> set[int]:
    """Module ids granted to the role; empty for no role."""
    if role_id is None:
        return set()
    rows = session.query(RoleModule.module_id).filter(RoleModule.role_id == role_id).all()
    return {module_id for (module_id,) in rows}


def user_module_ids(session: Session, user_id: int) -> set[int]:
    """Module ids granted directly to the user."""
    rows = session.query(UserModule.module_id).filter(UserModule.user_id == user_id).all()
    return {module_id for (module_id,) in rows}


# Cascade helpers: callers delete the owning row and commit in the same transaction.


def delete_grants_for_role(session: Session, role_id: int) -> int:
    return (
        session.query(RoleModule)
        .filter(RoleModule.role_id == role_id)
        .delete(synchronize_session=False)
    )


def delete_grants_for_user(session: Session, user_id: int) -> int:
    return (
        session.query(UserModule)
        .filter(UserModule.user_id == user_id)
        .delete(synchronize_session=False)
    )


def delete_grants_for_module(session: Session, module_id: int) -> int:
    role_rows = (
        session.query(RoleModule)
        .filter(RoleModule.module_id == module_id)
        .delete(synchronize_session=False)
    )
    user_rows = (
        session.query(UserModule)
        .filter(UserModule.module_id == module_id)
        .delete(synchronize_session=False)
    )
    return role_rows + user_rows
