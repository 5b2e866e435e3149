"""Admin user management: accounts, approval, activation and role assignment."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import ConflictError, NotFoundError
from app.core.security import hash_password
from app.models import RefreshToken, Role, User
from app.schemas.role import RoleSummary
from app.schemas.user import AdminUserOut
from app.services.grants import delete_grants_for_user
from app.services.roles import get_role
from app.services.tokens import revoke_all_for_user

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _email_taken(session: Session, email: str, exclude_id: int | None = None) -> bool:
    query = session.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _commit_unique(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(DUPLICATE_EMAIL)


def admin_view(session: Session, user: User, roles: dict[int, Role] | None = None) -> AdminUserOut:
    """User with its role summary; pass roles to avoid one lookup per user in lists."""
    role = None
    if user.role_id is not None:
        role = roles.get(user.role_id) if roles is not None else session.get(Role, user.role_id)
    return AdminUserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        approved=user.approved,
        active=user.active,
        role=RoleSummary.model_validate(role) if role is not None else None,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def admin_views(session: Session, users: list[User]) -> list[AdminUserOut]:
    roles = {role.id: role for role in session.query(Role).all()}
    return [admin_view(session, user, roles) for user in users]


def list_users(session: Session) -> list[User]:
    return session.query(User).order_by(User.id.asc()).all()


def list_pending_users(session: Session) -> list[User]:
    return (
        session.query(User)
        .filter(User.approved.is_(False))
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


def create_user(
    session: Session,
    name: str,
    email: str,
    password: str,
    settings: Settings,
    role_id: int | None = None,
    approved: bool = False,
    active: bool = True,
) -> User:
    """Create an account. Raises ConflictError for a taken email, NotFoundError for an unknown role."""
    email = normalize_email(email)
    if _email_taken(session, email):
        raise ConflictError(DUPLICATE_EMAIL)
    if role_id is not None:
        get_role(session, role_id)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role_id=role_id,
        approved=approved,
        active=active,
    )
    session.add(user)
    _commit_unique(session)
    session.refresh(user)
    logger.info("User created: id=%s role_id=%s approved=%s", user.id, user.role_id, user.approved)
    return user


def update_user(session: Session, user_id: int, changes: dict[str, Any]) -> User:
    """Update name, email and/or role_id. An explicit role_id of None removes the role."""
    user = get_user(session, user_id)
    if changes.get("name") is not None:
        user.name = changes["name"]
    if changes.get("email") is not None:
        email = normalize_email(changes["email"])
        if email != user.email and _email_taken(session, email, exclude_id=user.id):
            raise ConflictError(DUPLICATE_EMAIL)
        user.email = email
    if "role_id" in changes:
        if changes["role_id"] is not None:
            get_role(session, changes["role_id"])
        user.role_id = changes["role_id"]
    _commit_unique(session)
    session.refresh(user)
    return user


def delete_user(session: Session, user_id: int) -> None:
    """Delete the user, its direct grants and its refresh tokens."""
    user = get_user(session, user_id)
    grants_removed = delete_grants_for_user(session, user.id)
    tokens_removed = (
        session.query(RefreshToken)
        .filter(RefreshToken.user_id == user.id)
        .delete(synchronize_session=False)
    )
    session.delete(user)
    session.commit()
    logger.info(
        "User deleted: id=%s grants_removed=%s tokens_removed=%s",
        user_id,
        grants_removed,
        tokens_removed,
    )


def approve_user(session: Session, user_id: int) -> User:
    user = get_user(session, user_id)
    user.approved = True
    session.commit()
    session.refresh(user)
    logger.info("User approved: id=%s", user.id)
    return user


def activate_user(session: Session, user_id: int) -> User:
    user = get_user(session, user_id)
    user.active = True
    session.commit()
    session.refresh(user)
    return user


def deactivate_user(session: Session, user_id: int) -> User:
    """Soft-disable the account and end all of its sessions."""
    user = get_user(session, user_id)
    user.active = False
    revoke_all_for_user(session, user.id, commit=False)
    session.commit()
    session.refresh(user)
    logger.info("User deactivated: id=%s", user.id)
    return user


def assign_role(session: Session, user_id: int, role_id: int) -> User:
    user = get_user(session, user_id)
    get_role(session, role_id)
    user.role_id = role_id
    session.commit()
    session.refresh(user)
    logger.info("Role assigned: user_id=%s role_id=%s", user.id, role_id)
    return user


def remove_role(session: Session, user_id: int) -> User:
    user = get_user(session, user_id)
    user.role_id = None
    session.commit()
    session.refresh(user)
    return user
