"""
Effective access: combine a user's role grants with their direct grants.

has_access answers a point query and effective_access lists every active module. Both read
the same two grant sets through _source_for, so they agree for every (user, module) pair.
Role grants are resolved at read time; editing a role's modules changes access for all of
its members immediately.
"""

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Module, Role, RoleModule, User
from app.schemas.access import (
    AccessSource,
    ModuleAccess,
    ModuleRef,
    PermissionsMatrix,
    RoleModulePair,
    UserPermissionsResponse,
)
from app.schemas.auth import ModuleSummary
from app.schemas.role import RoleSummary
from app.services.grants import role_module_ids, user_module_ids
from app.services.modules import get_module_by_name, list_modules


def _source_for(in_role: bool, in_user: bool) -> tuple[bool, AccessSource]:
    """(has_access, source) for one module; no access keeps the default source "role"."""
    if in_role and in_user:
        return True, "combined"
    if in_user:
        return True, "user"
    return in_role, "role"


def _get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def has_access(session: Session, user_id: int, module_name: str) -> bool:
    """
    True when the user's role or a direct grant covers the named module.

    Unknown users and missing or inactive modules give False.
    """
    user = session.get(User, user_id)
    if user is None:
        return False
    module = get_module_by_name(session, module_name, active_only=True)
    if module is None:
        return False
    granted, _ = _source_for(
        module.id in role_module_ids(session, user.role_id),
        module.id in user_module_ids(session, user.id),
    )
    return granted


def effective_access(session: Session, user_id: int) -> list[ModuleAccess]:
    """Every active module with the user's has_access flag and its source, ordered by module id."""
    user = _get_user(session, user_id)
    role_ids = role_module_ids(session, user.role_id)
    direct_ids = user_module_ids(session, user.id)

    modules = (
        session.query(Module)
        .filter(Module.active.is_(True))
        .order_by(Module.id.asc())
        .all()
    )
    result: list[ModuleAccess] = []
    for module in modules:
        granted, source = _source_for(module.id in role_ids, module.id in direct_ids)
        result.append(
            ModuleAccess(
                module_id=module.id,
                module_name=module.name,
                parent_id=module.parent_id,
                has_access=granted,
                source=source,
            )
        )
    return result


def accessible_modules(session: Session, user_id: int) -> list[ModuleSummary]:
    """Client menu: only the modules the user can access, without flags."""
    return [
        ModuleSummary(
            module_id=row.module_id,
            module_name=row.module_name,
            parent_id=row.parent_id,
        )
        for row in effective_access(session, user_id)
        if row.has_access
    ]


def role_access(session: Session, role_id: int) -> list[ModuleAccess]:
    """Admin view: all modules (active or not) with the role's grant flag."""
    if session.get(Role, role_id) is None:
        raise NotFoundError("Role not found")
    granted_ids = role_module_ids(session, role_id)
    return [
        ModuleAccess(
            module_id=module.id,
            module_name=module.name,
            parent_id=module.parent_id,
            has_access=module.id in granted_ids,
            source="role",
        )
        for module in list_modules(session)
    ]


def user_permissions(session: Session, user_id: int) -> UserPermissionsResponse:
    """Admin view: the user's role summary plus the full effective access matrix."""
    user = _get_user(session, user_id)
    role = session.get(Role, user.role_id) if user.role_id is not None else None
    return UserPermissionsResponse(
        role=RoleSummary.model_validate(role) if role is not None else None,
        modules=effective_access(session, user.id),
    )


def permissions_matrix(session: Session) -> PermissionsMatrix:
    """Roles × modules with every granted pair."""
    roles = session.query(Role).order_by(Role.id.asc()).all()
    modules = session.query(Module).order_by(Module.id.asc()).all()
    pairs = (
        session.query(RoleModule.role_id, RoleModule.module_id)
        .order_by(RoleModule.role_id.asc(), RoleModule.module_id.asc())
        .all()
    )
    return PermissionsMatrix(
        roles=[RoleSummary.model_validate(r) for r in roles],
        modules=[ModuleRef(id=m.id, name=m.name) for m in modules],
        grants=[RoleModulePair(role_id=role_id, module_id=module_id) for role_id, module_id in pairs],
    )
