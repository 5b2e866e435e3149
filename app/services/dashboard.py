"""Admin dashboard counters."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Module, Role, User
from app.schemas.dashboard import DashboardStats
from app.services.users import admin_views

RECENT_USERS_LIMIT = 5


def get_dashboard_stats(session: Session) -> DashboardStats:
    total_users = session.query(func.count(User.id)).scalar() or 0
    active_users = (
        session.query(func.count(User.id))
        .filter(User.active.is_(True), User.approved.is_(True))
        .scalar()
        or 0
    )
    pending_users = (
        session.query(func.count(User.id)).filter(User.approved.is_(False)).scalar() or 0
    )
    recent = (
        session.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(RECENT_USERS_LIMIT)
        .all()
    )
    return DashboardStats(
        total_users=total_users,
        active_users=active_users,
        pending_users=pending_users,
        total_roles=session.query(func.count(Role.id)).scalar() or 0,
        total_modules=session.query(func.count(Module.id)).scalar() or 0,
        recent_users=admin_views(session, recent),
    )
