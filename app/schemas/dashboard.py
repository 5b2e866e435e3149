"""Schemas for the admin dashboard."""

from pydantic import BaseModel

from app.schemas.user import AdminUserOut


class DashboardStats(BaseModel):
    total_users: int
    active_users: int
    pending_users: int
    total_roles: int
    total_modules: int
    recent_users: list[AdminUserOut]
