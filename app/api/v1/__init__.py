"""API v1 routes."""

from fastapi import APIRouter, Depends

from app.api.v1 import access, auth, dashboard, health, modules, permissions, roles, users

admin_only = [Depends(auth.require_admin)]

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(access.router, prefix="/access", tags=["access"])
router.include_router(dashboard.router, prefix="/admin/dashboard", tags=["admin"], dependencies=admin_only)
router.include_router(users.router, prefix="/admin/users", tags=["admin"], dependencies=admin_only)
router.include_router(roles.router, prefix="/admin/roles", tags=["admin"], dependencies=admin_only)
router.include_router(modules.router, prefix="/admin/modules", tags=["admin"], dependencies=admin_only)
router.include_router(permissions.router, prefix="/admin/permissions", tags=["admin"], dependencies=admin_only)
