"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.grant import RoleModule, UserModule
from app.models.module import Module
from app.models.refresh_token import RefreshToken
from app.models.role import Role
from app.models.user import User

__all__ = ["Base", "Module", "RefreshToken", "Role", "RoleModule", "User", "UserModule"]
