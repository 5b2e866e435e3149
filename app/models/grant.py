"""ORM models for module grants. A row's existence is the grant."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func

from app.models.base import Base


class RoleModule(Base):
    """Members of role_id may access module_id."""

    __tablename__ = "role_modules"

    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    module_id = Column(
        Integer,
        ForeignKey("modules.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class UserModule(Base):
    """user_id may access module_id regardless of role."""

    __tablename__ = "user_modules"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    module_id = Column(
        Integer,
        ForeignKey("modules.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
