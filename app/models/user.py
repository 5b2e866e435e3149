"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from app.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and module-based access control.

    role_id is optional: a user without a role only sees modules granted to them directly.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    approved = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
