"""ORM model for persisted refresh tokens (stateful token variant)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func

from app.models.base import Base


class RefreshToken(Base):
    """
    One issued refresh token. token_hash is the SHA-256 of the token string.

    revoked is set on rotation and logout; the sweep deletes revoked or expired rows.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
