"""ORM model for modules: named capability areas arranged in a parent/child tree."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text, text

from app.models.base import Base, TimestampMixin


class Module(TimestampMixin, Base):
    """
    A capability area that access can be granted to.

    parent_id is None for root modules. Names are unique per parent scope: a partial index
    covers the root scope, where NULL parents never collide in a plain unique index.
    """

    __tablename__ = "modules"
    __table_args__ = (
        Index(
            "uq_modules_root_name",
            "name",
            unique=True,
            postgresql_where=text("parent_id IS NULL"),
            sqlite_where=text("parent_id IS NULL"),
        ),
        Index("uq_modules_parent_name", "parent_id", "name", unique=True),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    parent_id = Column(
        Integer,
        ForeignKey("modules.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    active = Column(Boolean, nullable=False, default=True)
