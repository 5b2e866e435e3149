"""Enforce module name uniqueness per parent scope.

Revision ID: 20250301300000
Revises: 20250301200000
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250301300000"
down_revision: Union[str, None] = "20250301200000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index(
        "uq_modules_root_name",
        "modules",
        ["name"],
        unique=True,
        postgresql_where=sa.text("parent_id IS NULL"),
        sqlite_where=sa.text("parent_id IS NULL"),
    )
    op.create_index("uq_modules_parent_name", "modules", ["parent_id", "name"], unique=True)


def downgrade() -> None:
    op.drop_index("uq_modules_parent_name", table_name="modules")
    op.drop_index("uq_modules_root_name", table_name="modules")
