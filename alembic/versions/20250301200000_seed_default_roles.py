"""Seed the built-in admin and user roles.

Revision ID: 20250301200000
Revises: 20250301100000
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250301200000"
down_revision: Union[str, None] = "20250301100000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

roles_table = sa.table(
    "roles",
    sa.column("name", sa.String),
    sa.column("description", sa.Text),
    sa.column("active", sa.Boolean),
)


def upgrade() -> None:
    op.bulk_insert(
        roles_table,
        [
            {"name": "admin", "description": "Administrators: manage users, roles and modules", "active": True},
            {"name": "user", "description": "Default role assigned at sign-up", "active": True},
        ],
    )


def downgrade() -> None:
    op.execute(roles_table.delete().where(roles_table.c.name.in_(["admin", "user"])))
