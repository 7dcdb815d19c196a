"""Add is_admin (platform administrator flag) to users.

Revision ID: 20260112160000
Revises: 20260112140000
Create Date: 2026-01-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260112160000"
down_revision: Union[str, None] = "20260112140000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "users",
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(op.f("ix_users_is_admin"), "users", ["is_admin"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_users_is_admin"), table_name="users")
    op.drop_column("users", "is_admin")
