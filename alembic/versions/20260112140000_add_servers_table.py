"""Add servers table for the game-server directory.

Revision ID: 20260112140000
Revises: 20260111120000
Create Date: 2026-01-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260112140000"
down_revision: Union[str, None] = "20260111120000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "servers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("ip_address", sa.String(length=255), nullable=False),
        sa.Column("port", sa.Integer(), nullable=False, server_default="3000"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("website_url", sa.String(length=500), nullable=True),
        sa.Column("discord_url", sa.String(length=500), nullable=True),
        sa.Column("banner_url", sa.String(length=500), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("region", sa.String(length=10), nullable=False),
        sa.Column("language", sa.String(length=10), nullable=False, server_default="en"),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("current_players", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_ping", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_servers_owner_id"), "servers", ["owner_id"], unique=False)
    op.create_index(op.f("ix_servers_slug"), "servers", ["slug"], unique=True)
    op.create_index(op.f("ix_servers_category"), "servers", ["category"], unique=False)
    op.create_index(op.f("ix_servers_region"), "servers", ["region"], unique=False)
    op.create_index(op.f("ix_servers_status"), "servers", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_servers_status"), table_name="servers")
    op.drop_index(op.f("ix_servers_region"), table_name="servers")
    op.drop_index(op.f("ix_servers_category"), table_name="servers")
    op.drop_index(op.f("ix_servers_slug"), table_name="servers")
    op.drop_index(op.f("ix_servers_owner_id"), table_name="servers")
    op.drop_table("servers")
