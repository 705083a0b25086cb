"""Support tickets and system settings.

Revision ID: 20261018_admin_support_settings
Revises: 20261017_admin_initial
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_admin_support_settings"
down_revision = "20261017_admin_initial"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "support_ticket",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ticket_number", sa.String(length=32), nullable=False, unique=True),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="open"),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farm.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "assigned_to", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_support_ticket_status_priority", "support_ticket", ["status", "priority"]
    )

    op.create_table(
        "system_setting",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=True),
        sa.Column(
            "updated_by", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table("system_setting")
    op.drop_index("ix_support_ticket_status_priority", table_name="support_ticket")
    op.drop_table("support_ticket")
