"""Initial admin console schema.

Revision ID: 20261017_admin_initial
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261017_admin_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "admin_user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "farm",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("farm_type", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        *_timestamps(),
    )

    op.create_table(
        "farm_profile",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farm.id"), nullable=False, unique=True),
        sa.Column("herd_size", sa.Integer(), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "farm_role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farm.id"), nullable=False),
        sa.Column("role_type", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_farm_role_user_id", "farm_role", ["user_id"])
    op.create_index("ix_farm_role_farm_type", "farm_role", ["farm_id", "role_type"])

    op.create_table(
        "animal",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farm.id"), nullable=False),
        sa.Column("tag_number", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_animal_farm_id", "animal", ["farm_id"])

    op.create_table(
        "billing_subscription",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farm.id"), nullable=False),
        sa.Column("plan_type", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        sa.Column("monthly_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_billing_subscription_farm_id", "billing_subscription", ["farm_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True),
        sa.Column("farm_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("resource_type", sa.String(length=64), nullable=False),
        sa.Column("resource_id", sa.String(length=64), nullable=True),
        sa.Column("old_values", sa.JSON(), nullable=True),
        sa.Column("new_values", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_log_created", "audit_log", ["created_at"])


def downgrade():
    op.drop_index("ix_audit_log_created", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_billing_subscription_farm_id", table_name="billing_subscription")
    op.drop_table("billing_subscription")
    op.drop_index("ix_animal_farm_id", table_name="animal")
    op.drop_table("animal")
    op.drop_index("ix_farm_role_farm_type", table_name="farm_role")
    op.drop_index("ix_farm_role_user_id", table_name="farm_role")
    op.drop_table("farm_role")
    op.drop_table("farm_profile")
    op.drop_table("farm")
    op.drop_table("admin_user")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
