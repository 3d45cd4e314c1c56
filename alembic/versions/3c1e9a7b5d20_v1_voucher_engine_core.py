"""v1_voucher_engine_core

Revision ID: 3c1e9a7b5d20
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3c1e9a7b5d20"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sum_per_unit", sa.BigInteger(), nullable=True),
        sa.Column("min_vouchers", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("min_brands", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("start_at < end_at", name="ck_campaigns_start_before_end"),
        sa.CheckConstraint("min_vouchers >= 1", name="ck_campaigns_min_vouchers_positive"),
        sa.CheckConstraint("min_brands >= 1", name="ck_campaigns_min_brands_positive"),
        sa.CheckConstraint("sum_per_unit IS NULL OR sum_per_unit > 0", name="ck_campaigns_sum_per_unit_positive"),
    )
    op.create_index("idx_campaigns_active_start", "campaigns", ["is_active", "start_at"])

    op.create_table(
        "brands",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("slug", name="uq_brands_slug"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("external_handle", sa.String(64), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("language_code", sa.String(8), nullable=False, server_default=sa.text("'RU'")),
        sa.Column("bot_step", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("external_handle", name="uq_users_external_handle"),
    )
    op.create_index("idx_users_phone", "users", ["phone"])
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "vouchers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("brand_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'FREE'")),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("status IN ('FREE','ACTIVATED','USED','DELETED')", name="ck_vouchers_status"),
        sa.CheckConstraint(
            "status <> 'ACTIVATED' OR (user_id IS NOT NULL AND activated_at IS NOT NULL)",
            name="ck_vouchers_activated_has_owner",
        ),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("code", name="uq_vouchers_code"),
    )
    op.create_index("idx_vouchers_user_campaign_status", "vouchers", ["user_id", "campaign_id", "status"])
    op.create_index("idx_vouchers_campaign_brand", "vouchers", ["campaign_id", "brand_id"])
    op.create_index("idx_vouchers_status", "vouchers", ["status"])

    op.create_table(
        "winners",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("voucher_id", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["voucher_id"], ["vouchers.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("voucher_id", name="uq_winners_voucher_id"),
    )

    op.create_table(
        "activation_logs",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("external_handle", sa.String(64), nullable=True),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "reason IS NULL OR reason IN "
            "('INVALID_CODE','ALREADY_ACTIVATED','CAMPAIGN_INACTIVE','CAMPAIGN_EXPIRED')",
            name="ck_activation_logs_reason",
        ),
        sa.CheckConstraint(
            "(success AND reason IS NULL) OR (NOT success AND reason IS NOT NULL)",
            name="ck_activation_logs_success_reason_consistency",
        ),
    )
    op.create_index("idx_activation_logs_handle_time", "activation_logs", ["external_handle", "created_at"])
    op.create_index("idx_activation_logs_code", "activation_logs", ["code"])


def downgrade() -> None:
    op.drop_index("idx_activation_logs_code", table_name="activation_logs")
    op.drop_index("idx_activation_logs_handle_time", table_name="activation_logs")
    op.drop_table("activation_logs")
    op.drop_table("winners")
    op.drop_index("idx_vouchers_status", table_name="vouchers")
    op.drop_index("idx_vouchers_campaign_brand", table_name="vouchers")
    op.drop_index("idx_vouchers_user_campaign_status", table_name="vouchers")
    op.drop_table("vouchers")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_phone", table_name="users")
    op.drop_table("users")
    op.drop_table("brands")
    op.drop_index("idx_campaigns_active_start", table_name="campaigns")
    op.drop_table("campaigns")
