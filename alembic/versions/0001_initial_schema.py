"""Initial schema: notifications, delivery logs, preferences, templates.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- Notifications --
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("recipient_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("priority", sa.String(16), server_default="NORMAL"),
        sa.Column("action_url", sa.String(1024), nullable=True),
        sa.Column("action_label", sa.String(128), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("metadata", postgresql.JSONB, nullable=True),
        sa.Column("template_key", sa.String(128), nullable=True),
        sa.Column("is_read", sa.Boolean, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    # -- Delivery logs --
    op.create_table(
        "delivery_logs",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "notification_id",
            sa.String(64),
            sa.ForeignKey("notifications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("channel", sa.String(16), server_default="IN_APP"),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("attempts", sa.Integer, server_default="1"),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("opened_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("clicked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_delivery_logs_notification_id", "delivery_logs", ["notification_id"])
    op.create_index("ix_delivery_logs_created_at", "delivery_logs", ["created_at"])

    # -- Preferences --
    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipient_id", sa.String(128), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("enabled", sa.Boolean, server_default=sa.true()),
        sa.Column("dnd_enabled", sa.Boolean, server_default=sa.false()),
        sa.Column("dnd_start_time", sa.String(5), nullable=True),
        sa.Column("dnd_end_time", sa.String(5), nullable=True),
        sa.Column("dnd_days", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "recipient_id", "category", name="uq_preferences_recipient_category"
        ),
    )

    # -- Templates --
    op.create_table(
        "notification_templates",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("key", sa.String(128), nullable=False, unique=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("variables", sa.JSON, nullable=True),
        sa.Column("default_channels", sa.JSON, nullable=True),
        sa.Column("default_priority", sa.String(16), server_default="NORMAL"),
        sa.Column("version", sa.Integer, server_default="1"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("notification_templates")
    op.drop_table("notification_preferences")
    op.drop_index("ix_delivery_logs_created_at", table_name="delivery_logs")
    op.drop_index("ix_delivery_logs_notification_id", table_name="delivery_logs")
    op.drop_table("delivery_logs")
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_recipient_id", table_name="notifications")
    op.drop_table("notifications")
