"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00.000000

tickets, user_scores, daily_stats, achievements.
Each table carries the unique key its upserts / grants rely on.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- tickets ---
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("is_new_bug", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(128), nullable=False),
        sa.Column("status_category", sa.String(32), nullable=False),
        sa.Column("reporter_id", sa.String(128), nullable=True),
        sa.Column("reporter_name", sa.String(256), nullable=True),
        sa.Column("assignee_id", sa.String(128), nullable=True),
        sa.Column("assignee_name", sa.String(256), nullable=True),
        sa.Column("sprint_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("reporter_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("assignee_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.String(64), nullable=True),
        sa.Column("issue_type", sa.String(64), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tickets_id", "tickets", ["id"])
    op.create_index("ix_tickets_key", "tickets", ["key"], unique=True)
    op.create_index("ix_tickets_status_category", "tickets", ["status_category"])
    op.create_index("ix_tickets_created_at", "tickets", ["created_at"])
    op.create_index("ix_tickets_resolved_at", "tickets", ["resolved_at"])

    # --- user_scores ---
    op.create_table(
        "user_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=False),
        sa.Column("bugs_reported", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bugs_fixed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reporter_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("assignee_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("badges", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_scores_id", "user_scores", ["id"])
    op.create_index("ix_user_scores_user_name", "user_scores", ["user_name"], unique=True)
    op.create_index("ix_user_scores_total_points", "user_scores", ["total_points"])

    # --- daily_stats ---
    op.create_table(
        "daily_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("bugs_created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bugs_fixed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("points_earned", sa.Float(), nullable=False, server_default="0"),
        sa.Column("active_users", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_daily_stats_id", "daily_stats", ["id"])
    op.create_index("ix_daily_stats_date", "daily_stats", ["date"], unique=True)

    # --- achievements ---
    op.create_table(
        "achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=False),
        sa.Column("badge_name", sa.String(128), nullable=False),
        sa.Column("badge_icon", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_name", "badge_name", name="uq_achievement_user_badge"),
    )
    op.create_index("ix_achievements_id", "achievements", ["id"])
    op.create_index("ix_achievements_user_name", "achievements", ["user_name"])


def downgrade() -> None:
    op.drop_index("ix_achievements_user_name", table_name="achievements")
    op.drop_index("ix_achievements_id", table_name="achievements")
    op.drop_table("achievements")

    op.drop_index("ix_daily_stats_date", table_name="daily_stats")
    op.drop_index("ix_daily_stats_id", table_name="daily_stats")
    op.drop_table("daily_stats")

    op.drop_index("ix_user_scores_total_points", table_name="user_scores")
    op.drop_index("ix_user_scores_user_name", table_name="user_scores")
    op.drop_index("ix_user_scores_id", table_name="user_scores")
    op.drop_table("user_scores")

    op.drop_index("ix_tickets_resolved_at", table_name="tickets")
    op.drop_index("ix_tickets_created_at", table_name="tickets")
    op.drop_index("ix_tickets_status_category", table_name="tickets")
    op.drop_index("ix_tickets_key", table_name="tickets")
    op.drop_index("ix_tickets_id", table_name="tickets")
    op.drop_table("tickets")
