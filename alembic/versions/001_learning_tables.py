"""Learning progress and module badges.

Creates module_progress (one row per learner and module) and user_badges
(one badge per learner and module).

Revision ID: 001_learning_tables
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_learning_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Module Progress ---
    op.create_table(
        "module_progress",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("module_id", sa.Integer, nullable=False),
        sa.Column("completed_task_ids", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("hints_used", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("time_spent", sa.Integer, nullable=False, server_default="0"),
        sa.Column("attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("questions_completed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("questions_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("completed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("badge_earned", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.UniqueConstraint("user_id", "module_id", name="uq_progress_user_module"),
    )
    op.create_index("ix_module_progress_user_id", "module_progress", ["user_id"])

    # --- User Badges ---
    op.create_table(
        "user_badges",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("module_id", sa.Integer, nullable=False),
        sa.Column("badge_name", sa.String(128), nullable=False),
        sa.Column("badge_type", sa.String(16), nullable=False, server_default="virtual"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.String(256), nullable=True),
        sa.Column("metadata", postgresql.JSONB, nullable=False, server_default="{}"),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.UniqueConstraint("user_id", "module_id", name="uq_badge_user_module"),
    )
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])
    op.create_index("idx_user_badges_earned", "user_badges", [sa.text("earned_at DESC")])


def downgrade() -> None:
    op.drop_table("user_badges")
    op.drop_table("module_progress")
