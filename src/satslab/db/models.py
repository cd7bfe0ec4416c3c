"""ORM models for learner progress and earned badges.

Learner ids come from the external identity provider, so they are stored as
opaque strings rather than foreign keys.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    false,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from satslab.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class ModuleProgress(Base):
    """Saved progress of one learner in one module."""

    __tablename__ = "module_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_progress_user_module"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_task_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    hints_used: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    questions_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    questions_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    badge_earned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class UserBadge(Base):
    """A module badge earned by a learner. One per (learner, module)."""

    __tablename__ = "user_badges"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_badge_user_module"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    badge_name: Mapped[str] = mapped_column(String(128), nullable=False)
    badge_type: Mapped[str] = mapped_column(String(16), nullable=False, default="virtual")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(256), nullable=True)
    badge_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSONType, nullable=False, default=dict)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
