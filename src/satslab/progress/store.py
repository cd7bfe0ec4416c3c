"""
Progress persistence with store abstraction.

SqlProgressStore saves one row per (learner, module). Guests get
NullProgressStore: nothing is saved and nothing is loaded, so their state
lives only in the in-memory session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from satslab.db.models import ModuleProgress


class ProgressSnapshot(BaseModel):
    """Logical progress record of one learner in one module."""

    completed_task_ids: list[str] = Field(default_factory=list)
    hints_used: list[str] = Field(default_factory=list)
    time_spent: int = 0
    attempts: int = 0
    questions_completed: bool = False
    questions_score: int = 0
    completed: bool = False
    badge_earned: bool = False


class ProgressStore(ABC):
    """Persistence collaborator for learner progress."""

    @abstractmethod
    async def save_progress(self, user_id: str, module_id: int, snapshot: ProgressSnapshot) -> bool:
        """Upsert progress. Returns True on success."""
        ...

    @abstractmethod
    async def load_progress(self, user_id: str, module_id: int) -> ProgressSnapshot | None:
        """Load saved progress, or None when nothing was saved."""
        ...


class NullProgressStore(ProgressStore):
    """Store used for guests — saves nothing."""

    async def save_progress(self, user_id: str, module_id: int, snapshot: ProgressSnapshot) -> bool:
        return False

    async def load_progress(self, user_id: str, module_id: int) -> ProgressSnapshot | None:
        return None


class SqlProgressStore(ProgressStore):
    """SQLAlchemy-backed store. The caller owns the session and commits."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_row(self, user_id: str, module_id: int) -> ModuleProgress | None:
        result = await self.db.execute(
            select(ModuleProgress).where(
                ModuleProgress.user_id == user_id,
                ModuleProgress.module_id == module_id,
            )
        )
        return result.scalar_one_or_none()

    async def save_progress(self, user_id: str, module_id: int, snapshot: ProgressSnapshot) -> bool:
        now = datetime.now(timezone.utc)
        row = await self._get_row(user_id, module_id)
        if row is None:
            row = ModuleProgress(user_id=user_id, module_id=module_id)
            self.db.add(row)

        row.completed_task_ids = list(snapshot.completed_task_ids)
        row.hints_used = list(snapshot.hints_used)
        row.time_spent = snapshot.time_spent
        row.attempts = snapshot.attempts
        row.questions_completed = snapshot.questions_completed
        row.questions_score = snapshot.questions_score
        row.badge_earned = row.badge_earned or snapshot.badge_earned
        if snapshot.completed and row.completed_at is None:
            row.completed_at = now
        row.completed = row.completed or snapshot.completed
        row.updated_at = now

        await self.db.flush()
        return True

    async def load_progress(self, user_id: str, module_id: int) -> ProgressSnapshot | None:
        row = await self._get_row(user_id, module_id)
        return _to_snapshot(row) if row is not None else None

    async def list_progress(self, user_id: str) -> list[tuple[int, ProgressSnapshot]]:
        """All saved modules of a learner, ordered by module id."""
        result = await self.db.execute(
            select(ModuleProgress)
            .where(ModuleProgress.user_id == user_id)
            .order_by(ModuleProgress.module_id)
        )
        rows = result.scalars().all()
        return [(row.module_id, _to_snapshot(row)) for row in rows]


def _to_snapshot(row: ModuleProgress) -> ProgressSnapshot:
    return ProgressSnapshot(
        completed_task_ids=list(row.completed_task_ids or []),
        hints_used=list(row.hints_used or []),
        time_spent=row.time_spent,
        attempts=row.attempts,
        questions_completed=row.questions_completed,
        questions_score=row.questions_score,
        completed=row.completed,
        badge_earned=row.badge_earned,
    )
