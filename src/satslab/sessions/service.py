"""Learning service — drives learner sessions and persists their progress."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from satslab.catalog.modules import get_module
from satslab.gamification.badge_service import award_module_badge, has_badge
from satslab.learning.engine import ModuleTally
from satslab.learning.flow import Section
from satslab.learning.quiz import AnswerOutcome
from satslab.progress.store import NullProgressStore, ProgressStore, SqlProgressStore
from satslab.sessions.manager import LearnerSession, SessionManager
from satslab.validation.result import ValidationResult
from satslab.validation.service import ValidationService

logger = logging.getLogger(__name__)


class ModuleNotFound(LookupError):
    """No catalog module with that id."""


class SessionForbidden(PermissionError):
    """The session belongs to another learner."""


class LearningService:
    """Session operations for one request.

    Guests get a NullProgressStore; logged-in learners are saved after every
    change that moves their progress. Persistence and badge failures are
    logged and never fail the learner's request.

    ``learner_id`` is the caller. A learner's session only answers to that
    learner; guest sessions answer to whoever holds the id.
    """

    def __init__(
        self,
        db: AsyncSession | None,
        sessions: SessionManager,
        validator: ValidationService,
        redis: object | None = None,
        learner_id: str | None = None,
    ) -> None:
        self.db = db
        self.sessions = sessions
        self.validator = validator
        self.redis = redis
        self.learner_id = learner_id

    def _store_for(self, session: LearnerSession) -> ProgressStore:
        if session.is_guest or self.db is None:
            return NullProgressStore()
        return SqlProgressStore(self.db)

    # --- Session lifecycle ---

    async def start_session(self, module_id: int, user_id: str | None = None) -> LearnerSession:
        module = get_module(module_id)
        if module is None:
            raise ModuleNotFound(module_id)

        session = self.sessions.create(module, self.validator, user_id=user_id)
        snapshot = None
        if user_id is not None:
            try:
                snapshot = await self._store_for(session).load_progress(user_id, module_id)
            except Exception:
                logger.warning("Loading progress failed for %s on module %s", user_id, module_id, exc_info=True)

        if snapshot is not None:
            session.flow.restore(snapshot)
            session.badge_earned = snapshot.badge_earned
            session.time_offset = snapshot.time_spent
            session.task_changed()
        return session

    def get_session(self, session_id: str) -> LearnerSession:
        """Return an open session of the caller. Raises SessionNotFound or SessionForbidden."""
        session = self.sessions.get(session_id)
        if session.user_id is not None and session.user_id != self.learner_id:
            raise SessionForbidden(session_id)
        return session

    async def close_session(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        await self._save(session)
        return self.sessions.close(session_id)

    # --- Flow ---

    async def navigate(self, session_id: str, target: Section | str) -> Section:
        session = self.get_session(session_id)
        section = session.flow.navigate(target)
        if section is Section.TASKS:
            session.task_changed()
        elif section is Section.COMPLETED:
            await self._finish(session)
        return section

    async def answer_question(self, session_id: str, question_index: int, option_index: int) -> AnswerOutcome:
        session = self.get_session(session_id)
        outcome = session.flow.answer_question(question_index, option_index)
        if session.flow.quiz.is_complete():
            await self._save(session)
        return outcome

    async def restart(self, session_id: str) -> LearnerSession:
        session = self.get_session(session_id)
        session.flow.restart()
        session.task_changed()
        return session

    # --- Tasks ---

    async def submit(self, session_id: str, task_index: int, raw_input: str) -> ValidationResult | None:
        session = self.get_session(session_id)
        engine = session.flow.engine
        before = engine.completed_count
        result = await session.flow.submit_task(task_index, raw_input)
        if engine.completed_count > before:
            session.timers.cancel()
            await self._save(session)
        return result

    async def advance(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        moved = session.flow.advance_task()
        if moved:
            session.task_changed()
        return moved

    def request_hint(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        return session.flow.request_hint()

    async def complete_tasks(self, session_id: str) -> ModuleTally:
        """Report the tally to the flow; awards the badge once both phases are done."""
        session = self.get_session(session_id)
        tally = session.flow.finish_tasks()
        if session.flow.completed:
            await self._finish(session)
        else:
            await self._save(session)
        return tally

    # --- Persistence ---

    async def _finish(self, session: LearnerSession) -> None:
        session.timers.cancel()
        if not session.is_guest and self.db is not None and not session.badge_earned:
            session.badge_earned = await self._award_badge(session)
        await self._save(session)

    async def _award_badge(self, session: LearnerSession) -> bool:
        module = session.module
        try:
            awarded = await award_module_badge(
                self.db,
                self.redis,
                session.user_id,
                module.id,
                module.badge,
                metadata={"time_spent": session.time_spent(), "attempts": session.flow.engine.total_attempts()},
            )
        except Exception:
            logger.warning("Badge award failed for %s on module %s", session.user_id, module.id, exc_info=True)
            return False
        if awarded:
            logger.info("Awarded badge '%s' to %s", module.badge.name, session.user_id)
            return True
        # Held from an earlier run counts as earned; a failed insert does not.
        try:
            return await has_badge(self.db, session.user_id, module.id)
        except Exception:
            logger.warning("Badge lookup failed for %s on module %s", session.user_id, module.id, exc_info=True)
            return False

    async def _save(self, session: LearnerSession) -> bool:
        if session.is_guest:
            return False
        store = self._store_for(session)
        snapshot = session.flow.snapshot(time_spent=session.time_spent(), badge_earned=session.badge_earned)
        try:
            saved = await store.save_progress(session.user_id, session.module.id, snapshot)
            if saved and self.db is not None:
                await self.db.commit()
        except Exception:
            logger.warning(
                "Saving progress failed for %s on module %s", session.user_id, session.module.id, exc_info=True
            )
            if self.db is not None:
                await self.db.rollback()
            return False
        return saved
