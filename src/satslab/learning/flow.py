"""Module flow — section state machine of one module page.

State progression: intro -> questions -> tasks -> completed
Backward navigation (tasks -> questions -> intro) is allowed and leaves
quiz and task state untouched. ``completed`` is terminal until restart.
Task operations are only accepted in the tasks section.
"""

from __future__ import annotations

from enum import Enum

from satslab.learning.engine import ModuleProgressionEngine, ModuleTally
from satslab.learning.hints import Clock, HintPolicy
from satslab.learning.models import LearningModule
from satslab.learning.quiz import AnswerOutcome, QuizSession
from satslab.progress.store import ProgressSnapshot
from satslab.validation.result import ValidationResult
from satslab.validation.service import ValidationService


class Section(str, Enum):
    INTRO = "intro"
    QUESTIONS = "questions"
    TASKS = "tasks"
    COMPLETED = "completed"


VALID_TRANSITIONS: dict[Section, list[Section]] = {
    Section.INTRO: [Section.QUESTIONS],
    Section.QUESTIONS: [Section.INTRO, Section.TASKS],
    Section.TASKS: [Section.QUESTIONS, Section.COMPLETED],
    Section.COMPLETED: [],
}


class FlowTransitionError(ValueError):
    """Section change not allowed from the current state."""


def validate_transition(current: Section, target: Section) -> None:
    """Validate a section change. Raises FlowTransitionError if invalid."""
    valid = VALID_TRANSITIONS.get(current, [])
    if target not in valid:
        raise FlowTransitionError(
            f"Invalid transition: {current.value} -> {target.value}. "
            f"Valid transitions: {[s.value for s in valid]}"
        )


class ModuleFlow:
    """Quiz phase, task phase and completion gating for one module."""

    def __init__(
        self,
        module: LearningModule,
        validator: ValidationService,
        hint_policy: HintPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.module = module
        self.section = Section.INTRO
        self.quiz = QuizSession(module.questions)
        self.engine = ModuleProgressionEngine(
            module.tasks,
            validator,
            module_id=module.id,
            profile=module.validation_profile,
            hint_policy=hint_policy,
            clock=clock,
        )
        self.tasks_reported = False
        self.tasks_started = False

    def navigate(self, target: Section | str) -> Section:
        target = Section(target)
        validate_transition(self.section, target)
        if target is Section.TASKS and not self.quiz.is_complete():
            raise FlowTransitionError("Answer every question before starting the tasks")
        if target is Section.COMPLETED and not self.badge_eligible():
            raise FlowTransitionError("Finish the quiz and every task before completing the module")
        self.section = target
        if target is Section.TASKS and not self.tasks_started:
            # The hint clock of the first task runs from here, not from the intro screen.
            self.engine.begin()
            self.tasks_started = True
        return self.section

    def answer_question(self, question_index: int, option_index: int) -> AnswerOutcome:
        if self.section is not Section.QUESTIONS:
            raise FlowTransitionError("Questions can only be answered in the questions section")
        return self.quiz.answer(question_index, option_index)

    # --- Task phase ---

    def _require_tasks(self) -> None:
        if self.section is not Section.TASKS:
            raise FlowTransitionError(f"Tasks can only be worked on in the tasks section, not in {self.section.value}")

    async def submit_task(self, task_index: int, raw_input: str) -> ValidationResult | None:
        self._require_tasks()
        return await self.engine.submit(task_index, raw_input)

    def advance_task(self) -> bool:
        self._require_tasks()
        return self.engine.advance()

    def request_hint(self) -> bool:
        self._require_tasks()
        return self.engine.request_hint()

    def refresh_hints(self) -> list[int]:
        """Revealed hints of the current task, applying timer triggers once the task phase is open."""
        if not self.tasks_started:
            return sorted(self.engine.current_state.revealed_hints)
        return self.engine.refresh_hints()

    def finish_tasks(self) -> ModuleTally:
        """Report the task tally. Completes the module when both phases are done."""
        if self.section is not Section.TASKS:
            raise FlowTransitionError("Tasks can only be finished from the tasks section")
        tally = self.engine.complete()
        self.tasks_reported = True
        if self.badge_eligible():
            self.section = Section.COMPLETED
        return tally

    def badge_eligible(self) -> bool:
        return self.quiz.is_complete() and self.engine.is_module_complete()

    @property
    def completed(self) -> bool:
        return self.section is Section.COMPLETED

    def restart(self) -> None:
        self.quiz.reset()
        self.engine.restart()
        self.tasks_reported = False
        self.tasks_started = False
        self.section = Section.INTRO

    # --- Persistence ---

    def snapshot(self, time_spent: int = 0, badge_earned: bool = False) -> ProgressSnapshot:
        tasks = self.engine.snapshot()
        return ProgressSnapshot(
            completed_task_ids=tasks["completed_task_ids"],
            hints_used=tasks["hints_used"],
            attempts=tasks["attempts"],
            time_spent=time_spent,
            questions_completed=self.quiz.is_complete(),
            questions_score=self.quiz.score,
            completed=self.completed,
            badge_earned=badge_earned,
        )

    def restore(self, snapshot: ProgressSnapshot) -> None:
        """Resume from saved progress. A completed module reopens on its completion screen."""
        if snapshot.questions_completed:
            self.quiz.mark_restored(snapshot.questions_score)
        self.engine.restore(snapshot.completed_task_ids)
        self.tasks_reported = snapshot.completed
        self.tasks_started = False
        self.section = Section.COMPLETED if snapshot.completed and self.badge_eligible() else Section.INTRO
