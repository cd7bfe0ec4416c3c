"""Module progression engine — ordered task sequence of one module.

The pointer only moves forward, one task at a time, through ``advance()``
once the current task is completed. Misuse (submitting a later task,
re-submitting a completed one, advancing an open task) never raises out of
the engine: it is logged and resolves to a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from satslab.learning.hints import Clock, HintPolicy, HintScheduler
from satslab.learning.models import Task
from satslab.learning.task_state import TaskRuntimeState
from satslab.validation.profiles import SIGNET_PROFILE, ValidationContext, ValidationProfile
from satslab.validation.result import ValidationResult
from satslab.validation.service import ValidationService

logger = logging.getLogger(__name__)


class EngineMisuseError(Exception):
    """Operation not allowed in the current engine state. Handled inside the engine."""


@dataclass(frozen=True)
class ModuleTally:
    completed_count: int
    total_tasks: int

    @property
    def all_completed(self) -> bool:
        return self.completed_count == self.total_tasks


class ModuleProgressionEngine:
    """Drives a learner through the tasks of one module."""

    def __init__(
        self,
        tasks: Sequence[Task],
        validator: ValidationService,
        *,
        module_id: int | None = None,
        profile: ValidationProfile = SIGNET_PROFILE,
        hint_policy: HintPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        if not tasks:
            msg = "A module needs at least one task"
            raise ValueError(msg)
        self.tasks = tuple(tasks)
        self.validator = validator
        self.module_id = module_id
        self.profile = profile
        self.hint_policy = hint_policy or HintPolicy()
        self._clock = clock
        self.states = [TaskRuntimeState(hint_count=len(t.hints)) for t in self.tasks]
        self.current_task_index = 0
        self.begin()

    # --- Queries ---

    @property
    def current_task(self) -> Task:
        return self.tasks[self.current_task_index]

    @property
    def current_state(self) -> TaskRuntimeState:
        return self.states[self.current_task_index]

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.states if s.completed)

    @property
    def is_last_task(self) -> bool:
        return self.current_task_index == len(self.tasks) - 1

    def is_module_complete(self) -> bool:
        return all(s.completed for s in self.states)

    def complete(self) -> ModuleTally:
        """Report the tally to the module flow. Accurate at any time, partial or not."""
        return ModuleTally(completed_count=self.completed_count, total_tasks=len(self.tasks))

    # --- Transitions ---

    async def submit(self, task_index: int, raw_input: str) -> ValidationResult | None:
        """Validate input for the current task.

        Whitespace-only input is a no-op returning the previous result (None if
        there is none). Misuse returns the previous result of the addressed task,
        or a rejection when the index does not exist.
        """
        try:
            state = self._submittable_state(task_index)
        except EngineMisuseError as e:
            logger.warning("Ignored submit on module %s: %s", self.module_id, e)
            if 0 <= task_index < len(self.states):
                return self.states[task_index].last_result
            return ValidationResult.rejected(str(e))

        if not raw_input.strip():
            return state.last_result

        task = self.tasks[task_index]
        result = await self.validator.validate(
            task.validation_type,
            raw_input,
            self._context_for(task),
        )
        state.record(raw_input, result)
        state.reveal_up_to(self.scheduler.record_attempt())
        if state.completed:
            self.scheduler.stop()
            state.reveal_up_to(self.scheduler.level)
        return result

    def advance(self) -> bool:
        """Move to the next task. Only allowed from a completed, non-final task."""
        try:
            if not self.current_state.completed:
                raise EngineMisuseError("current task is not completed")
            if self.is_last_task:
                raise EngineMisuseError("already at the last task")
        except EngineMisuseError as e:
            logger.debug("advance() no-op on module %s: %s", self.module_id, e)
            return False

        self.current_task_index += 1
        self.scheduler = self._new_scheduler()
        self.current_state.start()
        return True

    def refresh_hints(self) -> list[int]:
        """Apply timer triggers to the current task and return its revealed hint indices."""
        state = self.current_state
        if not state.completed:
            state.reveal_up_to(self.scheduler.refresh())
        return sorted(state.revealed_hints)

    def request_hint(self) -> bool:
        """Manual hint request for the current task."""
        state = self.current_state
        if state.completed or not self.scheduler.request_hint():
            return False
        state.reveal_up_to(self.scheduler.level)
        return True

    def begin(self) -> None:
        """Start the hint clock of the current task afresh. Called when the task phase opens."""
        self.scheduler = self._new_scheduler()
        if self.current_state.completed:
            self.scheduler.stop()
        else:
            self.current_state.start()

    def restart(self) -> None:
        """Reset every task and return to the first one."""
        for state in self.states:
            state.reset()
        self.current_task_index = 0
        self.begin()

    # --- Persistence helpers ---

    def completed_task_ids(self) -> list[str]:
        return [t.id for t, s in zip(self.tasks, self.states) if s.completed]

    def hints_used(self) -> list[str]:
        return [t.id for t, s in zip(self.tasks, self.states) if s.revealed_hints]

    def total_attempts(self) -> int:
        return sum(s.attempt_count for s in self.states)

    def snapshot(self) -> dict[str, object]:
        """Persistence payload of the task phase."""
        return {
            "completed_task_ids": self.completed_task_ids(),
            "hints_used": self.hints_used(),
            "attempts": self.total_attempts(),
        }

    def restore(self, completed_task_ids: Sequence[str]) -> None:
        """Re-apply saved completions. Tasks are done in order, so only the leading run counts."""
        done = set(completed_task_ids)
        index = 0
        while index < len(self.tasks) and self.tasks[index].id in done:
            self.states[index].mark_restored()
            index += 1
        self.current_task_index = min(index, len(self.tasks) - 1)
        self.begin()

    # --- Internals ---

    def _submittable_state(self, task_index: int) -> TaskRuntimeState:
        if not 0 <= task_index < len(self.tasks):
            raise EngineMisuseError(f"task {task_index} does not exist")
        if task_index != self.current_task_index:
            raise EngineMisuseError(f"task {task_index} is not the current task")
        state = self.states[task_index]
        if state.completed:
            raise EngineMisuseError(f"task {task_index} is already completed")
        return state

    def _context_for(self, task: Task) -> ValidationContext:
        previous = {
            t.id: s.accepted_value
            for t, s in zip(self.tasks, self.states)
            if s.completed and t.id != task.id
        }
        return ValidationContext(
            module_id=self.module_id,
            profile=self.profile,
            fee_field=task.fee_field,
            previous_values=previous,
        )

    def _new_scheduler(self) -> HintScheduler:
        hint_count = len(self.tasks[self.current_task_index].hints)
        if self._clock is None:
            return HintScheduler(hint_count, self.hint_policy)
        return HintScheduler(hint_count, self.hint_policy, clock=self._clock)
