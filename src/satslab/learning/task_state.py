"""Per-task runtime state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from satslab.validation.result import ValidationResult


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class TaskRuntimeState:
    """Mutable state of one task inside a running module.

    Invariants: COMPLETED implies ``last_result.success``; revealed hint
    indices stay inside ``[0, hint_count)`` and never shrink until reset.
    """

    hint_count: int
    status: TaskStatus = TaskStatus.NOT_STARTED
    current_input: str = ""
    last_result: ValidationResult | None = None
    attempt_count: int = 0
    revealed_hints: set[int] = field(default_factory=set)
    accepted_value: object = None

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def start(self) -> None:
        if self.status is TaskStatus.NOT_STARTED:
            self.status = TaskStatus.IN_PROGRESS

    def record(self, raw_input: str, result: ValidationResult) -> None:
        """Store one validated submission."""
        self.start()
        self.current_input = raw_input
        self.attempt_count += 1
        self.last_result = result
        if result.success:
            self.status = TaskStatus.COMPLETED
            self.accepted_value = result.value

    def reveal_up_to(self, level: int) -> None:
        self.revealed_hints.update(range(min(level, self.hint_count)))

    def mark_restored(self) -> None:
        """Mark completed from saved progress; the original submission is not kept."""
        self.status = TaskStatus.COMPLETED
        self.last_result = ValidationResult.restored()

    def reset(self) -> None:
        self.status = TaskStatus.NOT_STARTED
        self.current_input = ""
        self.last_result = None
        self.attempt_count = 0
        self.revealed_hints = set()
        self.accepted_value = None
