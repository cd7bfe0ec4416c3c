"""Hint reveal policy for one task.

The reveal level is the number of hints visible (hints 0..level-1). It only
grows during the life of one scheduler; moving to another task means a new
scheduler with its own time origin and zero attempts.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from satslab.config import Settings

Clock = Callable[[], float]


@dataclass(frozen=True)
class HintPolicy:
    first_delay_seconds: float = 60.0
    second_delay_seconds: float = 120.0
    attempt_threshold: int = 3
    manual_min_attempts: int = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> HintPolicy:
        return cls(
            first_delay_seconds=settings.hint_first_delay_seconds,
            second_delay_seconds=settings.hint_second_delay_seconds,
            attempt_threshold=settings.hint_attempt_threshold,
            manual_min_attempts=settings.hint_manual_min_attempts,
        )


class HintScheduler:
    """Time- and attempt-driven reveal levels for a single task."""

    def __init__(
        self,
        hint_count: int,
        policy: HintPolicy | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.hint_count = hint_count
        self.policy = policy or HintPolicy()
        self._clock = clock
        self.started_at = clock()
        self.attempts = 0
        self.level = 0
        self.stopped = False

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def refresh(self) -> int:
        """Apply the automatic triggers and return the current level."""
        if self.stopped:
            return self.level
        elapsed = self.elapsed
        target = 0
        if elapsed >= self.policy.first_delay_seconds:
            target = 1
        if elapsed >= self.policy.second_delay_seconds or self.attempts >= self.policy.attempt_threshold:
            target = 2
        self.level = max(self.level, min(target, self.hint_count))
        return self.level

    def record_attempt(self) -> int:
        self.attempts += 1
        return self.refresh()

    def can_request(self) -> bool:
        return (
            not self.stopped
            and self.attempts >= self.policy.manual_min_attempts
            and self.level < self.hint_count
        )

    def request_hint(self) -> bool:
        """Manual reveal of the next hint. Returns False when not allowed."""
        self.refresh()
        if not self.can_request():
            return False
        self.level += 1
        return True

    def stop(self) -> None:
        """Freeze on task completion. Revealed hints stay revealed."""
        self.refresh()
        self.stopped = True

    def revealed(self) -> list[int]:
        return list(range(self.level))

    def next_automatic_delay(self) -> float | None:
        """Seconds until the next time-based trigger, or None if none is pending."""
        if self.stopped:
            return None
        elapsed = self.elapsed
        for level, delay in (
            (1, self.policy.first_delay_seconds),
            (2, self.policy.second_delay_seconds),
        ):
            if self.level < level <= self.hint_count and elapsed < delay:
                return delay - elapsed
        return None
