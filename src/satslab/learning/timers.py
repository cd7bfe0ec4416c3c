"""Event-loop timers that fire the automatic hint triggers of the active task."""

from __future__ import annotations

import asyncio
import logging

from satslab.learning.engine import ModuleProgressionEngine

logger = logging.getLogger(__name__)


class HintTimers:
    """One pending timer at a time, bound to the task that was active when it was armed.

    Must be cancelled (or re-armed) whenever the task changes or the session
    ends; a timer that fires for another task index does nothing.
    """

    def __init__(self, engine: ModuleProgressionEngine) -> None:
        self.engine = engine
        self._handle: asyncio.TimerHandle | None = None
        self._armed_for: int | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        """(Re)schedule the next automatic trigger for the current task."""
        self.cancel()
        delay = self.engine.scheduler.next_automatic_delay()
        if delay is None or self.engine.current_state.completed:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return  # no loop: hints are still refreshed on every read
        self._armed_for = self.engine.current_task_index
        self._handle = loop.call_later(max(delay, 0.0), self._fire, self._armed_for)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._armed_for = None

    def _fire(self, task_index: int) -> None:
        self._handle = None
        if task_index != self.engine.current_task_index:
            logger.debug("Stale hint timer for task %s ignored", task_index)
            return
        revealed = self.engine.refresh_hints()
        logger.debug("Hint timer fired for task %s, revealed %s", task_index, revealed)
        self.arm()
