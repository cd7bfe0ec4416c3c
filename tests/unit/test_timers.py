"""Hint timers — event-loop callbacks for the automatic hint triggers."""

from __future__ import annotations

import asyncio

import pytest

from satslab.learning.engine import ModuleProgressionEngine
from satslab.learning.hints import HintPolicy
from satslab.learning.models import Task
from satslab.learning.timers import HintTimers
from satslab.validation.result import ValidationKind

FAST = HintPolicy(first_delay_seconds=0.02, second_delay_seconds=0.05)
TXID = "cd" * 32


def _engine(validator, policy: HintPolicy = FAST, clock=None) -> ModuleProgressionEngine:
    tasks = [
        Task(id="a", title="A", description="", validation_type=ValidationKind.TRANSACTION, hints=("a1", "a2", "a3")),
        Task(id="b", title="B", description="", validation_type=ValidationKind.AMOUNT, hints=("b1", "b2")),
    ]
    return ModuleProgressionEngine(tasks, validator, hint_policy=policy, clock=clock)


class TestHintTimers:
    @pytest.mark.asyncio
    async def test_fires_both_triggers(self, validator):
        engine = _engine(validator)
        timers = HintTimers(engine)
        timers.arm()
        assert timers.pending

        await asyncio.sleep(0.15)
        assert engine.current_state.revealed_hints == {0, 1}
        assert not timers.pending

    @pytest.mark.asyncio
    async def test_cancel_stops_reveals(self, validator):
        engine = _engine(validator)
        timers = HintTimers(engine)
        timers.arm()
        timers.cancel()
        await asyncio.sleep(0.08)
        assert engine.current_state.revealed_hints == set()

    @pytest.mark.asyncio
    async def test_stale_timer_ignored(self, validator, clock):
        engine = _engine(validator, policy=HintPolicy(), clock=clock)
        timers = HintTimers(engine)
        await engine.submit(0, TXID)
        engine.advance()
        clock.advance(60)
        timers._fire(0)
        assert engine.current_state.revealed_hints == set()

    @pytest.mark.asyncio
    async def test_no_timer_for_completed_task(self, validator):
        engine = _engine(validator)
        await engine.submit(0, TXID)
        timers = HintTimers(engine)
        timers.arm()
        assert not timers.pending

    def test_arm_without_loop_is_noop(self, validator):
        timers = HintTimers(_engine(validator))
        timers.arm()
        assert not timers.pending

