"""Module progression engine — ordered tasks, no-op misuse, hints, restore."""

from __future__ import annotations

import pytest

from satslab.learning.engine import ModuleProgressionEngine
from satslab.learning.hints import HintPolicy
from satslab.learning.models import Task
from satslab.learning.task_state import TaskStatus
from satslab.validation.profiles import LIGHTNING_PROFILE
from satslab.validation.result import ValidationKind, Verdict
from satslab.validation.service import ValidationService

TXID = "ab" * 32
ADDRESS = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"


def _tasks() -> list[Task]:
    return [
        Task(id="t1", title="Find a tx", description="", validation_type=ValidationKind.TRANSACTION,
             hints=("h1", "h2", "h3")),
        Task(id="t2", title="Sum outputs", description="", validation_type=ValidationKind.AMOUNT,
             hints=("a1", "a2")),
        Task(id="t3", title="Your address", description="", validation_type=ValidationKind.ADDRESS,
             hints=("b1",)),
    ]


@pytest.fixture
def engine(validator: ValidationService, clock) -> ModuleProgressionEngine:
    return ModuleProgressionEngine(_tasks(), validator, module_id=1, hint_policy=HintPolicy(), clock=clock)


class TestConstruction:
    def test_starts_on_first_task(self, engine):
        assert engine.current_task_index == 0
        assert engine.current_state.status is TaskStatus.IN_PROGRESS
        assert engine.states[1].status is TaskStatus.NOT_STARTED
        assert engine.completed_count == 0

    def test_empty_module_rejected(self, validator):
        with pytest.raises(ValueError):
            ModuleProgressionEngine([], validator)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_valid_txid_completes_task(self, engine):
        result = await engine.submit(0, TXID)
        assert result.success
        assert result.verdict is Verdict.UNVERIFIED
        assert engine.current_state.completed
        assert engine.completed_count == 1

    @pytest.mark.asyncio
    async def test_invalid_input_keeps_task_open(self, engine):
        result = await engine.submit(0, "xyz")
        assert not result.success
        assert engine.current_state.status is TaskStatus.IN_PROGRESS
        assert engine.current_state.attempt_count == 1
        assert engine.current_state.current_input == "xyz"

    @pytest.mark.asyncio
    async def test_whitespace_is_noop(self, engine):
        assert await engine.submit(0, "   ") is None
        first = await engine.submit(0, "xyz")
        assert await engine.submit(0, "\t\n") is first
        assert engine.current_state.attempt_count == 1

    @pytest.mark.asyncio
    async def test_future_task_submit_is_noop(self, engine):
        result = await engine.submit(1, "0.005")
        assert result is None
        assert engine.states[1].status is TaskStatus.NOT_STARTED
        assert engine.current_task_index == 0

    @pytest.mark.asyncio
    async def test_resubmit_completed_task_keeps_result(self, engine):
        accepted = await engine.submit(0, TXID)
        again = await engine.submit(0, "xyz")
        assert again is accepted
        assert engine.current_state.completed
        assert engine.current_state.attempt_count == 1

    @pytest.mark.asyncio
    async def test_unknown_index_rejected(self, engine):
        result = await engine.submit(7, TXID)
        assert result.verdict is Verdict.REJECTED

    @pytest.mark.asyncio
    async def test_completed_implies_success(self, engine):
        await engine.submit(0, "nope")
        await engine.submit(0, TXID)
        for state in engine.states:
            if state.completed:
                assert state.last_result.success


class TestAdvance:
    @pytest.mark.asyncio
    async def test_cannot_advance_open_task(self, engine):
        assert engine.advance() is False
        assert engine.current_task_index == 0

    @pytest.mark.asyncio
    async def test_full_walkthrough(self, engine):
        assert (await engine.submit(0, TXID)).success
        assert engine.advance() is True
        assert engine.states[1].status is TaskStatus.IN_PROGRESS

        assert not (await engine.submit(1, "0,005")).success
        assert (await engine.submit(1, "0.005")).success
        assert engine.advance() is True

        assert engine.is_last_task
        assert not engine.is_module_complete()
        assert (await engine.submit(2, ADDRESS)).success
        assert engine.advance() is False  # already last
        assert engine.is_module_complete()

        tally = engine.complete()
        assert tally.completed_count == 3
        assert tally.total_tasks == 3
        assert tally.all_completed

    @pytest.mark.asyncio
    async def test_partial_tally(self, engine):
        await engine.submit(0, TXID)
        tally = engine.complete()
        assert (tally.completed_count, tally.total_tasks, tally.all_completed) == (1, 3, False)


class TestHints:
    @pytest.mark.asyncio
    async def test_three_failures_reveal_two_hints(self, engine):
        for _ in range(3):
            await engine.submit(0, "bad")
        assert engine.current_state.revealed_hints == {0, 1}

    @pytest.mark.asyncio
    async def test_time_reveals_first_hint(self, engine, clock):
        clock.advance(60)
        assert engine.refresh_hints() == [0]

    @pytest.mark.asyncio
    async def test_manual_request_after_two_attempts(self, engine):
        assert engine.request_hint() is False
        await engine.submit(0, "bad")
        await engine.submit(0, "bad")
        assert engine.request_hint() is True
        assert engine.current_state.revealed_hints == {0}

    @pytest.mark.asyncio
    async def test_advance_resets_hint_clock(self, engine, clock):
        clock.advance(100)
        await engine.submit(0, TXID)
        engine.advance()
        assert engine.refresh_hints() == []
        clock.advance(60)
        assert engine.refresh_hints() == [0]

    @pytest.mark.asyncio
    async def test_completed_task_keeps_hints(self, engine, clock):
        clock.advance(60)
        engine.refresh_hints()
        await engine.submit(0, TXID)
        clock.advance(600)
        assert engine.refresh_hints() == [0]
        assert engine.request_hint() is False

    @pytest.mark.asyncio
    async def test_hints_used_lists_task_ids(self, engine, clock):
        clock.advance(60)
        engine.refresh_hints()
        assert engine.hints_used() == ["t1"]


class TestRestartAndRestore:
    @pytest.mark.asyncio
    async def test_restart_clears_everything(self, engine):
        await engine.submit(0, TXID)
        engine.advance()
        await engine.submit(1, "abc")
        engine.restart()
        assert engine.current_task_index == 0
        assert engine.completed_count == 0
        assert engine.total_attempts() == 0
        assert engine.states[0].status is TaskStatus.IN_PROGRESS

    def test_restore_moves_to_first_open_task(self, engine):
        engine.restore(["t1"])
        assert engine.current_task_index == 1
        assert engine.states[0].completed
        assert engine.states[0].last_result.success
        assert engine.states[1].status is TaskStatus.IN_PROGRESS

    def test_restore_ignores_out_of_order_ids(self, engine):
        engine.restore(["t2"])
        assert engine.current_task_index == 0
        assert engine.completed_count == 0

    def test_restore_all_lands_on_last(self, engine):
        engine.restore(["t1", "t2", "t3"])
        assert engine.current_task_index == 2
        assert engine.is_module_complete()

    @pytest.mark.asyncio
    async def test_snapshot(self, engine):
        await engine.submit(0, "bad")
        await engine.submit(0, TXID)
        snap = engine.snapshot()
        assert snap == {"completed_task_ids": ["t1"], "hints_used": [], "attempts": 2}


class TestProfiles:
    @pytest.mark.asyncio
    async def test_fee_field_accepts_zero_under_signet(self, validator):
        tasks = [Task(id="fee", title="Fee", description="", validation_type=ValidationKind.AMOUNT, fee_field=True)]
        engine = ModuleProgressionEngine(tasks, validator)
        assert (await engine.submit(0, "0")).success

    @pytest.mark.asyncio
    async def test_negative_fee_rejected(self, validator):
        tasks = [Task(id="fee", title="Fee", description="", validation_type=ValidationKind.AMOUNT, fee_field=True)]
        engine = ModuleProgressionEngine(tasks, validator)
        assert not (await engine.submit(0, "-1")).success

    @pytest.mark.asyncio
    async def test_lightning_profile_accepts_short_hash(self, validator):
        tasks = [Task(id="p", title="Pay", description="", validation_type=ValidationKind.TRANSACTION)]
        engine = ModuleProgressionEngine(tasks, validator, module_id=5, profile=LIGHTNING_PROFILE)
        assert (await engine.submit(0, "abcdef0123456789")).success
