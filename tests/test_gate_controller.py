"""Unit tests for gate open/close transitions and the auto-close timer."""

import asyncio
import pytest

from app.exceptions import GateNotFound, GateUnavailable

AUTO_CLOSE = 0.2            # matches the controller fixture

PAST_DEADLINE = AUTO_CLOSE * 1.75


class TestTransitions:
    @pytest.mark.asyncio
    async def test_open_sets_state_and_schedules_close(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)
        assert gate_state(gate.id).is_open is True
        assert controller.pending(gate.id)

    @pytest.mark.asyncio
    async def test_open_refreshes_last_activity(self, repo, controller, make_gate):
        gate = make_gate()
        before = gate.last_activity
        controller.open(repo, gate.id)
        assert gate.last_activity >= before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["offline", "maintenance"])
    async def test_refuses_to_open_unavailable_gate(self, repo, controller, make_gate, gate_state, status):
        gate = make_gate(status=status)
        with pytest.raises(GateUnavailable):
            controller.open(repo, gate.id)
        assert gate_state(gate.id).is_open is False
        assert not controller.pending(gate.id)

    @pytest.mark.asyncio
    async def test_unknown_gate(self, repo, controller):
        with pytest.raises(GateNotFound):
            controller.open(repo, "no-such-gate")
        with pytest.raises(GateNotFound):
            controller.close(repo, "no-such-gate")

    @pytest.mark.asyncio
    async def test_close_cancels_pending_timer(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)
        controller.close(repo, gate.id)
        assert gate_state(gate.id).is_open is False
        assert not controller.pending(gate.id)

    @pytest.mark.asyncio
    async def test_no_timer_until_transaction_commits(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        with pytest.raises(RuntimeError):
            with repo.transaction():
                controller.open(repo, gate.id)
                assert not controller.pending(gate.id)
                raise RuntimeError("log write failed")
        assert not controller.pending(gate.id)
        assert gate_state(gate.id).is_open is False


class TestAutoClose:
    @pytest.mark.asyncio
    async def test_gate_closes_by_itself(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)
        await asyncio.sleep(PAST_DEADLINE)
        assert gate_state(gate.id).is_open is False
        assert not controller.pending(gate.id)

    @pytest.mark.asyncio
    async def test_held_open_gate_stays_open(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id, auto_close=False)
        await asyncio.sleep(PAST_DEADLINE)
        assert gate_state(gate.id).is_open is True

    @pytest.mark.asyncio
    async def test_stale_timer_does_not_close_reopened_gate(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)                     # timer for the first opening
        controller.close(repo, gate.id)                    # operator closes early
        controller.open(repo, gate.id, auto_close=False)   # operator re-opens and holds

        await asyncio.sleep(PAST_DEADLINE)                 # well past the first deadline

        assert gate_state(gate.id).is_open is True

    @pytest.mark.asyncio
    async def test_reopen_restarts_the_countdown(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)
        await asyncio.sleep(AUTO_CLOSE / 2)
        controller.open(repo, gate.id)                     # second scan while still open

        await asyncio.sleep(AUTO_CLOSE * 0.75)             # first deadline has passed
        assert gate_state(gate.id).is_open is True

        await asyncio.sleep(AUTO_CLOSE)                    # second deadline has passed
        assert gate_state(gate.id).is_open is False

    @pytest.mark.asyncio
    async def test_shutdown_cancels_timers(self, repo, controller, make_gate, gate_state):
        gate = make_gate()
        controller.open(repo, gate.id)
        controller.shutdown()
        await asyncio.sleep(PAST_DEADLINE)
        assert gate_state(gate.id).is_open is True
        assert controller.pending_count() == 0
