"""Tests for named timer schedulers."""

import asyncio

import pytest

from espconnect.scheduling import LoopScheduler, ManualScheduler


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


class TestManualScheduler:
    """Tests for the virtual-clock scheduler."""

    def test_fires_when_due(self, scheduler):
        """Test a timer runs once the clock reaches its due time."""
        fired = []
        scheduler.call_later("retry", 5, lambda: fired.append("retry"))

        assert scheduler.advance(4.9) == 0
        assert scheduler.advance(0.1) == 1
        assert fired == ["retry"]
        assert not scheduler.is_scheduled("retry")

    def test_same_name_replaces(self, scheduler):
        """Test re-arming a name keeps only the newest timer."""
        fired = []
        scheduler.call_later("connect", 1, lambda: fired.append(1))
        scheduler.call_later("connect", 3, lambda: fired.append(3))

        scheduler.advance(10)
        assert fired == [3]
        assert scheduler.pending_names() == frozenset()

    def test_cancel(self, scheduler):
        """Test cancel reports whether a timer was pending."""
        scheduler.call_later("keepalive", 1, lambda: None)

        assert scheduler.cancel("keepalive") is True
        assert scheduler.cancel("keepalive") is False

    def test_cancel_all(self, scheduler):
        """Test cancel_all removes every timer."""
        scheduler.call_later("a", 1, lambda: None)
        scheduler.call_later("b", 2, lambda: None)
        scheduler.cancel_all()
        assert scheduler.pending_names() == frozenset()

    def test_chained_timers_in_window(self, scheduler):
        """Test timers armed by callbacks run if due within the window."""
        fired = []

        def tick():
            fired.append(scheduler.now)
            scheduler.call_later("retry", 5, tick)

        scheduler.call_later("retry", 5, tick)
        assert scheduler.advance(16) == 3
        assert fired == [5, 10, 15]
        assert scheduler.now == 16
        assert scheduler.delay_of("retry") == 4

    def test_run_next_order(self, scheduler):
        """Test run_next picks the earliest timer."""
        scheduler.call_later("late", 10, lambda: None)
        scheduler.call_later("early", 2, lambda: None)

        assert scheduler.run_next() == "early"
        assert scheduler.now == 2
        assert scheduler.run_next() == "late"
        assert scheduler.run_next() is None

    def test_fire_ignores_due_time(self, scheduler):
        """Test fire runs a timer without moving the clock."""
        fired = []
        scheduler.call_later("connect", 30, lambda: fired.append(True))

        assert scheduler.fire("connect") is True
        assert fired == [True]
        assert scheduler.now == 0
        assert scheduler.fire("connect") is False

    def test_history(self, scheduler):
        """Test every arm is recorded with its delay."""
        scheduler.call_later("connect", 1, lambda: None)
        scheduler.call_later("connect", 2, lambda: None)
        assert scheduler.history == [("connect", 1), ("connect", 2)]


class TestLoopScheduler:
    """Tests for the asyncio scheduler."""

    @pytest.mark.asyncio
    async def test_fires_on_loop(self):
        """Test a timer runs on the event loop."""
        scheduler = LoopScheduler()
        fired = asyncio.Event()
        scheduler.call_later("retry", 0.01, fired.set)

        await asyncio.wait_for(fired.wait(), timeout=1)
        assert not scheduler.is_scheduled("retry")

    @pytest.mark.asyncio
    async def test_replace_and_cancel(self):
        """Test re-arming replaces and cancel prevents the callback."""
        scheduler = LoopScheduler()
        fired = []
        scheduler.call_later("connect", 0.01, lambda: fired.append(1))
        scheduler.call_later("connect", 0.02, lambda: fired.append(2))
        assert scheduler.pending_names() == frozenset({"connect"})

        assert scheduler.cancel("connect") is True
        await asyncio.sleep(0.05)
        assert fired == []
