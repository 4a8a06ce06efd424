"""
Virtual-clock scheduler for testing.

Time only moves when the test says so, which makes retry, keepalive and
reconnect behaviour deterministic.

Example:
    >>> scheduler = ManualScheduler()
    >>> fired = []
    >>> scheduler.call_later("retry", 5, lambda: fired.append("retry"))
    >>> scheduler.advance(4.9)
    0
    >>> scheduler.advance(0.1)
    1
    >>> fired
    ['retry']
"""

from __future__ import annotations

from dataclasses import dataclass

from espconnect.scheduling.abc import AbstractScheduler, TimerCallback


@dataclass
class ScheduledCall:
    """A pending timer on the virtual clock."""

    name: str
    due: float
    callback: TimerCallback
    sequence: int


class ManualScheduler(AbstractScheduler):
    """
    Scheduler driven by advance() and run_next().

    Attributes:
        now: Current virtual time in seconds.
        history: (name, delay) of every call_later(), in order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.history: list[tuple[str, float]] = []
        self._calls: dict[str, ScheduledCall] = {}
        self._sequence = 0

    def call_later(self, name: str, delay: float, callback: TimerCallback) -> None:
        self._sequence += 1
        self.history.append((name, delay))
        self._calls[name] = ScheduledCall(name, self.now + delay, callback, self._sequence)

    def cancel(self, name: str) -> bool:
        return self._calls.pop(name, None) is not None

    def is_scheduled(self, name: str) -> bool:
        return name in self._calls

    def pending_names(self) -> frozenset[str]:
        return frozenset(self._calls)

    def delay_of(self, name: str) -> float | None:
        """Seconds until the named timer fires, None when not pending."""
        call = self._calls.get(name)
        return None if call is None else call.due - self.now

    def _next_call(self) -> ScheduledCall | None:
        if not self._calls:
            return None
        return min(self._calls.values(), key=lambda c: (c.due, c.sequence))

    def run_next(self) -> str | None:
        """
        Jump to the earliest pending timer and run it.

        Returns:
            Name of the timer that ran, None when nothing was pending.
        """
        call = self._next_call()
        if call is None:
            return None
        del self._calls[call.name]
        self.now = max(self.now, call.due)
        call.callback()
        return call.name

    def fire(self, name: str) -> bool:
        """
        Run a named timer immediately, regardless of its due time.

        Returns:
            True if the timer was pending.
        """
        call = self._calls.pop(name, None)
        if call is None:
            return False
        call.callback()
        return True

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every timer that comes due.

        Timers armed by callbacks run too when they fall inside the window.

        Returns:
            Number of callbacks run.
        """
        target = self.now + seconds
        count = 0
        while True:
            call = self._next_call()
            if call is None or call.due > target:
                break
            del self._calls[call.name]
            self.now = call.due
            call.callback()
            count += 1
        self.now = target
        return count

    def __repr__(self) -> str:
        return f"ManualScheduler(now={self.now}, pending={sorted(self._calls)})"
