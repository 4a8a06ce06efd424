"""
Abstract timer interface.

The connection engine never sleeps; it arms named single-shot timers and
returns. A scheduler owns those timers. Arming a name that is already
pending replaces the earlier timer, so at most one timer per name exists.

Implementations:
- LoopScheduler: asyncio loop.call_later
- ManualScheduler: virtual clock for deterministic tests
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

TimerCallback = Callable[[], None]


class AbstractScheduler(ABC):
    """
    Abstract base class for named single-shot timers.

    Timer callbacks run on the same thread as every other engine callback
    and must not block.
    """

    @abstractmethod
    def call_later(self, name: str, delay: float, callback: TimerCallback) -> None:
        """
        Arm a named timer.

        Args:
            name: Timer name. A pending timer with this name is cancelled.
            delay: Seconds until the callback runs.
            callback: Zero-argument callable.
        """
        ...

    @abstractmethod
    def cancel(self, name: str) -> bool:
        """
        Cancel a named timer.

        Returns:
            True if a pending timer was cancelled.
        """
        ...

    @abstractmethod
    def is_scheduled(self, name: str) -> bool:
        """Check whether a timer with this name is pending."""
        ...

    def cancel_all(self) -> None:
        """Cancel every pending timer."""
        for name in list(self.pending_names()):
            self.cancel(name)

    @abstractmethod
    def pending_names(self) -> frozenset[str]:
        """Names of all pending timers."""
        ...
