"""
Reconnect backoff.

Each failed attempt doubles the delay before the next one, up to a cap,
with up to 25% random jitter added so that many devices dropped by the
same outage do not reconnect in lockstep.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable

from espconnect.protocol.constants import ProtocolConstants
from espconnect.scheduling.abc import AbstractScheduler

logger = logging.getLogger(__name__)

CONNECT_TIMER = "connect"


class ReconnectState:
    """Backoff state that outlives a single connection."""

    __slots__ = ("next_delay_seconds",)

    def __init__(self, next_delay_seconds: int = 0) -> None:
        self.next_delay_seconds = next_delay_seconds

    def __repr__(self) -> str:
        return f"ReconnectState(next_delay_seconds={self.next_delay_seconds})"


class ReconnectController:
    """
    Schedules transport re-open with jittered exponential backoff.

    Args:
        scheduler: Timer source.
        on_connect: Called when the connect timer fires.
        state: Backoff state, normally owned by the registry.
        max_delay: Cap on the pre-jitter delay in seconds.
        rng: Random source for jitter.

    Example:
        >>> controller = ReconnectController(scheduler, client.open_socket)
        >>> controller.schedule_reconnect()   # ~1s
        1
        >>> controller.schedule_reconnect()   # ~2s
        2
    """

    def __init__(
        self,
        scheduler: AbstractScheduler,
        on_connect: Callable[[], None],
        state: ReconnectState | None = None,
        max_delay: int = ProtocolConstants.MAX_RECONNECT_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_connect = on_connect
        self._state = state if state is not None else ReconnectState()
        self._max_delay = max_delay
        self._rng = rng or random.Random()

    @property
    def next_delay(self) -> int:
        """Pre-jitter delay the next schedule_reconnect() will use."""
        delay = self._state.next_delay_seconds or ProtocolConstants.MIN_RECONNECT_SECONDS
        return min(delay, self._max_delay)

    @property
    def is_scheduled(self) -> bool:
        return self._scheduler.is_scheduled(CONNECT_TIMER)

    def schedule_reconnect(self) -> int:
        """
        Arm the connect timer and double the stored delay.

        A pending connect timer is replaced, never duplicated.

        Returns:
            The pre-jitter delay used, in seconds.
        """
        delay = self.next_delay
        jitter = self._rng.randrange(math.ceil(delay * ProtocolConstants.RECONNECT_JITTER_FACTOR))
        logger.info("Reconnecting in %d seconds", delay + jitter)
        self._state.next_delay_seconds = delay * 2
        self._scheduler.call_later(CONNECT_TIMER, delay + jitter, self._on_connect)
        return delay

    def force_max_delay(self) -> None:
        """Make the next attempt wait the full maximum delay."""
        self._state.next_delay_seconds = self._max_delay

    def reset(self) -> None:
        """Return to the minimum delay after a successful connection."""
        self._state.next_delay_seconds = ProtocolConstants.MIN_RECONNECT_SECONDS

    def cancel(self) -> None:
        self._scheduler.cancel(CONNECT_TIMER)
