"""
Keepalive scheduling.

The health check fires somewhere between half and all of the ping
interval after the last sign of life. Any dispatched frame pushes it back,
so pings are only sent over an idle link.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable

from espconnect.protocol.constants import ProtocolConstants
from espconnect.scheduling.abc import AbstractScheduler

logger = logging.getLogger(__name__)

KEEPALIVE_TIMER = "keepalive"


class KeepAliveScheduler:
    """
    Arms the jittered health check timer.

    Args:
        scheduler: Timer source.
        on_health_check: Called when the timer fires.
        interval: Ping interval in seconds, 0 disables keepalive.
        rng: Random source for jitter.
    """

    def __init__(
        self,
        scheduler: AbstractScheduler,
        on_health_check: Callable[[], None],
        interval: int = ProtocolConstants.PING_INTERVAL_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_health_check = on_health_check
        self._interval = interval
        self._rng = rng or random.Random()

    @property
    def enabled(self) -> bool:
        return self._interval > 0

    @property
    def is_scheduled(self) -> bool:
        return self._scheduler.is_scheduled(KEEPALIVE_TIMER)

    def schedule(self) -> int | None:
        """
        (Re)arm the health check.

        Returns:
            Delay in seconds, None when keepalive is disabled.
        """
        if not self.enabled:
            return None
        jitter = math.ceil(self._interval * ProtocolConstants.PING_JITTER_FACTOR)
        delay = self._interval - self._rng.randrange(jitter)
        logger.debug("Scheduling health check in %ds", delay)
        self._scheduler.call_later(KEEPALIVE_TIMER, delay, self._on_health_check)
        return delay

    def cancel(self) -> None:
        self._scheduler.cancel(KEEPALIVE_TIMER)
