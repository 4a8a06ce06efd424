"""
asyncio-backed scheduler.

Example:
    >>> scheduler = LoopScheduler()
    >>> scheduler.call_later("keepalive", 45, client.health_check)
"""

from __future__ import annotations

import asyncio
import logging

from espconnect.scheduling.abc import AbstractScheduler, TimerCallback

logger = logging.getLogger(__name__)


class LoopScheduler(AbstractScheduler):
    """
    Named timers on an asyncio event loop.

    Args:
        loop: Event loop to schedule on. Defaults to the running loop at
            the first call_later().
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, name: str, delay: float, callback: TimerCallback) -> None:
        self.cancel(name)
        logger.debug("Timer %s armed for %.1fs", name, delay)
        self._handles[name] = self._get_loop().call_later(delay, self._fire, name, callback)

    def _fire(self, name: str, callback: TimerCallback) -> None:
        self._handles.pop(name, None)
        callback()

    def cancel(self, name: str) -> bool:
        handle = self._handles.pop(name, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def is_scheduled(self, name: str) -> bool:
        return name in self._handles

    def pending_names(self) -> frozenset[str]:
        return frozenset(self._handles)

    def __repr__(self) -> str:
        return f"LoopScheduler(pending={sorted(self._handles)})"
