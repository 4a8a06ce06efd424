"""
Named single-shot timers for the connection engine.

Available schedulers:
- LoopScheduler: asyncio event loop timers
- ManualScheduler: virtual clock for testing
"""

from espconnect.scheduling.abc import AbstractScheduler, TimerCallback
from espconnect.scheduling.loop import LoopScheduler
from espconnect.scheduling.manual import ManualScheduler, ScheduledCall

__all__ = [
    "AbstractScheduler",
    "TimerCallback",
    "LoopScheduler",
    "ManualScheduler",
    "ScheduledCall",
]
