"""
Outbound command supervision.

Commands that expect a response are kept until the response arrives and
retransmitted on a timer until it does. At most one command per request
message type is pending: enqueueing a second one evicts the first, so a
newer switch command replaces an unacknowledged older one.

Pending commands survive a reconnect. While a new handshake runs, only the
requests the release check admits are written. The subscribe step of the
handshake flushes the rest. Handshake requests sent again on reconnect
replace their stale twins through the same eviction.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from espconnect.exceptions import CommandRetryExhaustedError
from espconnect.protocol.constants import ProtocolConstants
from espconnect.protocol.tags import TagMap
from espconnect.scheduling.abc import AbstractScheduler
from espconnect.session.state import Continuation

logger = logging.getLogger(__name__)

RETRY_TIMER = "retry"

Transmit = Callable[[int, bytes], None]
ContinuationHandler = Callable[[Continuation, TagMap], None]
ExhaustionHandler = Callable[[CommandRetryExhaustedError], None]


@dataclass
class PendingCommand:
    """
    A sent command waiting for its response.

    Attributes:
        message_type: Request message type.
        payload: Encoded request payload.
        expected_response: Response message type that completes it.
        on_success: Follow-up action run with the response tags.
        retries_remaining: Retransmissions left before giving up.
    """

    message_type: int
    payload: bytes
    expected_response: int
    on_success: Continuation | None = None
    retries_remaining: int = ProtocolConstants.SEND_RETRY_COUNT


class OutboundSupervisor:
    """
    Send queue with response correlation and bounded retry.

    Args:
        scheduler: Timer source for the retry timer.
        transmit: Writes one frame (message type, payload).
        can_transmit: Whether the link is up for writing.
        on_success: Runs a continuation with the response tags.
        on_exhausted: Called once per retry tick that dropped commands.
        can_release: Whether a pending command of a message type may be
            written now. Held commands keep their retries. Defaults to
            always.
        pending: Backing store, normally owned by the registry.
        retry_count: Retransmissions per command.
        retry_seconds: Seconds between retransmissions.

    Example:
        >>> supervisor.enqueue(MessageType.PING_REQUEST, b"",
        ...                    MessageType.PING_RESPONSE, Continuation.PING)
        >>> supervisor.on_frame_dispatched(MessageType.PING_RESPONSE, {})
        True
    """

    def __init__(
        self,
        scheduler: AbstractScheduler,
        transmit: Transmit,
        can_transmit: Callable[[], bool],
        on_success: ContinuationHandler,
        on_exhausted: ExhaustionHandler,
        pending: OrderedDict[int, PendingCommand] | None = None,
        retry_count: int = ProtocolConstants.SEND_RETRY_COUNT,
        retry_seconds: float = ProtocolConstants.SEND_RETRY_SECONDS,
        can_release: Callable[[int], bool] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._transmit = transmit
        self._can_transmit = can_transmit
        self._on_success = on_success
        self._on_exhausted = on_exhausted
        self._pending: OrderedDict[int, PendingCommand] = (
            pending if pending is not None else OrderedDict()
        )
        self._retry_count = retry_count
        self._retry_seconds = retry_seconds
        self._can_release = can_release or (lambda message_type: True)

    @property
    def pending(self) -> list[PendingCommand]:
        """Pending commands in enqueue order."""
        return list(self._pending.values())

    @property
    def is_empty(self) -> bool:
        return not self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(
        self,
        message_type: int,
        payload: bytes = b"",
        expected_response: int | None = None,
        on_success: Continuation | None = None,
    ) -> bool:
        """
        Send a command, supervising it when a response is expected.

        Args:
            message_type: Request message type.
            payload: Encoded request payload.
            expected_response: Response that completes the command, None
                for fire-and-forget.
            on_success: Continuation to run with the response tags.

        Returns:
            True if the command was written now.
        """
        if expected_response is None:
            if not self._can_transmit():
                logger.warning("Dropping message type #%d: link is down", message_type)
                return False
            self._transmit(message_type, payload)
            return True

        if self._pending.pop(message_type, None) is not None:
            logger.debug("Replacing pending message type #%d", message_type)
        self._pending[message_type] = PendingCommand(
            message_type=message_type,
            payload=payload,
            expected_response=expected_response,
            on_success=on_success,
            retries_remaining=self._retry_count,
        )

        if not self._can_transmit():
            logger.debug("Queued message type #%d until the link is up", message_type)
            return False
        if not self._can_release(message_type):
            logger.debug("Holding message type #%d until subscribed", message_type)
            return False

        self._scheduler.call_later(RETRY_TIMER, self._retry_seconds, self.retry_tick)
        self._transmit(message_type, payload)
        return True

    def retry_tick(self) -> None:
        """
        Retransmit every released pending command, dropping those out of
        retries. Held commands are skipped untouched.

        If any command was dropped, the exhaustion handler runs once and
        the timer is left disarmed.
        """
        if not self._can_transmit():
            return

        exhausted: list[PendingCommand] = []
        for command in list(self._pending.values()):
            if not self._can_release(command.message_type):
                continue
            if command.retries_remaining > 0:
                command.retries_remaining -= 1
                logger.info(
                    "Sending message type #%d (%d retries left)",
                    command.message_type,
                    command.retries_remaining,
                )
                self._transmit(command.message_type, command.payload)
            else:
                logger.info("Message type #%d retry count exceeded", command.message_type)
                del self._pending[command.message_type]
                exhausted.append(command)

        if exhausted:
            first = exhausted[0]
            self._on_exhausted(
                CommandRetryExhaustedError(first.message_type, first.expected_response)
            )
            return

        if self._pending:
            self._scheduler.call_later(RETRY_TIMER, self._retry_seconds, self.retry_tick)

    def flush(self) -> None:
        """Send everything queued while the link was down."""
        self.retry_tick()

    def on_frame_dispatched(self, message_type: int, tags: TagMap) -> bool:
        """
        Complete every pending command expecting this message type.

        Continuations run after the queue is updated, so they may enqueue
        follow-up requests.

        Returns:
            True if any pending command matched.
        """
        matched = [
            command
            for command in self._pending.values()
            if command.expected_response == message_type
        ]
        for command in matched:
            del self._pending[command.message_type]

        if not self._pending:
            self._scheduler.cancel(RETRY_TIMER)

        for command in matched:
            if command.on_success is not None:
                logger.debug("Running %s continuation", command.on_success.name)
                self._on_success(command.on_success, tags)
        return bool(matched)

    def cancel_timer(self) -> None:
        """Disarm the retry timer; pending commands stay queued."""
        self._scheduler.cancel(RETRY_TIMER)

    def clear(self) -> None:
        """Drop every pending command."""
        self._pending.clear()
        self.cancel_timer()

    def __repr__(self) -> str:
        types = ", ".join(f"#{t}" for t in self._pending)
        return f"OutboundSupervisor(pending=[{types}])"
