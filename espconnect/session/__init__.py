"""
Connection session machinery.

This package provides:
- SessionState / Continuation: handshake states and follow-up actions
- OutboundSupervisor: response correlation and bounded retry
- ReconnectController: jittered exponential backoff
- KeepAliveScheduler: idle-link health check
"""

from espconnect.session.keepalive import KEEPALIVE_TIMER, KeepAliveScheduler
from espconnect.session.reconnect import CONNECT_TIMER, ReconnectController, ReconnectState
from espconnect.session.state import (
    HANDSHAKE_REQUESTS,
    TRANSITIONS,
    Continuation,
    SessionState,
    can_release,
    can_transition,
    can_transmit,
    check_transition,
)
from espconnect.session.supervisor import RETRY_TIMER, OutboundSupervisor, PendingCommand

__all__ = [
    # State machine
    "SessionState",
    "Continuation",
    "TRANSITIONS",
    "HANDSHAKE_REQUESTS",
    "can_release",
    "can_transition",
    "can_transmit",
    "check_transition",
    # Supervision
    "OutboundSupervisor",
    "PendingCommand",
    "RETRY_TIMER",
    # Timers
    "ReconnectController",
    "ReconnectState",
    "CONNECT_TIMER",
    "KeepAliveScheduler",
    "KEEPALIVE_TIMER",
]
