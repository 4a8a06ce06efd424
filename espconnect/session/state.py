"""
Connection handshake state machine.

The handshake runs strictly forward:

    DISCONNECTED -> connect() -> CONNECTING
    CONNECTING -> transport connected -> AWAITING_HELLO
    AWAITING_HELLO -> HelloResponse -> AWAITING_AUTH
    AWAITING_AUTH -> authenticated -> AWAITING_DEVICE_INFO
    AWAITING_DEVICE_INFO -> DeviceInfoResponse -> SUBSCRIBING
    SUBSCRIBING -> subscriptions sent -> ONLINE
    ONLINE -> refresh() -> SUBSCRIBING

Any state may drop back to DISCONNECTED. Every other move raises
IllegalTransitionError.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Final

from espconnect.exceptions import IllegalTransitionError
from espconnect.protocol.constants import MessageType


class SessionState(Enum):
    """Connection session states."""

    DISCONNECTED = auto()
    """No connection and none in progress."""

    CONNECTING = auto()
    """Transport open in progress."""

    AWAITING_HELLO = auto()
    """HelloRequest sent, waiting for the API version."""

    AWAITING_AUTH = auto()
    """AuthenticationRequest being sent or answered."""

    AWAITING_DEVICE_INFO = auto()
    """Authenticated, DeviceInfoRequest sent."""

    SUBSCRIBING = auto()
    """Listing entities and subscribing to updates."""

    ONLINE = auto()
    """Fully connected and receiving state updates."""


class Continuation(Enum):
    """Follow-up actions attached to supervised handshake requests."""

    HELLO = auto()
    AUTHENTICATE = auto()
    DEVICE_INFO = auto()
    PING = auto()


TRANSITIONS: Final[dict[SessionState, frozenset[SessionState]]] = {
    SessionState.DISCONNECTED: frozenset({SessionState.CONNECTING}),
    SessionState.CONNECTING: frozenset({SessionState.AWAITING_HELLO}),
    SessionState.AWAITING_HELLO: frozenset({SessionState.AWAITING_AUTH}),
    SessionState.AWAITING_AUTH: frozenset({SessionState.AWAITING_DEVICE_INFO}),
    SessionState.AWAITING_DEVICE_INFO: frozenset({SessionState.SUBSCRIBING}),
    SessionState.SUBSCRIBING: frozenset({SessionState.ONLINE}),
    SessionState.ONLINE: frozenset({SessionState.SUBSCRIBING}),
}
"""Legal forward transitions. DISCONNECTED is reachable from every state."""

NON_TRANSMITTING_STATES: Final[frozenset[SessionState]] = frozenset({
    SessionState.DISCONNECTED,
    SessionState.CONNECTING,
})

HANDSHAKE_STATES: Final[frozenset[SessionState]] = frozenset({
    SessionState.AWAITING_HELLO,
    SessionState.AWAITING_AUTH,
    SessionState.AWAITING_DEVICE_INFO,
})
"""States before authentication completes."""

HANDSHAKE_REQUESTS: Final[frozenset[int]] = frozenset({
    MessageType.HELLO_REQUEST,
    MessageType.AUTHENTICATION_REQUEST,
    MessageType.DEVICE_INFO_REQUEST,
})


def can_transition(source: SessionState, target: SessionState) -> bool:
    """Check whether moving from source to target is legal."""
    if target is SessionState.DISCONNECTED:
        return True
    return target in TRANSITIONS[source]


def check_transition(source: SessionState, target: SessionState) -> SessionState:
    """
    Validate a transition.

    Returns:
        The target state.

    Raises:
        IllegalTransitionError: If the move is not in the table.
    """
    if not can_transition(source, target):
        raise IllegalTransitionError(source, target)
    return target


def can_transmit(state: SessionState) -> bool:
    """Check whether frames may be written in this state."""
    return state not in NON_TRANSMITTING_STATES


def can_release(state: SessionState, message_type: int) -> bool:
    """
    Check whether a queued request may be written in this state.

    Until the handshake reaches SUBSCRIBING only handshake requests go
    out. Everything else waits for the flush at subscribe time.
    """
    if state in HANDSHAKE_STATES:
        return message_type in HANDSHAKE_REQUESTS
    return can_transmit(state)
