"""
Exception hierarchy for espconnect.

All exceptions inherit from EspConnectError. The hierarchy separates:

1. Protocol errors (framing, tag decoding, handshake violations)
2. Transport errors (socket failures, split into transient and fatal)
3. Session-level failures (retry exhaustion, administratively disabled device)

Inside the connection engine these exceptions are never raised to the host.
They are created, logged and routed to a single failure handler which picks
the reconnect tier. Codec functions used on their own do raise them.
"""

from __future__ import annotations


class EspConnectError(Exception):
    """
    Base exception for all espconnect errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all espconnect errors with a single except clause.
    """

    pass


class ProtocolError(EspConnectError):
    """
    Protocol-level error.

    Raised when the byte stream or the message sequence violates the
    native API protocol. Once raised for a connection, framing can no
    longer be trusted and the connection is restarted.
    """

    pass


class UnexpectedEndOfStreamError(ProtocolError):
    """
    A varint ran past the end of the available bytes.

    Raised when the buffer is exhausted after at least one byte of a
    varint was read, or on the first byte when no-data is not permitted.
    """

    def __init__(
        self,
        message: str = "Unexpected end of stream while reading varint",
        *,
        offset: int | None = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset

    def __str__(self) -> str:
        base = super().__str__()
        if self.offset is not None:
            return f"{base} (offset={self.offset})"
        return base


class TruncatedMessageError(ProtocolError):
    """
    A tag map did not consume exactly its declared length.

    Attributes:
        expected: Declared message length in bytes.
        available: Bytes actually accounted for, or left, when decoding stopped.
    """

    def __init__(
        self,
        message: str = "Truncated message",
        *,
        expected: int | None = None,
        available: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.available = available

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.available is not None:
            return f"{base} (expected {self.expected} bytes, available {self.available})"
        return base


class UnknownWireTypeError(ProtocolError):
    """A tag carried a wire type other than VARINT, FIXED64, LENGTH_DELIMITED or FIXED32."""

    def __init__(self, wire_type: int, field_number: int | None = None) -> None:
        self.wire_type = wire_type
        self.field_number = field_number
        message = f"Unknown wire type {wire_type}"
        if field_number is not None:
            message += f" for field {field_number}"
        super().__init__(message)


class InvalidDelimiterError(ProtocolError):
    """A frame did not start with the plaintext delimiter byte."""

    def __init__(self, delimiter: int) -> None:
        self.delimiter = delimiter
        super().__init__(f"Expected frame delimiter 0x00 but got 0x{delimiter:02X}")


class UnsupportedTransportError(ProtocolError):
    """
    The peer answered with the encrypted transport indicator.

    The encrypted (Noise) variant of the API is not supported. The device
    must have its api encryption section removed to be reachable.
    """

    def __init__(self, message: str = "Encrypted transport is not supported") -> None:
        super().__init__(message)


class UnsupportedProtocolVersionError(ProtocolError):
    """The peer advertised an API major version above the supported maximum."""

    def __init__(self, major: int, minor: int, *, max_major: int | None = None) -> None:
        self.major = major
        self.minor = minor
        self.max_major = max_major
        message = f"API version {major}.{minor} not supported"
        if max_major is not None:
            message += f" (maximum major version {max_major})"
        super().__init__(message)


class InvalidCredentialError(ProtocolError):
    """The peer rejected the configured password."""

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class IllegalTransitionError(ProtocolError):
    """
    A session state change that the state machine does not allow.

    Attributes:
        source: State the session was in.
        target: State that was requested.
    """

    def __init__(self, source: object, target: object) -> None:
        self.source = source
        self.target = target
        source_name = getattr(source, "name", source)
        target_name = getattr(target, "name", target)
        super().__init__(f"Illegal session transition {source_name} -> {target_name}")


class TransportError(EspConnectError):
    """
    Transport-level error.

    Raised or reported for socket failures. Subclasses tell the engine
    whether the condition is worth tearing the connection down for.
    """

    pass


class TransientSocketError(TransportError):
    """
    Temporary socket condition (resource temporarily unavailable).

    Ignored by the engine; the connection stays up.
    """

    def __init__(self, message: str = "Resource temporarily unavailable", *, errno: int | None = None) -> None:
        super().__init__(message)
        self.errno = errno


class FatalSocketError(TransportError):
    """
    Socket failure that ends the connection.

    Covers refused connections, resets, and EOF from the peer.
    """

    def __init__(self, message: str = "Socket error", *, errno: int | None = None) -> None:
        super().__init__(message)
        self.errno = errno

    def __str__(self) -> str:
        base = super().__str__()
        if self.errno is not None:
            return f"{base} (errno={self.errno})"
        return base


class CommandRetryExhaustedError(EspConnectError):
    """
    A supervised command ran out of retries without its response arriving.

    Attributes:
        message_type: Request message type that went unanswered.
        expected_response: Response message type that never arrived.
    """

    def __init__(self, message_type: int, expected_response: int | None = None) -> None:
        self.message_type = message_type
        self.expected_response = expected_response
        message = f"Message type #{message_type} retry count exceeded"
        if expected_response is not None:
            message += f" waiting for #{expected_response}"
        super().__init__(message)


class DisabledDeviceError(EspConnectError):
    """The device is administratively disabled."""

    def __init__(self, message: str = "Device is disabled") -> None:
        super().__init__(message)
