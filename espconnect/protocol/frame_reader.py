"""
Native API frame reassembly.

TCP delivers bytes with arbitrary boundaries: one read may carry half a
frame, or several frames back to back. The reassembler accumulates bytes in
the device's receive buffer and cuts complete frames out of it.

Plaintext frame layout:

    [0x00][LEN varint][TYPE varint][PAYLOAD (LEN bytes)]

- LEN counts the payload bytes only; the type varint is not included
- A leading 0x01 instead of 0x00 means the device requires the encrypted
  (Noise) transport, which is not supported
- Any other leading byte means the stream is out of sync

When the buffer ends inside a frame, the partial frame, delimiter
included, is left at the start of the buffer for the next delivery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from espconnect.exceptions import UnexpectedEndOfStreamError
from espconnect.protocol.constants import MessageType, ProtocolConstants
from espconnect.protocol.varint import decode_varint, encode_varint

logger = logging.getLogger(__name__)


class ReassemblyStatus(Enum):
    """Outcome of feeding bytes into the reassembler."""

    COMPLETE = auto()
    """Every buffered byte was consumed into frames."""

    NEED_MORE_DATA = auto()
    """A partial frame is waiting in the buffer."""

    UNSUPPORTED_TRANSPORT = auto()
    """The encrypted transport indicator was seen; parsing stopped."""

    INVALID_DELIMITER = auto()
    """A frame started with an unknown byte; the buffer was discarded."""


@dataclass(frozen=True)
class Frame:
    """
    A complete native API frame.

    Attributes:
        message_type: Message type number.
        payload: Raw tag/value payload bytes.
    """

    message_type: int
    payload: bytes = b""

    @property
    def type(self) -> MessageType | int:
        """Message type as MessageType if recognised, else raw int."""
        try:
            return MessageType(self.message_type)
        except ValueError:
            return self.message_type

    def __repr__(self) -> str:
        name = self.type.name if isinstance(self.type, MessageType) else f"#{self.message_type}"
        if self.payload:
            return f"Frame({name}, payload={len(self.payload)} bytes)"
        return f"Frame({name})"


@dataclass(frozen=True)
class ReassemblyResult:
    """
    Frames cut from the buffer by one feed() call.

    Attributes:
        frames: Complete frames, in stream order.
        status: Why parsing stopped.
        delimiter: Offending first byte for INVALID_DELIMITER.
    """

    frames: tuple[Frame, ...] = field(default_factory=tuple)
    status: ReassemblyStatus = ReassemblyStatus.COMPLETE
    delimiter: int | None = None


class FrameReassembler:
    """
    Cuts complete frames from an accumulating receive buffer.

    The buffer is owned by the caller (normally the connection registry),
    so a reassembler can be recreated at any time without losing a
    partially received frame.

    Example:
        >>> reassembler = FrameReassembler()
        >>> reassembler.feed(b"\\x00\\x00").status
        <ReassemblyStatus.NEED_MORE_DATA: 2>
        >>> reassembler.feed(b"\\x07").frames
        (Frame(PING_REQUEST),)
    """

    def __init__(self, buffer: bytearray | None = None) -> None:
        """
        Initialize the reassembler.

        Args:
            buffer: Receive buffer to accumulate into. A new one is
                created when omitted.
        """
        self._buffer = buffer if buffer is not None else bytearray()

    @property
    def buffer(self) -> bytearray:
        """Bytes of the incomplete frame waiting for more data."""
        return self._buffer

    def reset(self) -> None:
        """Drop any buffered partial frame."""
        self._buffer.clear()

    def feed(self, data: bytes) -> ReassemblyResult:
        """
        Append received bytes and cut out every complete frame.

        Args:
            data: Bytes as delivered by the transport.

        Returns:
            ReassemblyResult with the frames and the stop reason.
        """
        buffer = self._buffer
        buffer += data
        frames: list[Frame] = []
        position = 0
        end = len(buffer)

        while position < end:
            delimiter = buffer[position]
            if delimiter == ProtocolConstants.NOISE_INDICATOR:
                buffer.clear()
                return ReassemblyResult(tuple(frames), ReassemblyStatus.UNSUPPORTED_TRANSPORT)
            if delimiter != ProtocolConstants.PLAINTEXT_DELIMITER:
                logger.warning("Expecting delimiter 0x00 but got 0x%02X", delimiter)
                buffer.clear()
                return ReassemblyResult(tuple(frames), ReassemblyStatus.INVALID_DELIMITER, delimiter)

            frame_start = position
            try:
                header = decode_varint(buffer, position + 1, allow_empty=True)
                if header is None:
                    break
                length, consumed = header
                cursor = position + 1 + consumed

                header = decode_varint(buffer, cursor, allow_empty=True)
                if header is None:
                    break
                message_type, consumed = header
                cursor += consumed
            except UnexpectedEndOfStreamError:
                break

            if end - cursor < length:
                break

            frames.append(Frame(message_type, bytes(buffer[cursor:cursor + length])))
            position = cursor + length
        else:
            buffer.clear()
            return ReassemblyResult(tuple(frames), ReassemblyStatus.COMPLETE)

        # Keep the partial frame, delimiter first, for the next delivery
        del buffer[:frame_start]
        return ReassemblyResult(tuple(frames), ReassemblyStatus.NEED_MORE_DATA)


def encode_frame(message_type: int, payload: bytes = b"") -> bytes:
    """
    Wrap a payload in a plaintext frame.

    Args:
        message_type: Message type number.
        payload: Encoded tag/value payload.

    Returns:
        Frame bytes ready to write to the socket.

    Example:
        >>> encode_frame(MessageType.PING_REQUEST)
        b'\\x00\\x00\\x07'
    """
    return (
        bytes([ProtocolConstants.PLAINTEXT_DELIMITER])
        + encode_varint(len(payload))
        + encode_varint(message_type)
        + payload
    )
