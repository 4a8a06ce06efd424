"""
Mock transport for testing.

This module provides a mock transport that lets the client be tested
without a device. Inbound bytes are fed by the test; everything the client
writes is recorded and can be decoded back into frames for assertions.

Example:
    >>> from espconnect.transport import MockTransport
    >>> from espconnect.protocol import MessageType, encode_frame
    >>>
    >>> mock = MockTransport()
    >>> client = DeviceClient(options, mock, scheduler=ManualScheduler())
    >>> client.connect()
    >>> mock.sent_types
    [<MessageType.HELLO_REQUEST: 1>]
    >>> mock.feed(encode_frame(MessageType.HELLO_RESPONSE, payload))
"""

from __future__ import annotations

import logging

from espconnect.exceptions import FatalSocketError, TransportError
from espconnect.protocol.constants import MessageType
from espconnect.protocol.frame_reader import Frame, FrameReassembler
from espconnect.protocol.tags import TagMap, decode_tags
from espconnect.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without a device.

    Attributes:
        written_data: List of all bytes written to the transport.
        open_count: Number of open() calls.
        close_count: Number of close() calls.

    Example:
        >>> mock = MockTransport(auto_connect=False)
        >>> mock.attach(receiver)
        >>> mock.open("device.local", 6053)
        >>> mock.connect()      # receiver.on_connected()
        >>> mock.write(b"\\x00\\x00\\x07")
        >>> mock.written_data
        [b'\\x00\\x00\\x07']
    """

    def __init__(self, auto_connect: bool = True) -> None:
        """
        Initialize the mock transport.

        Args:
            auto_connect: Report on_connected() from within open().
        """
        super().__init__()
        self._auto_connect = auto_connect
        self._is_open = False
        self._connecting = False
        self._address = ""
        self._written_data: list[bytes] = []
        self.open_count = 0
        self.close_count = 0

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def address(self) -> str:
        return self._address

    @property
    def written_data(self) -> list[bytes]:
        """Get all data written to the transport."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        """Get the most recently written data."""
        return self._written_data[-1] if self._written_data else None

    @property
    def sent_frames(self) -> list[Frame]:
        """Decode every write into frames, in order."""
        reassembler = FrameReassembler()
        frames: list[Frame] = []
        for chunk in self._written_data:
            frames.extend(reassembler.feed(chunk).frames)
        return frames

    @property
    def sent_types(self) -> list[MessageType | int]:
        """Message types of every frame written, in order."""
        return [frame.type for frame in self.sent_frames]

    def sent_tags(self, message_type: int) -> list[TagMap]:
        """Decoded payloads of every written frame of one type."""
        return [
            decode_tags(frame.payload)
            for frame in self.sent_frames
            if frame.message_type == message_type
        ]

    def clear_written(self) -> None:
        """Clear only the written data history."""
        self._written_data.clear()

    def open(self, host: str, port: int) -> None:
        self.open_count += 1
        self._address = f"{host}:{port}"
        self._is_open = False
        self._connecting = True
        if self._auto_connect:
            self.connect()

    def connect(self) -> None:
        """
        Complete a pending open().

        Raises:
            TransportError: If open() was not called.
        """
        if not self._connecting:
            raise TransportError("Mock transport has no pending open")
        self._connecting = False
        self._is_open = True
        if self._receiver is not None:
            self._receiver.on_connected()

    def write(self, data: bytes) -> None:
        """
        Record written data.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        self._written_data.append(bytes(data))

    def close(self) -> None:
        self.close_count += 1
        self._is_open = False
        self._connecting = False

    def feed(self, data: bytes) -> None:
        """
        Deliver bytes to the receiver as if they came from the device.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        if self._receiver is not None:
            self._receiver.on_bytes(bytes(data))

    def fail(self, error: Exception | None = None) -> None:
        """
        Report a socket error to the receiver.

        Args:
            error: Error to report, FatalSocketError by default.
        """
        error = error or FatalSocketError("Mock connection lost")
        if isinstance(error, FatalSocketError):
            self._is_open = False
            self._connecting = False
        if self._receiver is not None:
            self._receiver.on_error(error)

    def status(self, message: str) -> None:
        """Report a socket status message to the receiver."""
        if self._receiver is not None:
            self._receiver.on_status(message)

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Assert that specific data was written.

        Args:
            expected: Expected bytes.
            index: Index in written_data list (-1 for last).

        Raises:
            AssertionError: If data doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(f"Written data mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")
