"""
Async TCP transport using asyncio streams.

This module provides the primary transport implementation for talking to
devices over the network. Connecting and reading happen in a background
task; writes go straight to the stream writer's buffer.

Socket failures are reported to the receiver rather than raised:

- connection refused, reset, unreachable, EOF: FatalSocketError
- EAGAIN / EWOULDBLOCK: TransientSocketError

Example:
    >>> transport = TcpTransport()
    >>> transport.attach(client)
    >>> transport.open("192.168.1.50", 6053)
"""

from __future__ import annotations

import asyncio
import errno
import logging

from espconnect.exceptions import FatalSocketError, TransientSocketError, TransportError
from espconnect.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)

TRANSIENT_ERRNOS = frozenset({errno.EAGAIN, errno.EWOULDBLOCK})


class TcpTransport(AbstractTransport):
    """
    TCP transport on the running asyncio event loop.

    Attributes:
        address: "host:port" of the current or last connection.
        is_open: Whether the stream is connected.

    Example:
        >>> transport = TcpTransport(connect_timeout=5.0)
        >>> transport.attach(receiver)
        >>> transport.open("esp-kitchen.local", 6053)
        >>> ...
        >>> transport.close()
    """

    def __init__(
        self,
        connect_timeout: float = 10.0,
        read_size: int = 4096,
    ) -> None:
        """
        Initialize the TCP transport.

        Args:
            connect_timeout: Seconds to wait for the connection.
            read_size: Maximum bytes per read.
        """
        super().__init__()
        self._connect_timeout = connect_timeout
        self._read_size = read_size
        self._address = ""
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    @property
    def is_open(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    @property
    def address(self) -> str:
        return self._address

    def open(self, host: str, port: int) -> None:
        """
        Start connecting in a background task.

        Any previous connection is closed first.
        """
        self.close()
        self._generation += 1
        self._address = f"{host}:{port}"
        logger.debug("Opening connection to %s", self._address)
        self._task = asyncio.get_running_loop().create_task(
            self._run(host, port, self._generation)
        )

    def write(self, data: bytes) -> None:
        if not self.is_open:
            raise TransportError(f"Connection to {self._address} is not open")
        self._writer.write(data)

    def close(self) -> None:
        # Bumping the generation silences callbacks from the old task
        self._generation += 1
        if self._writer is not None:
            self._writer.close()
        self._reader = None
        self._writer = None
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait for the background task to finish."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._receiver is not None

    async def _run(self, host: str, port: int, generation: int) -> None:
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self._connect_timeout,
            )
        except asyncio.TimeoutError:
            self._report(generation, FatalSocketError(f"Connect to {host}:{port} timed out"))
            return
        except OSError as e:
            self._report(
                generation,
                FatalSocketError(f"Connect to {host}:{port} failed: {e}", errno=e.errno),
            )
            return

        if generation != self._generation:
            writer.close()
            return

        self._reader = reader
        self._writer = writer
        logger.debug("Connected to %s", self._address)
        if self._receiver is not None:
            self._receiver.on_connected()

        while self._is_current(generation):
            try:
                data = await reader.read(self._read_size)
            except OSError as e:
                if e.errno in TRANSIENT_ERRNOS:
                    self._report(generation, TransientSocketError(str(e), errno=e.errno))
                    continue
                self._drop_stream(generation)
                self._report(generation, FatalSocketError(f"Read failed: {e}", errno=e.errno))
                return

            if not data:
                self._drop_stream(generation)
                self._report(generation, FatalSocketError("Connection closed by peer"))
                return

            if self._is_current(generation):
                self._receiver.on_bytes(data)

    def _drop_stream(self, generation: int) -> None:
        """Forget a dead stream so is_open reports False."""
        if generation == self._generation and self._writer is not None:
            self._writer.close()
            self._writer = None
            self._reader = None

    def _report(self, generation: int, error: Exception) -> None:
        if self._is_current(generation):
            logger.debug("Socket error on %s: %s", self._address, error)
            self._receiver.on_error(error)

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"TcpTransport({self._address or 'unconnected'}, {state})"
