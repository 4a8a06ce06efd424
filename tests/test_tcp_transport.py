"""Tests for TcpTransport against a local asyncio server."""

import asyncio

import pytest
import pytest_asyncio

from espconnect.exceptions import FatalSocketError, TransportError
from espconnect.transport.tcp_async import TcpTransport


class QueueReceiver:
    """Receiver that pushes every callback onto an asyncio queue."""

    def __init__(self):
        self.events = asyncio.Queue()

    def on_connected(self):
        self.events.put_nowait(("connected", None))

    def on_bytes(self, data):
        self.events.put_nowait(("bytes", data))

    def on_error(self, error):
        self.events.put_nowait(("error", error))

    def on_status(self, message):
        self.events.put_nowait(("status", message))

    async def next(self, timeout=2.0):
        return await asyncio.wait_for(self.events.get(), timeout)


class LocalServer:
    """One-connection TCP server on an ephemeral port."""

    def __init__(self):
        self.server = None
        self.connected = asyncio.Event()
        self.reader = None
        self.writer = None

    async def start(self):
        self.server = await asyncio.start_server(self._accept, "127.0.0.1", 0)
        return self.server.sockets[0].getsockname()[1]

    async def _accept(self, reader, writer):
        self.reader = reader
        self.writer = writer
        self.connected.set()

    async def stop(self):
        if self.writer is not None:
            self.writer.close()
        self.server.close()
        await self.server.wait_closed()


@pytest_asyncio.fixture
async def server():
    server = LocalServer()
    yield server
    await server.stop()


class TestTcpTransport:
    """Tests for TcpTransport."""

    @pytest.mark.asyncio
    async def test_connect_and_exchange(self, server):
        """Test connecting, writing and receiving bytes."""
        port = await server.start()
        receiver = QueueReceiver()
        transport = TcpTransport()
        transport.attach(receiver)

        transport.open("127.0.0.1", port)
        assert await receiver.next() == ("connected", None)
        assert transport.is_open
        assert transport.address == f"127.0.0.1:{port}"

        await asyncio.wait_for(server.connected.wait(), 2)
        transport.write(b"\x00\x00\x07")
        assert await asyncio.wait_for(server.reader.readexactly(3), 2) == b"\x00\x00\x07"

        server.writer.write(b"\x00\x00\x08")
        await server.writer.drain()
        assert await receiver.next() == ("bytes", b"\x00\x00\x08")

        transport.close()
        await transport.wait_closed()
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_peer_close_is_fatal(self, server):
        """Test EOF from the device is reported as a fatal error."""
        port = await server.start()
        receiver = QueueReceiver()
        transport = TcpTransport()
        transport.attach(receiver)

        transport.open("127.0.0.1", port)
        await receiver.next()
        await asyncio.wait_for(server.connected.wait(), 2)
        server.writer.close()

        kind, error = await receiver.next()
        assert kind == "error"
        assert isinstance(error, FatalSocketError)
        assert "closed by peer" in str(error)
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test a refused connection is reported as a fatal error."""
        probe = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = probe.sockets[0].getsockname()[1]
        probe.close()
        await probe.wait_closed()

        receiver = QueueReceiver()
        transport = TcpTransport(connect_timeout=2.0)
        transport.attach(receiver)
        transport.open("127.0.0.1", port)

        kind, error = await receiver.next()
        assert kind == "error"
        assert isinstance(error, FatalSocketError)
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_close_silences_callbacks(self, server):
        """Test nothing is reported after close()."""
        port = await server.start()
        receiver = QueueReceiver()
        transport = TcpTransport()
        transport.attach(receiver)

        transport.open("127.0.0.1", port)
        await receiver.next()
        transport.close()
        await transport.wait_closed()

        await asyncio.sleep(0.05)
        assert receiver.events.empty()

    def test_write_when_closed_raises(self):
        """Test writing before open raises."""
        transport = TcpTransport()
        with pytest.raises(TransportError):
            transport.write(b"\x00")

    def test_repr(self):
        """Test string representation."""
        assert repr(TcpTransport()) == "TcpTransport(unconnected, closed)"
