"""
Native API device client.

This module provides the main client interface for one device. The client
drives the connection session:

    DISCONNECTED -> connect() -> CONNECTING -> AWAITING_HELLO
    AWAITING_HELLO -> AWAITING_AUTH -> AWAITING_DEVICE_INFO
    AWAITING_DEVICE_INFO -> SUBSCRIBING -> ONLINE
    any state -> failure -> DISCONNECTED -> backoff -> CONNECTING

Everything runs from transport and timer callbacks on the event loop; no
method awaits. Decoded records (device info, entity listings, state
updates, network status changes, device log lines) are handed to the
listener callable.

Example:
    >>> from espconnect import ConnectionOptions, DeviceClient
    >>> from espconnect.commands import switch_command
    >>>
    >>> async def main():
    ...     options = ConnectionOptions(host="192.168.1.50")
    ...     async with DeviceClient(options, listener=print) as client:
    ...         await client.wait_online()
    ...         client.send_command(switch_command(0x1A2B3C4D, True))
"""

from __future__ import annotations

import asyncio
import logging
import re
import struct
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from espconnect.commands import Command, execute_service
from espconnect.exceptions import (
    DisabledDeviceError,
    EspConnectError,
    InvalidCredentialError,
    InvalidDelimiterError,
    ProtocolError,
    TransientSocketError,
    TransportError,
    UnsupportedProtocolVersionError,
    UnsupportedTransportError,
)
from espconnect.models.records import (
    ApiVersion,
    DeviceInfo,
    ListingComplete,
    LogMessage,
    NetworkState,
    NetworkStatus,
)
from espconnect.parsers.decoder_registry import DecoderRegistry, create_default_registry, to_enum
from espconnect.parsers.entities.services import ServiceInfo
from espconnect.parsers.tag_reader import TagReader
from espconnect.protocol.constants import (
    LIST_ENTITIES_RESPONSES,
    LogLevel,
    MessageType,
    ProtocolConstants,
    WireType,
)
from espconnect.protocol.frame_reader import Frame, FrameReassembler, ReassemblyStatus, encode_frame
from espconnect.protocol.tags import TagMap, decode_tags, encode_tags
from espconnect.registry import ConnectionRegistry, DeviceRecord
from espconnect.scheduling.loop import LoopScheduler
from espconnect.session.keepalive import KeepAliveScheduler
from espconnect.session.reconnect import ReconnectController
from espconnect.session.state import (
    Continuation,
    SessionState,
    can_release,
    can_transmit,
    check_transition,
)
from espconnect.session.supervisor import OutboundSupervisor
from espconnect.transport.tcp_async import TcpTransport

if TYPE_CHECKING:
    import random
    from types import TracebackType

    from espconnect.config import ConnectionOptions
    from espconnect.scheduling.abc import AbstractScheduler
    from espconnect.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)

# Lines forwarded from the device's own log
device_logger = logging.getLogger("espconnect.device")

Listener = Callable[[Any], None]

ANSI_COLOR = re.compile(r"\x1b?\[[0-9;]*m")

DEVICE_LOG_LEVELS: dict[LogLevel, int] = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
}

# Failures after which the next attempt waits the full backoff maximum
MAX_DELAY_ERRORS = (
    UnsupportedTransportError,
    UnsupportedProtocolVersionError,
    InvalidCredentialError,
    DisabledDeviceError,
)


class DeviceClient:
    """
    Connection engine for one device.

    The client implements TransportReceiver and is attached to its
    transport on construction.

    Attributes:
        state: Current session state.
        record: Device metadata kept across connections.
        options: Connection options.

    Example:
        >>> client = DeviceClient(
        ...     ConnectionOptions(host="10.0.0.7", password="secret"),
        ...     listener=lambda record: print(record.platform, record),
        ... )
        >>> client.connect()
    """

    def __init__(
        self,
        options: ConnectionOptions,
        transport: AbstractTransport | None = None,
        *,
        scheduler: AbstractScheduler | None = None,
        registry: ConnectionRegistry | None = None,
        decoders: DecoderRegistry | None = None,
        listener: Listener | None = None,
        device_id: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the device client.

        Args:
            options: Connection options.
            transport: Byte transport, TcpTransport by default.
            scheduler: Timer source, LoopScheduler by default.
            registry: Shared per-device state store.
            decoders: Entity decoder registry, all built-in decoders by default.
            listener: Called with every record the device produces.
            device_id: Registry key, "host:port" by default.
            rng: Random source for backoff and keepalive jitter.
        """
        self._options = options
        self._transport = transport if transport is not None else TcpTransport()
        self._scheduler = scheduler if scheduler is not None else LoopScheduler()
        self._registry = registry if registry is not None else ConnectionRegistry()
        self._decoders = decoders if decoders is not None else create_default_registry()
        self._listener = listener
        self._device_id = device_id or f"{options.host}:{options.port}"
        self._device = self._registry.state_for(self._device_id)
        self._reassembler = FrameReassembler(self._device.receive_buffer)
        self._online_event = asyncio.Event()

        self._supervisor = OutboundSupervisor(
            self._scheduler,
            transmit=self._transmit,
            can_transmit=self._can_transmit,
            on_success=self._run_continuation,
            on_exhausted=self._fail,
            pending=self._device.pending,
            retry_count=options.send_retry_count,
            retry_seconds=options.send_retry_seconds,
            can_release=self._can_release,
        )
        self._reconnect = ReconnectController(
            self._scheduler,
            self._open_socket,
            state=self._device.reconnect,
            max_delay=options.max_reconnect_seconds,
            rng=rng,
        )
        self._keepalive = KeepAliveScheduler(
            self._scheduler,
            self.health_check,
            interval=options.ping_interval,
            rng=rng,
        )

        self._continuations: dict[Continuation, Callable[[TagMap], None]] = {
            Continuation.HELLO: self._on_hello_response,
            Continuation.AUTHENTICATE: self._on_authentication_response,
            Continuation.DEVICE_INFO: self._on_device_info_response,
            Continuation.PING: self._on_ping_response,
        }
        self._handlers: dict[int, Callable[[TagMap], None]] = {
            MessageType.DISCONNECT_REQUEST: self._on_disconnect_request,
            MessageType.PING_REQUEST: self._on_ping_request,
            MessageType.GET_TIME_REQUEST: self._on_get_time_request,
            MessageType.SUBSCRIBE_LOGS_RESPONSE: self._on_log_message,
            MessageType.LIST_ENTITIES_SERVICES_RESPONSE: self._on_service_listed,
            MessageType.LIST_ENTITIES_DONE_RESPONSE: self._on_listing_done,
        }

        self._transport.attach(self)

    # ===== Properties =====

    @property
    def state(self) -> SessionState:
        """Get the current session state."""
        return self._device.session_state

    @property
    def record(self) -> DeviceRecord:
        """Get the device record."""
        return self._device.record

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def api_version(self) -> ApiVersion | None:
        return self._device.record.api_version

    @property
    def is_online(self) -> bool:
        """Check if the session is fully established."""
        return self._device.session_state is SessionState.ONLINE

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def supervisor(self) -> OutboundSupervisor:
        return self._supervisor

    @property
    def reconnect(self) -> ReconnectController:
        return self._reconnect

    # ===== Public API =====

    def connect(self) -> None:
        """
        Start connecting.

        Returns at once; progress is reported through the listener. A
        pending reconnect is cancelled and the connection attempt starts
        immediately.
        """
        self._reconnect.cancel()
        self._open_socket()

    def disconnect(self) -> None:
        """
        Close the connection and stop reconnecting.

        A DisconnectRequest is sent first when the link is up.
        """
        self._reconnect.cancel()
        self._close("requested by client")

    def refresh(self) -> bool:
        """
        Re-run entity discovery.

        From ONLINE the session returns to SUBSCRIBING and lists entities
        again. Otherwise discovery is requested for the next handshake.

        Returns:
            True if discovery started now.
        """
        if self.state is not SessionState.ONLINE:
            self.record.require_refresh = True
            return False
        self._transition(SessionState.SUBSCRIBING)
        self._list_entities()
        return True

    def send_command(self, command: Command) -> bool:
        """
        Send an entity command through the supervisor.

        Commands that expect a state response are retried until it
        arrives and are held while the link is down.

        Returns:
            True if the command was written now.
        """
        logger.debug("Sending %s", command.message_type.name)
        return self._supervisor.enqueue(
            command.message_type,
            command.encode(),
            command.expected_response,
        )

    def call_service(self, name: str) -> bool:
        """
        Invoke a user-defined service by name.

        Returns:
            True if the service is known and the request was written.
        """
        service = self.record.find_service(name)
        if service is None:
            logger.error("No service found: %s", name)
            return False
        logger.debug("Calling service %s", name)
        return self.send_command(execute_service(service.key))

    def subscribe_bluetooth(self) -> bool:
        """Ask the device to forward Bluetooth LE advertisements."""
        return self._supervisor.enqueue(MessageType.SUBSCRIBE_BLUETOOTH_LE_ADVERTISEMENTS_REQUEST)

    def set_disabled(self, disabled: bool) -> None:
        """
        Suspend or resume connections.

        A disabled device is disconnected at the next health check and
        every connection attempt is deferred by the maximum delay.
        """
        self.record.disabled = disabled

    async def wait_online(self, timeout: float | None = None) -> None:
        """
        Wait until the session reaches ONLINE.

        Raises:
            asyncio.TimeoutError: If timeout expires first.
        """
        await asyncio.wait_for(self._online_event.wait(), timeout)

    def health_check(self) -> None:
        """
        Keepalive timer callback.

        Disconnects a disabled device; otherwise pings an idle link.
        """
        if self.record.disabled:
            self._fail(DisabledDeviceError())
            return
        logger.debug(
            "Health check: state=%s queue_empty=%s",
            self.state.name,
            self._supervisor.is_empty,
        )
        if can_transmit(self.state) and self._supervisor.is_empty:
            logger.debug("Sending keepalive ping")
            self._supervisor.enqueue(
                MessageType.PING_REQUEST,
                expected_response=MessageType.PING_RESPONSE,
                on_success=Continuation.PING,
            )

    # ===== TransportReceiver =====

    def on_connected(self) -> None:
        if self.state is not SessionState.CONNECTING:
            logger.debug("Ignoring connect in state %s", self.state.name)
            return
        self._transition(SessionState.AWAITING_HELLO)
        logger.info("Requesting API version from %s", self._transport.address)
        self._supervisor.enqueue(
            MessageType.HELLO_REQUEST,
            encode_tags({1: (self._options.client_info, WireType.LENGTH_DELIMITED)}),
            MessageType.HELLO_RESPONSE,
            Continuation.HELLO,
        )

    def on_bytes(self, data: bytes) -> None:
        if self.state is SessionState.DISCONNECTED:
            return
        result = self._reassembler.feed(data)
        try:
            for frame in result.frames:
                self._dispatch(frame)
                if self.state is SessionState.DISCONNECTED:
                    return
        except EspConnectError as e:
            self._fail(e)
            return
        except (ValueError, TypeError, struct.error) as e:
            self._fail(ProtocolError(f"Malformed message: {e}"))
            return

        if result.status is ReassemblyStatus.UNSUPPORTED_TRANSPORT:
            self._fail(UnsupportedTransportError())
        elif result.status is ReassemblyStatus.INVALID_DELIMITER:
            self._fail(InvalidDelimiterError(result.delimiter or 0))

    def on_error(self, error: Exception) -> None:
        self._fail(error)

    def on_status(self, message: str) -> None:
        logger.warning("Socket status: %s", message)

    # ===== Connection lifecycle =====

    def _open_socket(self) -> None:
        if self.record.disabled:
            logger.info("Device %s is disabled", self._device_id)
            self._reconnect.force_max_delay()
            self._reconnect.schedule_reconnect()
            return

        if self.state is not SessionState.DISCONNECTED:
            self._close("reconnecting")

        self._reassembler.reset()
        self._transition(SessionState.CONNECTING)
        host, port = self._options.host, self._options.port
        self._publish_status(NetworkState.CONNECTING, f"host {host}:{port}")
        try:
            self._transport.open(host, port)
        except (TransportError, OSError) as e:
            self._fail(e)

    def _close(self, reason: str, send_disconnect: bool = True) -> None:
        self._keepalive.cancel()
        self._supervisor.cancel_timer()
        self._reassembler.reset()
        self._online_event.clear()

        if self.state is SessionState.DISCONNECTED:
            self._transport.close()
            return

        logger.info("Closing connection to %s", self._transport.address)
        if send_disconnect and self._can_transmit():
            self._transmit(MessageType.DISCONNECT_REQUEST, b"")
        self._transition(SessionState.DISCONNECTED)
        self.record.last_disconnected = (datetime.now(), reason)
        self._transport.close()
        self._publish_status(NetworkState.OFFLINE, reason)

    def _fail(self, error: Exception) -> None:
        if isinstance(error, TransientSocketError):
            logger.debug("Ignoring transient socket error: %s", error)
            return

        if isinstance(error, UnsupportedTransportError):
            logger.error(
                "Encrypted API transport detected on %s. Remove api encryption from the "
                "device configuration; reconnect attempts slow to every %d seconds",
                self._options.host,
                self._options.max_reconnect_seconds,
            )
            self.record.noise_detected = True
        elif isinstance(error, MAX_DELAY_ERRORS):
            logger.error("%s: %s", self._device_id, error)
        else:
            logger.warning("%s: %s", self._device_id, error)

        self._close(str(error))
        if isinstance(error, MAX_DELAY_ERRORS):
            self._reconnect.force_max_delay()
        self._reconnect.schedule_reconnect()

    def _transition(self, target: SessionState) -> None:
        source = self._device.session_state
        self._device.session_state = check_transition(source, target)
        logger.debug("Session %s -> %s", source.name, target.name)

    # ===== Frame I/O =====

    def _can_transmit(self) -> bool:
        return can_transmit(self.state) and self._transport.is_open

    def _can_release(self, message_type: int) -> bool:
        return can_release(self.state, message_type)

    def _transmit(self, message_type: int, payload: bytes) -> None:
        logger.debug("Send message type #%d (%d bytes)", message_type, len(payload))
        try:
            self._transport.write(encode_frame(message_type, payload))
        except TransportError as e:
            logger.error("Send failed: %s", e)

    def _send(self, message_type: int, fields: dict | None = None) -> None:
        self._supervisor.enqueue(message_type, encode_tags(fields) if fields else b"")

    def _dispatch(self, frame: Frame) -> None:
        logger.debug("Received %r", frame)
        tags = decode_tags(frame.payload)
        handled = self._supervisor.on_frame_dispatched(frame.message_type, tags)

        handler = self._handlers.get(frame.message_type)
        if handler is not None:
            handler(tags)
        elif self._decoders.has(frame.message_type):
            if frame.message_type in LIST_ENTITIES_RESPONSES:
                self._check_device_id(tags)
            self._publish(self._decoders.decode(frame.message_type, tags, is_digital=handled))
        elif not handled:
            if frame.message_type in (MessageType.PING_RESPONSE, MessageType.DISCONNECT_RESPONSE):
                logger.debug("Unsolicited %r", frame)
            else:
                logger.warning("Unhandled message type %d with %s", frame.message_type, tags)

        if self.state is not SessionState.DISCONNECTED:
            self._keepalive.schedule()

    def _check_device_id(self, tags: TagMap) -> None:
        version = self.api_version
        if version is None or ProtocolConstants.ENTITY_DEVICE_ID_FIELD not in tags:
            return
        if version.as_tuple() < self._options.device_id_min_version:
            self.record.device_id_mismatches += 1
            logger.warning(
                "Entity listing carries field %d but API %s predates sub-device ids",
                ProtocolConstants.ENTITY_DEVICE_ID_FIELD,
                version,
            )

    def _publish(self, record: Any) -> None:
        if self._listener is None or record is None:
            return
        try:
            self._listener(record)
        except Exception:
            logger.exception("Listener failed on %r", record)

    def _publish_status(self, state: NetworkState, reason: str) -> None:
        logger.info("%s is %s: %s", self._device_id, state.value, reason)
        self._publish(NetworkStatus(state=state, reason=reason))

    # ===== Handshake =====

    def _run_continuation(self, continuation: Continuation, tags: TagMap) -> None:
        self._continuations[continuation](tags)

    def _on_hello_response(self, tags: TagMap) -> None:
        reader = TagReader(tags)
        version = ApiVersion.from_tags(reader)
        logger.info("API version: %s", version)
        self.record.api_version = version
        self.record.data["API Version"] = str(version)

        if version.major > self._options.max_api_major:
            raise UnsupportedProtocolVersionError(
                version.major,
                version.minor,
                max_major=self._options.max_api_major,
            )
        self._transition(SessionState.AWAITING_AUTH)

        info = reader.get_str(3)
        if info:
            logger.info("Server info: %s", info)
            self.record.data["Server Info"] = info

        name = reader.get_str(4)
        if name and name != self.record.name:
            logger.info("Device name: %s", name)
            self.record.name = name
            self.record.require_refresh = True

        self._authenticate(version)

    def _authenticate(self, version: ApiVersion) -> None:
        password = self._options.password
        logger.info("Sending authentication request (%s password)", "using" if password else "no")
        payload = encode_tags({1: (password, WireType.LENGTH_DELIMITED)})
        if version.is_legacy_auth:
            self._supervisor.enqueue(
                MessageType.AUTHENTICATION_REQUEST,
                payload,
                MessageType.AUTHENTICATION_RESPONSE,
                Continuation.AUTHENTICATE,
            )
            return

        logger.info("API %s fast path, no authentication response expected", version)
        self._supervisor.enqueue(MessageType.AUTHENTICATION_REQUEST, payload)
        self._on_authenticated()

    def _on_authentication_response(self, tags: TagMap) -> None:
        if TagReader(tags).get_bool(1):
            raise InvalidCredentialError("Invalid password (update the connection options)")
        self._on_authenticated()

    def _on_authenticated(self) -> None:
        self._transition(SessionState.AWAITING_DEVICE_INFO)
        self.record.last_connected = datetime.now()
        self._publish_status(NetworkState.ONLINE, "connection completed")
        self._keepalive.schedule()
        self._supervisor.enqueue(
            MessageType.DEVICE_INFO_REQUEST,
            expected_response=MessageType.DEVICE_INFO_RESPONSE,
            on_success=Continuation.DEVICE_INFO,
        )

    def _on_device_info_response(self, tags: TagMap) -> None:
        info = DeviceInfo.from_tags(TagReader(tags))
        data = self.record.data
        changed = (
            data.get("Compile Time") != info.compilation_time
            or data.get("MAC Address") != info.mac_address
        )
        data.update({
            "Board Model": info.model,
            "Compile Time": info.compilation_time,
            "ESPHome Version": info.esphome_version,
            "Has Deep Sleep": "yes" if info.has_deep_sleep else "no",
            "MAC Address": info.mac_address,
            "Project Name": info.project_name,
            "Project Version": info.project_version,
            "Web Server": info.web_server(self._options.host),
            "Bluetooth Proxy Version": str(info.bluetooth_proxy_version),
            "Manufacturer": info.manufacturer,
        })
        if info.mac_address:
            self.record.network_id = info.network_id
        self._publish(info)

        self._transition(SessionState.SUBSCRIBING)
        if changed or self.record.require_refresh:
            self._list_entities()
        else:
            self._subscribe()

    def _list_entities(self) -> None:
        logger.debug("Requesting entity list")
        self.record.require_refresh = False
        self.record.services = []
        self._send(MessageType.LIST_ENTITIES_REQUEST)

    def _on_listing_done(self, tags: TagMap) -> None:
        self._publish(ListingComplete())
        if self.state is SessionState.SUBSCRIBING:
            self._subscribe()

    def _subscribe(self) -> None:
        logger.info("Subscribing to service calls")
        self._send(MessageType.SUBSCRIBE_HOMEASSISTANT_SERVICES_REQUEST)
        level = self._options.log_level
        logger.info("Subscribing to %s logging", level.name)
        self._send(MessageType.SUBSCRIBE_LOGS_REQUEST, {
            1: (int(level), WireType.VARINT),
            2: (self._options.dump_config, WireType.VARINT),
        })
        logger.info("Subscribing to device states")
        self._send(MessageType.SUBSCRIBE_STATES_REQUEST)

        self._supervisor.flush()
        if self.state is not SessionState.SUBSCRIBING:
            return
        self._transition(SessionState.ONLINE)
        self._reconnect.reset()
        self._online_event.set()

    def _on_ping_response(self, tags: TagMap) -> None:
        self._publish_status(NetworkState.ONLINE, "ping response")
        self._keepalive.schedule()

    # ===== Device requests =====

    def _on_ping_request(self, tags: TagMap) -> None:
        self._send(MessageType.PING_RESPONSE)

    def _on_get_time_request(self, tags: TagMap) -> None:
        logger.info("Sending current time")
        self._send(MessageType.GET_TIME_RESPONSE, {1: (int(time.time()), WireType.VARINT)})

    def _on_disconnect_request(self, tags: TagMap) -> None:
        self._send(MessageType.DISCONNECT_RESPONSE)
        self._close("requested by device", send_disconnect=False)
        self._reconnect.force_max_delay()
        self._reconnect.schedule_reconnect()

    def _on_log_message(self, tags: TagMap) -> None:
        reader = TagReader(tags)
        level = to_enum(LogLevel, reader.get_int(1))
        message = ANSI_COLOR.sub("", reader.get_str(3))
        device_logger.log(DEVICE_LOG_LEVELS.get(level, logging.DEBUG), message)
        self._publish(LogMessage(level=level, message=message))

    def _on_service_listed(self, tags: TagMap) -> None:
        service = self._decoders.decode(MessageType.LIST_ENTITIES_SERVICES_RESPONSE, tags)
        if isinstance(service, ServiceInfo):
            logger.debug("Service discovered: %s", service)
            self.record.add_service(service)
            self._publish(service)

    # ===== Context manager =====

    async def __aenter__(self) -> DeviceClient:
        """Async context manager entry - starts connecting."""
        self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - disconnects."""
        self.disconnect()

    def __repr__(self) -> str:
        return f"DeviceClient({self._device_id}, state={self.state.name})"
