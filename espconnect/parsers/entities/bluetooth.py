"""
Bluetooth LE advertisement decoding.

Devices configured as Bluetooth proxies forward every advertisement they
hear once the client subscribes. Service and manufacturer data are
repeated sub-messages of (uuid, data).

Message: BLUETOOTH_LE_ADVERTISEMENT_RESPONSE (67)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import EntityDecoder
from espconnect.protocol.constants import MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


def format_mac_address(value: int) -> str:
    """
    Format a 48-bit integer as a colon separated MAC address.

    Example:
        >>> format_mac_address(0xA4C1380B2F11)
        'a4:c1:38:0b:2f:11'
    """
    digits = f"{value:012x}"
    return ":".join(digits[i:i + 2] for i in range(0, 12, 2))


@dataclass(frozen=True)
class BluetoothLEAdvertisement:
    """
    A forwarded Bluetooth LE advertisement.

    Attributes:
        address: Advertiser MAC address, lower case.
        name: Advertised local name.
        rssi: Received signal strength in dBm.
        service_uuids: Advertised service UUIDs, lower case.
        service_data: Service UUID to data bytes.
        manufacturer_data: Manufacturer id to data bytes.
    """

    platform: ClassVar[str] = "bluetoothle"

    address: str
    name: str
    rssi: int
    service_uuids: tuple[str, ...] = ()
    service_data: dict[str, bytes] = field(default_factory=dict, hash=False)
    manufacturer_data: dict[str, bytes] = field(default_factory=dict, hash=False)


def _service_data_map(readers: list[TagReader]) -> dict[str, bytes]:
    result: dict[str, bytes] = {}
    for sub in readers:
        uuid = sub.get_str(1).lower()
        if not uuid:
            continue
        # Older firmware sends the data as repeated uint32 in field 2
        data = sub.get_bytes(3) or bytes(v & 0xFF for v in sub.get_int_list(2))
        result[uuid] = data
    return result


class BluetoothLEAdvertisementDecoder(EntityDecoder):
    """Decoder for forwarded advertisements."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.BLUETOOTH_LE_ADVERTISEMENT_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> BluetoothLEAdvertisement:
        return BluetoothLEAdvertisement(
            address=format_mac_address(reader.get_long(1)),
            name=reader.get_str(2),
            rssi=reader.get_sint(3),
            service_uuids=tuple(uuid.lower() for uuid in reader.get_str_list(4)),
            service_data=_service_data_map(reader.get_nested(5)),
            manufacturer_data=_service_data_map(reader.get_nested(6)),
        )
