"""
Service decoding strategies.

Two unrelated kinds of "service" travel over the API:

- User-defined services declared in the device configuration. They are
  announced during entity listing and invoked with ExecuteServiceRequest.
- Home Assistant service calls (and events) the device asks the client to
  perform, pushed after SubscribeHomeassistantServicesRequest.

Messages: LIST_ENTITIES_SERVICES_RESPONSE (41), HOMEASSISTANT_SERVICE_RESPONSE (35)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import EntityDecoder, to_enum
from espconnect.protocol.constants import MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


class ServiceArgType(IntEnum):
    """Argument types of user-defined services."""

    BOOL = 0
    INT = 1
    FLOAT = 2
    STRING = 3
    BOOL_ARRAY = 4
    INT_ARRAY = 5
    FLOAT_ARRAY = 6
    STRING_ARRAY = 7


@dataclass(frozen=True)
class ServiceArgument:
    name: str
    type: ServiceArgType | int


@dataclass(frozen=True)
class ServiceInfo:
    """
    A user-defined service announced by the device.

    Attributes:
        object_id: Service name used to call it.
        key: Numeric key sent in ExecuteServiceRequest.
        args: Declared arguments.
    """

    platform: ClassVar[str] = "service"

    object_id: str
    key: int
    args: tuple[ServiceArgument, ...] = ()


@dataclass(frozen=True)
class HomeAssistantServiceCall:
    """
    A service call or event requested by the device.

    Attributes:
        service: Service ("light.turn_on") or event name.
        data: Static service data.
        data_template: Templated service data.
        variables: Template variables.
        is_event: Fire an event instead of calling a service.
    """

    platform: ClassVar[str] = "service"

    service: str
    data: dict[str, str] = field(default_factory=dict, hash=False)
    data_template: dict[str, str] = field(default_factory=dict, hash=False)
    variables: dict[str, str] = field(default_factory=dict, hash=False)
    is_event: bool = False


def _key_value_map(readers: list[TagReader]) -> dict[str, str]:
    return {sub.get_str(1): sub.get_str(2) for sub in readers}


class ServiceInfoDecoder(EntityDecoder):
    """Decoder for user-defined service announcements."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_SERVICES_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> ServiceInfo:
        return ServiceInfo(
            object_id=reader.get_str(1),
            key=reader.get_long(2),
            args=tuple(
                ServiceArgument(name=sub.get_str(1), type=to_enum(ServiceArgType, sub.get_int(2)))
                for sub in reader.get_nested(3)
            ),
        )


class HomeAssistantServiceDecoder(EntityDecoder):
    """Decoder for Home Assistant service calls."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.HOMEASSISTANT_SERVICE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> HomeAssistantServiceCall:
        return HomeAssistantServiceCall(
            service=reader.get_str(1),
            data=_key_value_map(reader.get_nested(2)),
            data_template=_key_value_map(reader.get_nested(3)),
            variables=_key_value_map(reader.get_nested(4)),
            is_event=reader.get_bool(5),
        )
