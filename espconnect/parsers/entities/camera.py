"""
Camera decoding strategies.

Camera images are streamed in chunks. Each CAMERA_IMAGE_RESPONSE carries
one chunk of JPEG data; the chunk with done set closes the image.

Messages: LIST_ENTITIES_CAMERA_RESPONSE (43), CAMERA_IMAGE_RESPONSE (44)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import (
    EntityDecoder,
    EntityInfo,
    parse_entity_info,
    to_entity_category,
)
from espconnect.protocol.constants import EntityCategory, MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class CameraEntity:
    platform: ClassVar[str] = "camera"

    info: EntityInfo
    disabled_by_default: bool
    icon: str
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class CameraImage:
    """
    One chunk of a camera image.

    Attributes:
        key: Entity key.
        image: JPEG bytes of this chunk.
        done: This is the last chunk of the image.
    """

    platform: ClassVar[str] = "camera"

    key: int
    image: bytes
    done: bool

    def __repr__(self) -> str:
        return f"CameraImage(key={self.key}, image={len(self.image)} bytes, done={self.done})"


class CameraEntityDecoder(EntityDecoder):
    """Decoder for camera listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_CAMERA_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> CameraEntity:
        return CameraEntity(
            info=parse_entity_info(reader),
            disabled_by_default=reader.get_bool(5),
            icon=reader.get_str(6),
            entity_category=to_entity_category(reader.get_int(7)),
        )


class CameraImageDecoder(EntityDecoder):
    """Decoder for camera image chunks."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.CAMERA_IMAGE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> CameraImage:
        return CameraImage(
            key=reader.get_long(1),
            image=reader.get_bytes(2),
            done=reader.get_bool(3),
        )
