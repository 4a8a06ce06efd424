"""
Siren, lock and media player decoding strategies.

These platforms share the same listing shape (icon, disabled flag,
category) plus a few platform-specific capability fields, and report an
integer or boolean state.

Messages:
    LIST_ENTITIES_SIREN_RESPONSE (55), SIREN_STATE_RESPONSE (56),
    LIST_ENTITIES_LOCK_RESPONSE (58), LOCK_STATE_RESPONSE (59),
    LIST_ENTITIES_MEDIA_PLAYER_RESPONSE (63), MEDIA_PLAYER_STATE_RESPONSE (64)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import (
    EntityDecoder,
    EntityInfo,
    parse_entity_info,
    to_entity_category,
    to_enum,
)
from espconnect.protocol.constants import (
    EntityCategory,
    LockState,
    MediaPlayerState,
    MessageType,
)

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class SirenEntity:
    """
    Siren listing.

    Attributes:
        info: Common entity fields.
        icon: Material design icon name.
        disabled_by_default: Entity starts disabled in the UI.
        tones: Tone names accepted by siren commands.
        supports_duration: Accepts a duration in seconds.
        supports_volume: Accepts a volume level.
        entity_category: Entity category.
    """

    platform: ClassVar[str] = "siren"

    info: EntityInfo
    icon: str
    disabled_by_default: bool
    tones: tuple[str, ...]
    supports_duration: bool
    supports_volume: bool
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class SirenState:
    platform: ClassVar[str] = "siren"

    key: int
    state: bool


@dataclass(frozen=True)
class LockEntity:
    """
    Lock listing.

    Attributes:
        info: Common entity fields.
        icon: Material design icon name.
        disabled_by_default: Entity starts disabled in the UI.
        entity_category: Entity category.
        assumed_state: The firmware cannot read back the real state.
        supports_open: Accepts the open (unlatch) command.
        requires_code: Commands must carry a code.
        code_format: Regular expression the code must match.
    """

    platform: ClassVar[str] = "lock"

    info: EntityInfo
    icon: str
    disabled_by_default: bool
    entity_category: EntityCategory | int
    assumed_state: bool
    supports_open: bool
    requires_code: bool
    code_format: str

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class LockStateRecord:
    """Lock state update."""

    platform: ClassVar[str] = "lock"

    key: int
    state: LockState | int


@dataclass(frozen=True)
class MediaPlayerEntity:
    platform: ClassVar[str] = "media_player"

    info: EntityInfo
    icon: str
    disabled_by_default: bool
    entity_category: EntityCategory | int
    supports_pause: bool

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class MediaPlayerStateRecord:
    """
    Media player state update.

    Attributes:
        key: Entity key.
        state: Idle, playing or paused.
        volume: Volume from 0.0 to 1.0.
        muted: Output is muted.
    """

    platform: ClassVar[str] = "media_player"

    key: int
    state: MediaPlayerState | int
    volume: float
    muted: bool


class SirenEntityDecoder(EntityDecoder):
    """Decoder for siren listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_SIREN_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SirenEntity:
        return SirenEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            disabled_by_default=reader.get_bool(6),
            tones=tuple(reader.get_str_list(7)),
            supports_duration=reader.get_bool(8),
            supports_volume=reader.get_bool(9),
            entity_category=to_entity_category(reader.get_int(10)),
        )


class SirenStateDecoder(EntityDecoder):
    """Decoder for siren state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.SIREN_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SirenState:
        return SirenState(key=reader.get_long(1), state=reader.get_bool(2))


class LockEntityDecoder(EntityDecoder):
    """Decoder for lock listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_LOCK_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> LockEntity:
        return LockEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            disabled_by_default=reader.get_bool(6),
            entity_category=to_entity_category(reader.get_int(7)),
            assumed_state=reader.get_bool(8),
            supports_open=reader.get_bool(9),
            requires_code=reader.get_bool(10),
            code_format=reader.get_str(11),
        )


class LockStateDecoder(EntityDecoder):
    """Decoder for lock state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LOCK_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> LockStateRecord:
        return LockStateRecord(key=reader.get_long(1), state=to_enum(LockState, reader.get_int(2)))


class MediaPlayerEntityDecoder(EntityDecoder):
    """Decoder for media player listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_MEDIA_PLAYER_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> MediaPlayerEntity:
        return MediaPlayerEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            disabled_by_default=reader.get_bool(6),
            entity_category=to_entity_category(reader.get_int(7)),
            supports_pause=reader.get_bool(8),
        )


class MediaPlayerStateDecoder(EntityDecoder):
    """Decoder for media player state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.MEDIA_PLAYER_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> MediaPlayerStateRecord:
        return MediaPlayerStateRecord(
            key=reader.get_long(1),
            state=to_enum(MediaPlayerState, reader.get_int(2)),
            volume=reader.get_float(3),
            muted=reader.get_bool(4),
        )
