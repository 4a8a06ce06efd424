"""
TagReader - typed access to a decoded tag map.

Decoded payloads only carry raw values: ints for VARINT/FIXED fields and
bytes for LENGTH_DELIMITED fields. The reader applies the field's schema
type on access, the same way generated protobuf classes would:

- int32/enum fields are narrowed to a signed 32-bit value
- float fields reinterpret the FIXED32 bit pattern
- string fields decode UTF-8
- absent fields return the proto3 default (0, 0.0, False, "")

Example:
    >>> from espconnect.protocol.tags import decode_tags
    >>> reader = TagReader(decode_tags(b"\\x08\\x2a\\x12\\x03abc"))
    >>> reader.get_int(1), reader.get_str(2), reader.get_bool(3)
    (42, 'abc', False)
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from espconnect.protocol.tags import decode_tags

if TYPE_CHECKING:
    from espconnect.protocol.tags import TagMap, TagValue


class TagReader:
    """
    Read typed field values from a tag map.

    Attributes:
        tags: The underlying tag map.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: TagMap | None = None) -> None:
        self._tags: TagMap = tags if tags is not None else {}

    @classmethod
    def from_payload(cls, payload: bytes) -> TagReader:
        """Decode a payload and wrap the resulting tag map."""
        return cls(decode_tags(payload))

    @property
    def tags(self) -> TagMap:
        """The underlying tag map."""
        return self._tags

    def has(self, field: int) -> bool:
        """Check whether a field is present."""
        return bool(self._tags.get(field))

    def _first(self, field: int) -> TagValue | None:
        values = self._tags.get(field)
        return values[0] if values else None

    def get_long(self, field: int, default: int = 0) -> int:
        """
        Read an unsigned integer field (uint32/uint64/fixed32 keys).

        Args:
            field: Field number.
            default: Value returned when the field is absent.
        """
        value = self._first(field)
        if value is None:
            return default
        if isinstance(value, bytes):
            return int.from_bytes(value, "little")
        return value

    def get_int(self, field: int, default: int = 0) -> int:
        """
        Read an int32 or enum field as a signed 32-bit value.

        Negative int32 values arrive as ten-byte two's complement varints,
        so the raw value is narrowed before the sign is applied.
        """
        value = self._first(field)
        if value is None or isinstance(value, bytes):
            return default
        value &= 0xFFFFFFFF
        return value - (1 << 32) if value & 0x80000000 else value

    def get_sint(self, field: int, default: int = 0) -> int:
        """Read a zigzag-encoded sint32/sint64 field."""
        value = self._first(field)
        if value is None or isinstance(value, bytes):
            return default
        return (value >> 1) ^ -(value & 1)

    def get_bool(self, field: int, invert: bool = False) -> bool:
        """
        Read a bool field.

        Args:
            field: Field number.
            invert: Return the negation. Used for "missing_state" style
                fields exposed as has_state.
        """
        value = self._first(field)
        return (not invert) if value else invert

    def get_float(self, field: int, default: float = 0.0) -> float:
        """Read a float field stored as a FIXED32 bit pattern."""
        value = self._first(field)
        if value is None:
            return default
        if isinstance(value, bytes):
            value = int.from_bytes(value[:4], "little")
        return struct.unpack("<f", (value & 0xFFFFFFFF).to_bytes(4, "little"))[0]

    def get_str(self, field: int, default: str = "") -> str:
        """
        Read a string field.

        Numeric values are rendered in decimal, so id fields carried as
        either uint32 or string read the same way.
        """
        value = self._first(field)
        if value is None:
            return default
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def get_bytes(self, field: int, default: bytes = b"") -> bytes:
        """Read a bytes field."""
        value = self._first(field)
        if isinstance(value, bytes):
            return value
        return default

    def get_str_list(self, field: int) -> list[str]:
        """Read every occurrence of a repeated string field."""
        return [
            value.decode("utf-8", errors="replace") if isinstance(value, bytes) else str(value)
            for value in self._tags.get(field, [])
        ]

    def get_int_list(self, field: int) -> list[int]:
        """Read every occurrence of a repeated integer field."""
        return [value for value in self._tags.get(field, []) if isinstance(value, int)]

    def get_nested(self, field: int) -> list[TagReader]:
        """Decode every occurrence of a repeated sub-message field."""
        return [
            TagReader(decode_tags(value))
            for value in self._tags.get(field, [])
            if isinstance(value, bytes)
        ]

    def __repr__(self) -> str:
        return f"TagReader(fields={sorted(self._tags)})"
