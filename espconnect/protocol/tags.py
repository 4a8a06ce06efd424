"""
Tag/value codec for message payloads.

A payload is a sequence of entries, each a tag varint
``(field_number << 3) | wire_type`` followed by a value whose shape is set
by the wire type. This is the subset of the protobuf wire format used by
the native API: no packed repeated scalars and no schema. Nested messages
are plain LENGTH_DELIMITED bytes that callers decode again.

Decoded payloads are a ``TagMap``: field number to the list of raw values
seen for that field, in arrival order. VARINT and FIXED values are ints,
LENGTH_DELIMITED values are bytes.
"""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any, Final

from espconnect.exceptions import (
    TruncatedMessageError,
    UnexpectedEndOfStreamError,
    UnknownWireTypeError,
)
from espconnect.protocol.constants import WireType
from espconnect.protocol.varint import decode_varint, encode_varint

TagValue = int | bytes
TagMap = dict[int, list[TagValue]]
FieldSpec = tuple[Any, WireType]

_FIXED_SIZES: Final[dict[int, int]] = {
    WireType.FIXED32: 4,
    WireType.FIXED64: 8,
}


def decode_tags(data: bytes | bytearray | memoryview, length: int | None = None) -> TagMap:
    """
    Decode a payload into a tag map.

    Args:
        data: Payload bytes.
        length: Number of bytes the payload declares. Defaults to
            ``len(data)``. The decoder must account for exactly this many
            bytes.

    Returns:
        Mapping of field number to the ordered list of raw values.

    Raises:
        TruncatedMessageError: If an entry runs past ``length`` or past
            the end of ``data``.
        UnknownWireTypeError: If a tag carries an unrecognised wire type.

    Example:
        >>> decode_tags(b"\\x08\\x01\\x12\\x02hi")
        {1: [1], 2: [b'hi']}
    """
    view = memoryview(data)
    if length is None:
        length = len(view)
    if length > len(view):
        raise TruncatedMessageError(expected=length, available=len(view))
    view = view[:length]

    tags: TagMap = {}
    position = 0
    while position < length:
        tag, consumed = _read_varint(view, position, length)
        position += consumed
        field_number = tag >> 3
        wire_type = tag & 0x07

        if wire_type == WireType.VARINT:
            value, consumed = _read_varint(view, position, length)
            position += consumed
        elif wire_type in _FIXED_SIZES:
            size = _FIXED_SIZES[wire_type]
            if position + size > length:
                raise TruncatedMessageError(
                    f"Fixed-width field {field_number} runs past end of message",
                    expected=length,
                    available=length - position,
                )
            value = int.from_bytes(view[position:position + size], "little")
            position += size
        elif wire_type == WireType.LENGTH_DELIMITED:
            size, consumed = _read_varint(view, position, length)
            position += consumed
            if position + size > length:
                raise TruncatedMessageError(
                    f"Length-delimited field {field_number} runs past end of message",
                    expected=size,
                    available=length - position,
                )
            value = bytes(view[position:position + size])
            position += size
        else:
            raise UnknownWireTypeError(wire_type, field_number)

        tags.setdefault(field_number, []).append(value)
    return tags


def encode_tags(fields: Mapping[int, FieldSpec]) -> bytes:
    """
    Encode a field mapping into payload bytes.

    Entries are written in ascending field order. Entries whose value is
    None or falsy (0, 0.0, False, "", b"") are omitted entirely, matching
    proto3 default-value suppression. A list value writes one entry per
    non-empty element under the same field number.

    Args:
        fields: Mapping of field number to ``(value, wire_type)``.

    Returns:
        Encoded payload.

    Example:
        >>> encode_tags({2: ("hi", WireType.LENGTH_DELIMITED), 1: (True, WireType.VARINT)})
        b'\\x08\\x01\\x12\\x02hi'
        >>> encode_tags({1: (0, WireType.VARINT)})
        b''
    """
    output = bytearray()
    for field_number in sorted(fields):
        value, wire_type = fields[field_number]
        values = value if isinstance(value, (list, tuple)) else (value,)
        for item in values:
            if not item:
                continue
            output += encode_varint((field_number << 3) | int(wire_type))
            output += _encode_value(item, WireType(wire_type))
    return bytes(output)


def _encode_value(value: Any, wire_type: WireType) -> bytes:
    if wire_type == WireType.VARINT:
        return encode_varint(int(value))
    if wire_type == WireType.FIXED32:
        if isinstance(value, float):
            return struct.pack("<f", value)
        return (int(value) & 0xFFFFFFFF).to_bytes(4, "little")
    if wire_type == WireType.FIXED64:
        if isinstance(value, float):
            return struct.pack("<d", value)
        return (int(value) & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")
    if wire_type == WireType.LENGTH_DELIMITED:
        raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        return encode_varint(len(raw)) + raw
    raise UnknownWireTypeError(int(wire_type))


def _read_varint(view: memoryview, position: int, length: int) -> tuple[int, int]:
    """Read a varint that must end before ``length``."""
    try:
        value, consumed = decode_varint(view, position)  # type: ignore[misc]
    except UnexpectedEndOfStreamError as exc:
        raise TruncatedMessageError(expected=length, available=length - position) from exc
    return value, consumed
