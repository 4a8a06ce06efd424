"""
Base-128 varint encoding.

Varints store an unsigned integer in groups of seven bits, least
significant group first. Every byte except the last has its high bit
(0x80) set. A 64-bit value needs at most ten bytes.

Negative integers are written as their 64-bit two's complement, which is
how int32/int64 protobuf fields carry negative values.
"""

from __future__ import annotations

from typing import Final

from espconnect.exceptions import UnexpectedEndOfStreamError
from espconnect.protocol.constants import ProtocolConstants

_UINT64_MASK: Final[int] = (1 << 64) - 1
_CONTINUATION: Final[int] = 0x80
_PAYLOAD_MASK: Final[int] = 0x7F


def encode_varint(value: int) -> bytes:
    """
    Encode an integer as a varint.

    Args:
        value: Integer to encode. Negative values are masked to 64 bits.

    Returns:
        1 to 10 encoded bytes.

    Example:
        >>> encode_varint(1)
        b'\\x01'
        >>> encode_varint(300)
        b'\\xac\\x02'
    """
    value &= _UINT64_MASK
    result = bytearray()
    while True:
        to_write = value & _PAYLOAD_MASK
        value >>= 7
        if value:
            result.append(to_write | _CONTINUATION)
        else:
            result.append(to_write)
            return bytes(result)


def decode_varint(
    buffer: bytes | bytearray | memoryview,
    offset: int = 0,
    *,
    allow_empty: bool = False,
) -> tuple[int, int] | None:
    """
    Decode a varint from a buffer.

    Reads at most ten bytes starting at ``offset`` and stops at the first
    byte without the continuation bit.

    Args:
        buffer: Source bytes.
        offset: Position of the first varint byte.
        allow_empty: Return None instead of raising when no byte at all
            is available at ``offset``. Used at frame boundaries to tell
            "wait for more data" apart from a truncated value.

    Returns:
        Tuple of (value, bytes consumed), or None when ``allow_empty`` is
        set and the buffer is exhausted at ``offset``.

    Raises:
        UnexpectedEndOfStreamError: If the buffer ends inside the varint.

    Example:
        >>> decode_varint(b"\\xac\\x02")
        (300, 2)
        >>> decode_varint(b"", allow_empty=True) is None
        True
    """
    end = len(buffer)
    if offset >= end:
        if allow_empty:
            return None
        raise UnexpectedEndOfStreamError(offset=offset)

    result = 0
    shift = 0
    position = offset
    for _ in range(ProtocolConstants.VARINT_MAX_BYTES):
        if position >= end:
            raise UnexpectedEndOfStreamError(offset=position)
        byte = buffer[position]
        position += 1
        result |= (byte & _PAYLOAD_MASK) << shift
        if not byte & _CONTINUATION:
            break
        shift += 7
    return result & _UINT64_MASK, position - offset


def varint_size(value: int) -> int:
    """
    Number of bytes encode_varint() would produce for a value.

    Example:
        >>> varint_size(127), varint_size(128), varint_size(-1)
        (1, 2, 10)
    """
    if value < 0:
        return ProtocolConstants.VARINT_MAX_BYTES
    size = 1
    while value >= 0x80:
        size += 1
        value >>= 7
    return size
