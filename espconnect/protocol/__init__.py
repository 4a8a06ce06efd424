"""
Protocol layer for native API communication.

This module contains the low-level protocol handling:
- Message type numbers and protocol constants
- Varint encoding
- Tag/value payload codec
- Frame reassembly and framing
"""

from espconnect.protocol.constants import (
    ColorCapability,
    EntityCategory,
    LogLevel,
    MessageType,
    ProtocolConstants,
    WireType,
)
from espconnect.protocol.frame_reader import (
    Frame,
    FrameReassembler,
    ReassemblyResult,
    ReassemblyStatus,
    encode_frame,
)
from espconnect.protocol.tags import TagMap, TagValue, decode_tags, encode_tags
from espconnect.protocol.varint import decode_varint, encode_varint, varint_size

__all__ = [
    # Constants
    "MessageType",
    "WireType",
    "LogLevel",
    "EntityCategory",
    "ColorCapability",
    "ProtocolConstants",
    # Varint
    "encode_varint",
    "decode_varint",
    "varint_size",
    # Tags
    "TagMap",
    "TagValue",
    "encode_tags",
    "decode_tags",
    # Frames
    "Frame",
    "FrameReassembler",
    "ReassemblyResult",
    "ReassemblyStatus",
    "encode_frame",
]
