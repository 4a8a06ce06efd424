"""
Message parsing for native API payloads.

This module provides:
- TagReader: typed accessors over a decoded tag map
- DecoderRegistry: strategy registry keyed by message type
- Entity records and decoders for every entity platform
"""

from espconnect.parsers.decoder_registry import (
    DecoderRegistry,
    EntityDecoder,
    EntityInfo,
    create_default_registry,
    parse_entity_info,
    to_entity_category,
    to_enum,
)
from espconnect.parsers.tag_reader import TagReader

__all__ = [
    # Reader
    "TagReader",
    # Registry
    "DecoderRegistry",
    "EntityDecoder",
    "EntityInfo",
    "create_default_registry",
    "parse_entity_info",
    "to_entity_category",
    "to_enum",
]
