"""Tests for TagReader typed accessors."""

import pytest

from espconnect.parsers.tag_reader import TagReader
from espconnect.protocol.constants import WireType
from espconnect.protocol.tags import encode_tags


def make_reader(fields) -> TagReader:
    """Encode a field mapping and wrap the decoded payload."""
    return TagReader.from_payload(encode_tags(fields))


class TestScalarAccessors:
    """Tests for single-value accessors."""

    def test_absent_fields_return_defaults(self):
        """Test every accessor falls back to the proto3 default."""
        reader = TagReader()
        assert reader.get_long(1) == 0
        assert reader.get_int(1) == 0
        assert reader.get_sint(1) == 0
        assert reader.get_bool(1) is False
        assert reader.get_float(1) == 0.0
        assert reader.get_str(1) == ""
        assert reader.get_bytes(1) == b""
        assert reader.has(1) is False

    def test_explicit_defaults(self):
        """Test callers can override the default."""
        reader = TagReader()
        assert reader.get_long(1, default=7) == 7
        assert reader.get_str(1, default="x") == "x"

    def test_fixed32_key(self):
        """Test a FIXED32 key reads back unsigned."""
        reader = make_reader({1: (0xF00DCAFE, WireType.FIXED32)})
        assert reader.get_long(1) == 0xF00DCAFE

    def test_negative_int32(self):
        """Test a ten-byte negative varint narrows to int32."""
        reader = make_reader({1: (-5, WireType.VARINT)})
        assert reader.get_int(1) == -5

    def test_sint_zigzag(self):
        """Test zigzag decoding of sint fields."""
        reader = make_reader({1: (5, WireType.VARINT), 2: (6, WireType.VARINT)})
        assert reader.get_sint(1) == -3
        assert reader.get_sint(2) == 3

    def test_float(self):
        """Test a FIXED32 bit pattern reads back as a float."""
        reader = make_reader({2: (21.5, WireType.FIXED32)})
        assert reader.get_float(2) == pytest.approx(21.5)

    def test_bool_and_invert(self):
        """Test invert turns missing_state into has_state."""
        reader = make_reader({3: (True, WireType.VARINT)})
        assert reader.get_bool(3) is True
        assert reader.get_bool(3, invert=True) is False
        assert reader.get_bool(4, invert=True) is True

    def test_str_from_bytes(self):
        """Test UTF-8 strings decode."""
        reader = make_reader({2: ("Küche", WireType.LENGTH_DELIMITED)})
        assert reader.get_str(2) == "Küche"

    def test_str_from_int(self):
        """Test numeric ids read as decimal strings."""
        reader = make_reader({26: (42, WireType.VARINT)})
        assert reader.get_str(26) == "42"

    def test_int_on_bytes_field_returns_default(self):
        """Test a wire-type mismatch reads as the default."""
        reader = make_reader({1: ("abc", WireType.LENGTH_DELIMITED)})
        assert reader.get_int(1) == 0

    def test_first_occurrence_wins(self):
        """Test scalar accessors read the first value of a repeated field."""
        reader = TagReader({1: [1, 2]})
        assert reader.get_long(1) == 1


class TestRepeatedAccessors:
    """Tests for list and nested accessors."""

    def test_str_list(self):
        """Test repeated strings keep order."""
        reader = make_reader({11: (["Rainbow", "Strobe"], WireType.LENGTH_DELIMITED)})
        assert reader.get_str_list(11) == ["Rainbow", "Strobe"]

    def test_int_list(self):
        """Test repeated ints keep order."""
        reader = TagReader({12: [1, 35, 11]})
        assert reader.get_int_list(12) == [1, 35, 11]

    def test_nested(self):
        """Test repeated sub-messages each get a reader."""
        entry = encode_tags({1: ("entity_id", WireType.LENGTH_DELIMITED), 2: ("light.hall", WireType.LENGTH_DELIMITED)})
        reader = make_reader({2: ([entry, entry], WireType.LENGTH_DELIMITED)})

        nested = reader.get_nested(2)
        assert len(nested) == 2
        assert nested[0].get_str(1) == "entity_id"
        assert nested[1].get_str(2) == "light.hall"

    def test_repr(self):
        """Test repr lists field numbers."""
        assert repr(TagReader({3: [1], 1: [2]})) == "TagReader(fields=[1, 3])"
