"""Tests for varint encoding."""

import pytest

from espconnect.exceptions import UnexpectedEndOfStreamError
from espconnect.protocol.varint import decode_varint, encode_varint, varint_size


class TestEncodeVarint:
    """Tests for encode_varint."""

    def test_single_byte(self):
        """Test values below 128 use one byte."""
        assert encode_varint(0) == b"\x00"
        assert encode_varint(1) == b"\x01"
        assert encode_varint(127) == b"\x7f"

    def test_multi_byte(self):
        """Test continuation bits on multi-byte values."""
        assert encode_varint(128) == b"\x80\x01"
        assert encode_varint(300) == b"\xac\x02"
        assert encode_varint(16384) == b"\x80\x80\x01"

    def test_max_uint64(self):
        """Test the largest value takes ten bytes."""
        encoded = encode_varint(2**64 - 1)
        assert len(encoded) == 10
        assert encoded[-1] == 0x01

    def test_negative_uses_twos_complement(self):
        """Test negative values encode as 64-bit two's complement."""
        assert encode_varint(-1) == encode_varint(2**64 - 1)


class TestDecodeVarint:
    """Tests for decode_varint."""

    @pytest.mark.parametrize(
        "value",
        [0, 1, 127, 128, 255, 300, 16383, 16384, 2**31 - 1, 2**32, 2**63, 2**64 - 1],
    )
    def test_round_trip(self, value):
        """Test decode(encode(v)) returns the value and its length."""
        encoded = encode_varint(value)
        assert decode_varint(encoded) == (value, len(encoded))

    def test_decode_at_offset(self):
        """Test decoding from the middle of a buffer."""
        assert decode_varint(b"\xff\xac\x02\x00", 1) == (300, 2)

    def test_stops_at_first_terminal_byte(self):
        """Test trailing bytes are not consumed."""
        assert decode_varint(b"\x05\x06") == (5, 1)

    def test_empty_with_allow_empty(self):
        """Test empty input returns None when allowed."""
        assert decode_varint(b"", allow_empty=True) is None
        assert decode_varint(b"\x01", 1, allow_empty=True) is None

    def test_empty_without_allow_empty_raises(self):
        """Test empty input raises by default."""
        with pytest.raises(UnexpectedEndOfStreamError):
            decode_varint(b"")

    def test_truncated_raises_even_with_allow_empty(self):
        """Test running out mid-varint always raises."""
        with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
            decode_varint(b"\x80\x80", allow_empty=True)
        assert exc_info.value.offset == 2


class TestVarintSize:
    """Tests for varint_size."""

    @pytest.mark.parametrize("value", [0, 127, 128, 16383, 16384, 2**35, 2**64 - 1])
    def test_matches_encoded_length(self, value):
        """Test size agrees with the encoder."""
        assert varint_size(value) == len(encode_varint(value))

    def test_negative_is_ten_bytes(self):
        """Test negative values take the full ten bytes."""
        assert varint_size(-5) == 10
