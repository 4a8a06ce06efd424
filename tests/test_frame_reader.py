"""Tests for frame reassembly."""

import pytest

from espconnect.protocol.constants import MessageType, WireType
from espconnect.protocol.frame_reader import (
    Frame,
    FrameReassembler,
    ReassemblyStatus,
    encode_frame,
)
from espconnect.protocol.tags import encode_tags


@pytest.fixture
def hello_response() -> bytes:
    """A HelloResponse frame for API 1.10 from "esp32-test"."""
    payload = encode_tags({
        1: (1, WireType.VARINT),
        2: (10, WireType.VARINT),
        3: ("esp32-test", WireType.LENGTH_DELIMITED),
    })
    return encode_frame(MessageType.HELLO_RESPONSE, payload)


@pytest.fixture
def reassembler() -> FrameReassembler:
    return FrameReassembler()


class TestEncodeFrame:
    """Tests for encode_frame."""

    def test_empty_payload(self):
        """Test a frame with no payload is three bytes."""
        assert encode_frame(MessageType.PING_REQUEST) == b"\x00\x00\x07"

    def test_length_counts_payload_only(self):
        """Test LEN excludes the type varint."""
        frame = encode_frame(MessageType.HELLO_REQUEST, b"\x0a\x03abc")
        assert frame == b"\x00\x05\x01\x0a\x03abc"

    def test_multi_byte_type(self):
        """Test types above 127 use a two-byte varint."""
        assert encode_frame(200) == b"\x00\x00\xc8\x01"


class TestFrameReassembler:
    """Tests for FrameReassembler.feed."""

    def test_single_frame(self, reassembler, hello_response):
        """Test one complete frame in one delivery."""
        result = reassembler.feed(hello_response)

        assert result.status == ReassemblyStatus.COMPLETE
        assert len(result.frames) == 1
        assert result.frames[0].type == MessageType.HELLO_RESPONSE
        assert reassembler.buffer == bytearray()

    def test_two_frames_in_one_delivery(self, reassembler, hello_response):
        """Test back-to-back frames are both returned in order."""
        data = hello_response + encode_frame(MessageType.PING_REQUEST)
        result = reassembler.feed(data)

        assert [f.type for f in result.frames] == [
            MessageType.HELLO_RESPONSE,
            MessageType.PING_REQUEST,
        ]
        assert result.status == ReassemblyStatus.COMPLETE

    def test_every_split_point(self, hello_response):
        """Test frames are identical however the stream is split in two."""
        expected = FrameReassembler().feed(hello_response).frames
        for split in range(1, len(hello_response)):
            reassembler = FrameReassembler()
            first = reassembler.feed(hello_response[:split])
            second = reassembler.feed(hello_response[split:])

            assert first.frames == ()
            assert first.status == ReassemblyStatus.NEED_MORE_DATA
            assert second.frames == expected
            assert reassembler.buffer == bytearray()

    def test_single_byte_delivery(self, reassembler, hello_response):
        """Test byte-at-a-time delivery still yields each frame once."""
        stream = hello_response + encode_frame(MessageType.PING_REQUEST) + hello_response
        frames = []
        for byte in stream:
            frames.extend(reassembler.feed(bytes([byte])).frames)

        assert [f.type for f in frames] == [
            MessageType.HELLO_RESPONSE,
            MessageType.PING_REQUEST,
            MessageType.HELLO_RESPONSE,
        ]

    def test_partial_frame_kept_with_delimiter(self, reassembler, hello_response):
        """Test the buffer keeps the partial frame starting at its delimiter."""
        ping = encode_frame(MessageType.PING_REQUEST)
        result = reassembler.feed(ping + hello_response[:4])

        assert result.frames == (Frame(MessageType.PING_REQUEST),)
        assert result.status == ReassemblyStatus.NEED_MORE_DATA
        assert bytes(reassembler.buffer) == hello_response[:4]

    def test_only_delimiter_needs_more(self, reassembler):
        """Test a lone delimiter waits for the length."""
        result = reassembler.feed(b"\x00")
        assert result.status == ReassemblyStatus.NEED_MORE_DATA
        assert reassembler.buffer == bytearray(b"\x00")

    def test_noise_indicator(self, reassembler):
        """Test 0x01 stops parsing and reports the encrypted transport."""
        result = reassembler.feed(b"\x01\x00\x02\x00\x00")

        assert result.status == ReassemblyStatus.UNSUPPORTED_TRANSPORT
        assert result.frames == ()
        assert reassembler.buffer == bytearray()

    def test_noise_after_frame_keeps_earlier_frames(self, reassembler):
        """Test frames before the indicator are still returned."""
        result = reassembler.feed(encode_frame(MessageType.PING_REQUEST) + b"\x01")

        assert result.frames == (Frame(MessageType.PING_REQUEST),)
        assert result.status == ReassemblyStatus.UNSUPPORTED_TRANSPORT

    def test_invalid_delimiter_discards_buffer(self, reassembler):
        """Test an unknown leading byte clears the buffer."""
        result = reassembler.feed(b"\x7f\x00\x07")

        assert result.status == ReassemblyStatus.INVALID_DELIMITER
        assert result.delimiter == 0x7F
        assert reassembler.buffer == bytearray()

    def test_recovers_after_invalid_delimiter(self, reassembler):
        """Test the next delivery parses normally after a discard."""
        reassembler.feed(b"\xff")
        result = reassembler.feed(encode_frame(MessageType.PING_RESPONSE))
        assert result.frames == (Frame(MessageType.PING_RESPONSE),)

    def test_shared_buffer(self, hello_response):
        """Test a partial frame survives recreating the reassembler."""
        buffer = bytearray()
        FrameReassembler(buffer).feed(hello_response[:3])
        result = FrameReassembler(buffer).feed(hello_response[3:])
        assert len(result.frames) == 1

    def test_reset(self, reassembler, hello_response):
        """Test reset drops a partial frame."""
        reassembler.feed(hello_response[:5])
        reassembler.reset()
        assert reassembler.buffer == bytearray()


class TestFrame:
    """Tests for Frame."""

    def test_unknown_type_stays_int(self):
        """Test unrecognised types are kept as raw ints."""
        frame = Frame(250, b"\x01")
        assert frame.type == 250
        assert repr(frame) == "Frame(#250, payload=1 bytes)"

    def test_repr_known_type(self):
        """Test repr shows the message name."""
        assert repr(Frame(MessageType.PING_REQUEST)) == "Frame(PING_REQUEST)"
