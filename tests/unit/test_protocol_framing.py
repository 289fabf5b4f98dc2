"""Test text framing."""

import pytest

from bletext.exceptions import PayloadError, ProtocolError
from bletext.models import ProtocolConfig, TextEncoding
from bletext.protocol.framing import encode_length_header, prepare_payload


class TestEncodeLengthHeader:
    """Test the 2-byte big-endian length header."""

    def test_header_300(self):
        assert encode_length_header(300) == b"\x01\x2c"

    def test_header_bounds(self):
        assert encode_length_header(0) == b"\x00\x00"
        assert encode_length_header(0xFFFF) == b"\xff\xff"

    def test_header_overflow(self):
        with pytest.raises(PayloadError, match="too large"):
            encode_length_header(0x10000)


class TestPreparePayload:
    """Test encoding plus optional framing."""

    def test_utf8_without_header(self):
        assert prepare_payload("Hello, Even G1!", ProtocolConfig.NUS) == b"Hello, Even G1!"

    def test_utf8_multibyte(self):
        assert prepare_payload("héllo", ProtocolConfig.NUS) == "héllo".encode("utf-8")
        assert len(prepare_payload("héllo", ProtocolConfig.NUS)) == 6

    def test_length_header_prepended(self):
        """300-byte payload gets [0x01, 0x2C] in front."""
        protocol = ProtocolConfig(prepend_length_header=True)
        payload = prepare_payload("a" * 300, protocol)

        assert payload[:2] == bytes([0x01, 0x2C])
        assert payload[2:] == b"a" * 300
        assert len(payload) == 302

    def test_header_counts_encoded_bytes(self):
        protocol = ProtocolConfig(prepend_length_header=True)
        payload = prepare_payload("é", protocol)
        assert payload == b"\x00\x02\xc3\xa9"

    def test_empty_text_with_header(self):
        protocol = ProtocolConfig(prepend_length_header=True)
        assert prepare_payload("", protocol) == b"\x00\x00"

    def test_utf16(self):
        protocol = ProtocolConfig(text_encoding=TextEncoding.UTF_16_LE)
        assert prepare_payload("Hi", protocol) == b"H\x00i\x00"

    def test_unencodable_text(self):
        protocol = ProtocolConfig(text_encoding=TextEncoding.ASCII)
        with pytest.raises(PayloadError, match="ascii"):
            prepare_payload("naïve", protocol)

    def test_oversized_framed_payload(self):
        protocol = ProtocolConfig(prepend_length_header=True)
        with pytest.raises(ProtocolError):
            prepare_payload("x" * 70000, protocol)

    def test_oversized_payload_without_header_is_fine(self):
        assert len(prepare_payload("x" * 70000, ProtocolConfig.NUS)) == 70000
