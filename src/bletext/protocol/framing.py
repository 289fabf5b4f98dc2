"""Text to payload framing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..const import LENGTH_HEADER_SIZE, MAX_FRAMED_PAYLOAD
from ..exceptions import PayloadError

if TYPE_CHECKING:
    from ..models.protocol_config import ProtocolConfig


def encode_length_header(length: int) -> bytes:
    """Encode a payload length as the 2-byte big-endian frame header.

    Raises:
        PayloadError: If length does not fit in 16 bits
    """
    if not 0 <= length <= MAX_FRAMED_PAYLOAD:
        raise PayloadError(
            f"Payload too large for length header: {length} bytes (max {MAX_FRAMED_PAYLOAD})"
        )
    return length.to_bytes(LENGTH_HEADER_SIZE, byteorder="big")


def prepare_payload(text: str, protocol: ProtocolConfig) -> bytes:
    """Encode text and apply the protocol's optional length framing.

    Format (prepend_length_header=True):
        [length:2 BE][encoded text]

    Args:
        text: Text to send
        protocol: Framing rules

    Returns:
        Bytes ready for chunking

    Raises:
        PayloadError: If text cannot be encoded or is too long to frame
    """
    encoding = protocol.text_encoding.value
    try:
        data = text.encode(encoding)
    except UnicodeEncodeError as e:
        raise PayloadError(f"Text not representable in {encoding}: {e.reason}") from e

    if not protocol.prepend_length_header:
        return data

    return encode_length_header(len(data)) + data
