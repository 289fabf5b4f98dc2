"""Link-layer chunking for outgoing payloads."""

from __future__ import annotations

from ..const import MIN_CHUNK_SIZE


def max_chunk_size(mtu: int, overhead: int) -> int:
    """Usable payload bytes per write for a negotiated MTU.

    Clamped up to MIN_CHUNK_SIZE so a tiny or bogus MTU never yields a
    zero or negative chunk size.

    Args:
        mtu: Negotiated ATT MTU
        overhead: Bytes reserved per write for framing

    Returns:
        max(MIN_CHUNK_SIZE, mtu - overhead)
    """
    return max(MIN_CHUNK_SIZE, mtu - overhead)


def split_into_chunks(payload: bytes, mtu: int, overhead: int) -> list[bytes]:
    """Split a payload into consecutive link-sized chunks.

    Args:
        payload: Bytes to send (already framed)
        mtu: Negotiated ATT MTU
        overhead: Bytes reserved per write for framing

    Returns:
        Ordered chunks whose concatenation is ``payload``; empty for an
        empty payload
    """
    chunk_size = max_chunk_size(mtu, overhead)
    return [
        bytes(payload[offset:offset + chunk_size])
        for offset in range(0, len(payload), chunk_size)
    ]
