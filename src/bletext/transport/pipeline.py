"""Text transmission over a resolved write endpoint."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..models.gatt import ResolvedEndpoint
from ..models.protocol_config import ProtocolConfig
from ..protocol.chunking import split_into_chunks
from ..protocol.framing import prepare_payload

_LOGGER = logging.getLogger(__name__)

WriteFunc = Callable[[ResolvedEndpoint, bytes, bool], Awaitable[bool]]


@dataclass(frozen=True)
class TransmitResult:
    """Outcome of one transmission.

    Attributes:
        success: True if every chunk was accepted
        total_bytes: Framed payload size
        chunk_count: Number of chunks the payload was split into
        chunks_sent: Chunks accepted before success or the first rejection
    """
    success: bool
    total_bytes: int
    chunk_count: int
    chunks_sent: int


async def transmit(
        text: str,
        protocol: ProtocolConfig,
        mtu: int,
        endpoint: ResolvedEndpoint,
        write: WriteFunc,
) -> TransmitResult:
    """Frame, chunk and write text one chunk at a time.

    Each write completes before the next starts. The first rejected chunk
    aborts the transfer; chunks already written are not retried or undone.

    Args:
        text: Text to send
        protocol: Encoding, framing and write-mode preferences
        mtu: Negotiated ATT MTU
        endpoint: Resolved write characteristic
        write: Adapter write coroutine

    Returns:
        TransmitResult describing what was sent

    Raises:
        PayloadError: If text cannot be framed
    """
    payload = prepare_payload(text, protocol)
    chunks = split_into_chunks(payload, mtu, protocol.chunk_overhead_bytes)
    without_response = endpoint.write_without_response(protocol.use_write_without_response)

    _LOGGER.debug(
        "Sending %d bytes in %d chunks (mtu=%d, overhead=%d, without_response=%s)",
        len(payload),
        len(chunks),
        mtu,
        protocol.chunk_overhead_bytes,
        without_response,
    )

    for index, chunk in enumerate(chunks):
        if not await write(endpoint, chunk, without_response):
            _LOGGER.warning("Chunk %d/%d rejected, aborting", index + 1, len(chunks))
            return TransmitResult(
                success=False,
                total_bytes=len(payload),
                chunk_count=len(chunks),
                chunks_sent=index,
            )

    return TransmitResult(
        success=True,
        total_bytes=len(payload),
        chunk_count=len(chunks),
        chunks_sent=len(chunks),
    )
