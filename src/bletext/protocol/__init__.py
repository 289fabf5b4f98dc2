"""Payload framing, chunking and endpoint resolution."""

from .chunking import max_chunk_size, split_into_chunks
from .framing import encode_length_header, prepare_payload
from .resolver import resolve_endpoint

__all__ = [
    "encode_length_header",
    "max_chunk_size",
    "prepare_payload",
    "resolve_endpoint",
    "split_into_chunks",
]
