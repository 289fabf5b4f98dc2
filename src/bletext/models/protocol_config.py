"""Per-peripheral-family framing and target descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from bleak.uuids import normalize_uuid_str

from ..const import (
    ATT_WRITE_OVERHEAD,
    NUS_RX_CHARACTERISTIC_UUID,
    NUS_SERVICE_UUID,
)
from .enums import TextEncoding


def _normalize(uuid: str | None) -> str | None:
    if uuid is None:
        return None
    return normalize_uuid_str(uuid)


@dataclass(frozen=True, slots=True)
class ProtocolConfig:
    """How to frame text and where to write it for one peripheral family.

    UUIDs may be given in any form bleak accepts (full, 16-bit or 32-bit
    shorthand) and are stored normalized to lowercase 128-bit strings.
    Leaving both UUIDs unset defers endpoint selection to the global
    fallback (first writable characteristic on the peripheral).

    Attributes:
        service_uuid: Service expected to hold the write characteristic
        write_characteristic_uuid: Characteristic to write chunks to
        chunk_overhead_bytes: Bytes reserved per write, subtracted from the MTU
        use_write_without_response: Prefer ATT Write Command over Write Request
        text_encoding: Codec for outgoing text
        prepend_length_header: Prefix payload with its 2-byte big-endian length
    """

    NUS: ClassVar[ProtocolConfig]
    WILDCARD: ClassVar[ProtocolConfig]

    service_uuid: str | None = None
    write_characteristic_uuid: str | None = None
    chunk_overhead_bytes: int = ATT_WRITE_OVERHEAD
    use_write_without_response: bool = True
    text_encoding: TextEncoding = TextEncoding.UTF_8
    prepend_length_header: bool = False

    def __post_init__(self) -> None:
        if self.chunk_overhead_bytes < 0:
            raise ValueError(
                f"chunk_overhead_bytes out of range: {self.chunk_overhead_bytes} (must be >= 0)"
            )
        object.__setattr__(self, "service_uuid", _normalize(self.service_uuid))
        object.__setattr__(
            self, "write_characteristic_uuid", _normalize(self.write_characteristic_uuid)
        )
        object.__setattr__(self, "text_encoding", TextEncoding(self.text_encoding))

    @property
    def is_wildcard(self) -> bool:
        """True if no service or characteristic is pinned."""
        return self.service_uuid is None and self.write_characteristic_uuid is None


ProtocolConfig.NUS = ProtocolConfig(
    service_uuid=NUS_SERVICE_UUID,
    write_characteristic_uuid=NUS_RX_CHARACTERISTIC_UUID,
)
ProtocolConfig.WILDCARD = ProtocolConfig()
