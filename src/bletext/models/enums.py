from __future__ import annotations

from enum import Enum, IntEnum, IntFlag
from typing import Iterable


class ConnectionState(Enum):
    """Radio link status as seen by the client.

    CONNECTED means the link is up, not that an endpoint is resolved.
    """
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class TextEncoding(str, Enum):
    """Text encodings accepted for outgoing payloads (Python codec names)."""
    UTF_8 = "utf-8"
    UTF_16_LE = "utf-16-le"
    UTF_16_BE = "utf-16-be"
    ASCII = "ascii"
    LATIN_1 = "latin-1"


class ResolutionTier(IntEnum):
    """Which resolver rule picked the write endpoint."""
    EXACT = 1     # Configured service and characteristic
    SERVICE = 2   # Configured service, any writable characteristic
    FALLBACK = 3  # First writable characteristic anywhere


class CharacteristicProperties(IntFlag):
    """GATT characteristic property bits (Core spec Vol 3, Part G, 3.3.1.1)."""
    NONE = 0x00
    BROADCAST = 0x01
    READ = 0x02
    WRITE_WITHOUT_RESPONSE = 0x04
    WRITE = 0x08
    NOTIFY = 0x10
    INDICATE = 0x20
    AUTHENTICATED_SIGNED_WRITES = 0x40
    EXTENDED_PROPERTIES = 0x80

    @classmethod
    def from_names(cls, names: Iterable[str]) -> CharacteristicProperties:
        """Build flags from bleak-style property names.

        Unknown names (e.g. "reliable-write") are ignored.
        """
        flags = cls.NONE
        for name in names:
            flag = _PROPERTY_NAMES.get(name.lower())
            if flag is not None:
                flags |= flag
        return flags

    @property
    def is_writable(self) -> bool:
        """True if the characteristic accepts either kind of write."""
        return bool(self & (CharacteristicProperties.WRITE | CharacteristicProperties.WRITE_WITHOUT_RESPONSE))


_PROPERTY_NAMES: dict[str, CharacteristicProperties] = {
    "broadcast": CharacteristicProperties.BROADCAST,
    "read": CharacteristicProperties.READ,
    "write-without-response": CharacteristicProperties.WRITE_WITHOUT_RESPONSE,
    "write": CharacteristicProperties.WRITE,
    "notify": CharacteristicProperties.NOTIFY,
    "indicate": CharacteristicProperties.INDICATE,
    "authenticated-signed-writes": CharacteristicProperties.AUTHENTICATED_SIGNED_WRITES,
    "extended-properties": CharacteristicProperties.EXTENDED_PROPERTIES,
}
