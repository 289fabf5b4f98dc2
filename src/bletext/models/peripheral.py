"""Discovered peripheral model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ScannedPeripheral:
    """A peripheral seen during a scan session.

    Identity is the platform address; ``device`` carries the backend's
    own handle (a bleak ``BLEDevice``) and takes no part in equality.
    """

    address: str
    name: str | None = None
    rssi: int | None = None
    device: Any = field(default=None, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        """Advertised name, or the address when the peripheral has none."""
        return self.name or self.address
