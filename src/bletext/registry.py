"""Discovered peripheral registry."""

from __future__ import annotations

import logging

from .models.peripheral import ScannedPeripheral
from .observable import StateStream

_LOGGER = logging.getLogger(__name__)


def _sort_key(peripheral: ScannedPeripheral) -> tuple[str, str]:
    return (peripheral.display_name, peripheral.address)


class ScanRegistry:
    """Deduplicated, display-sorted peripherals seen in the current scan.

    The first advertisement seen for an address wins; later ones for the
    same address are ignored. Entries persist until ``clear()``.
    """

    def __init__(self) -> None:
        self._by_address: dict[str, ScannedPeripheral] = {}
        self.stream: StateStream[tuple[ScannedPeripheral, ...]] = StateStream(())

    def add(self, peripheral: ScannedPeripheral) -> bool:
        """Insert a peripheral unless its address is already known.

        Returns:
            True if the registry changed
        """
        if peripheral.address in self._by_address:
            return False
        self._by_address[peripheral.address] = peripheral
        _LOGGER.debug("Discovered %s (%s)", peripheral.display_name, peripheral.address)
        self.stream.publish(self.peripherals)
        return True

    def clear(self) -> None:
        """Forget every peripheral (a new scan session starts)."""
        self._by_address.clear()
        self.stream.publish(())

    @property
    def peripherals(self) -> tuple[ScannedPeripheral, ...]:
        """Peripherals ordered by display name, then address."""
        return tuple(sorted(self._by_address.values(), key=_sort_key))

    def get(self, address: str) -> ScannedPeripheral | None:
        return self._by_address.get(address)

    def __len__(self) -> int:
        return len(self._by_address)

    def __contains__(self, address: object) -> bool:
        return address in self._by_address
