"""Radio adapter interface driven by the client."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..models.gatt import ResolvedEndpoint
    from ..models.peripheral import ScannedPeripheral
    from ..state.events import LinkEvent, MtuResult, ServicesDiscovered


@dataclass(frozen=True)
class ScanFilters:
    """Scan filters; None means no filtering on that field."""
    name: str | None = None
    service_uuid: str | None = None


class RadioAdapter(Protocol):
    """Platform BLE stack as seen by the client.

    One link at a time. Link-level outcomes are reported through the
    ``on_event`` callback given to ``connect``: exactly one of
    ConnectFailed or LinkUp for the attempt, then LinkDown when the link
    is lost. Callbacks may arrive on any thread.
    """

    async def start_scan(
            self,
            filters: ScanFilters,
            on_discovered: Callable[[ScannedPeripheral], None],
    ) -> None:
        """Start scanning.

        Raises:
            ScanError: If the stack refuses to scan
        """
        ...

    async def stop_scan(self) -> None:
        """Stop scanning. No-op when not scanning."""
        ...

    async def connect(
            self,
            peripheral: ScannedPeripheral,
            on_event: Callable[[LinkEvent], None],
    ) -> None:
        """Open a link and report ConnectFailed/LinkUp, later LinkDown."""
        ...

    async def request_mtu(self, mtu: int) -> MtuResult:
        ...

    async def discover_services(self) -> ServicesDiscovered:
        ...

    async def write(self, endpoint: ResolvedEndpoint, data: bytes, without_response: bool) -> bool:
        """Write one chunk; False if the stack rejected it."""
        ...

    async def disconnect(self) -> None:
        """Close the link and release radio resources. Safe in any state."""
        ...
