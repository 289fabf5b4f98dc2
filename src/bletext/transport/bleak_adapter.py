"""Radio adapter backed by bleak."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from bleak import BleakClient, BleakScanner
from bleak_retry_connector import BleakClientWithServiceCache, establish_connection

from ..const import DEFAULT_MTU
from ..exceptions import BLEConnectionError, BleTextError, BLETimeoutError, ScanError
from ..models.enums import CharacteristicProperties
from ..models.gatt import CharacteristicInfo, ServiceInfo
from ..models.peripheral import ScannedPeripheral
from ..state.events import ConnectFailed, LinkDown, LinkUp, MtuResult, ServicesDiscovered
from .adapter import ScanFilters

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice
    from bleak.backends.scanner import AdvertisementData

    from ..models.gatt import ResolvedEndpoint
    from ..state.events import LinkEvent

_LOGGER = logging.getLogger(__name__)


class BleakAdapter:
    """Drives one BLE link through bleak.

    Features:
    - Scanning with a detection callback (service UUID filter passed to
      bleak, exact-name filter applied locally)
    - Automatic retry logic with bleak-retry-connector
    - Service caching for faster reconnections
    - Best-effort MTU exchange (BlueZ needs an explicit acquire)
    """

    def __init__(
            self,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
    ):
        """Initialize the adapter.

        Args:
            timeout: Per-attempt connection and lookup timeout in seconds (default: 10)
            max_attempts: Maximum connection attempts for bleak-retry-connector (default: 4)
            use_services_cache: Enable GATT service caching for faster reconnections (default: True)
        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.use_services_cache = use_services_cache

        self._scanner: BleakScanner | None = None
        self._client: BleakClient | None = None

    @property
    def is_scanning(self) -> bool:
        return self._scanner is not None

    @property
    def is_connected(self) -> bool:
        """Check if the link is currently up."""
        return self._client is not None and self._client.is_connected

    async def start_scan(
            self,
            filters: ScanFilters,
            on_discovered: Callable[[ScannedPeripheral], None],
    ) -> None:
        """Start a scan, replacing any active one.

        Raises:
            ScanError: If the scanner cannot start
        """
        await self.stop_scan()

        def _detection_callback(device: BLEDevice, advertisement: AdvertisementData) -> None:
            name = advertisement.local_name or device.name
            if filters.name and name != filters.name:
                return
            on_discovered(
                ScannedPeripheral(
                    address=device.address,
                    name=name,
                    rssi=advertisement.rssi,
                    device=device,
                )
            )

        service_uuids = [filters.service_uuid] if filters.service_uuid else None
        scanner = BleakScanner(
            detection_callback=_detection_callback,
            service_uuids=service_uuids,
        )

        try:
            await scanner.start()
        except Exception as e:
            raise ScanError(f"Scan failed: {e}") from e

        _LOGGER.debug("Scanning (name=%s, service=%s)", filters.name, filters.service_uuid)
        self._scanner = scanner

    async def stop_scan(self) -> None:
        """Stop the active scan, if any."""
        scanner, self._scanner = self._scanner, None
        if scanner is None:
            return
        try:
            await scanner.stop()
        except Exception as e:
            _LOGGER.warning("Error stopping scan: %s", e)

    async def connect(
            self,
            peripheral: ScannedPeripheral,
            on_event: Callable[[LinkEvent], None],
    ) -> None:
        """Open a link to a peripheral.

        Reports ConnectFailed or LinkUp through ``on_event`` before
        returning, and LinkDown whenever this link drops afterwards.
        """
        def _on_disconnected(client: BleakClient) -> None:
            if self._client is client:
                self._client = None
            _LOGGER.debug("Link to %s dropped", peripheral.address)
            on_event(LinkDown())

        try:
            self._client = await self._establish(peripheral, _on_disconnected)
        except BleTextError as e:
            _LOGGER.debug("Connect to %s failed: %s", peripheral.address, e)
            on_event(ConnectFailed(status=str(e)))
            return

        _LOGGER.debug("Connected to %s", peripheral.address)
        on_event(LinkUp())

    async def _establish(
            self,
            peripheral: ScannedPeripheral,
            disconnected_callback: Callable[[BleakClient], None],
    ) -> BleakClient:
        """Establish BLE connection to the peripheral.

        Uses bleak-retry-connector for automatic retry logic and service caching.

        Raises:
            BLEConnectionError: If connection fails
            BLETimeoutError: If connection times out
        """
        try:
            _LOGGER.debug(
                "Connecting to %s with bleak-retry-connector (max_attempts=%d)",
                peripheral.address,
                self.max_attempts,
            )

            # Resolve address to BLEDevice if the scan did not provide one
            device = peripheral.device
            if device is None:
                device = await BleakScanner.find_device_by_address(
                    peripheral.address,
                    timeout=self.timeout,
                )
                if device is None:
                    raise BLEConnectionError(
                        f"Device {peripheral.address} not found during scan"
                    )

            return await establish_connection(
                client_class=BleakClientWithServiceCache,
                device=device,
                name=peripheral.display_name,
                disconnected_callback=disconnected_callback,
                max_attempts=self.max_attempts,
                use_services_cache=self.use_services_cache,
                timeout=self.timeout,
            )

        except BLEConnectionError:
            raise
        except asyncio.TimeoutError as e:
            raise BLETimeoutError(
                f"Connection timeout after {self.timeout}s"
            ) from e
        except Exception as e:
            raise BLEConnectionError(
                f"Failed to connect: {e}"
            ) from e

    async def request_mtu(self, mtu: int) -> MtuResult:
        """Read back the ATT MTU the stack negotiated.

        bleak exposes no portable MTU request; the stack exchanges MTU on
        its own and the result is capped at ``mtu``.
        """
        client = self._client
        if client is None or not client.is_connected:
            return MtuResult(mtu=DEFAULT_MTU, success=False)

        backend = getattr(client, "_backend", None)
        if backend is not None and hasattr(backend, "_acquire_mtu"):
            try:
                await backend._acquire_mtu()
            except Exception as e:
                _LOGGER.debug("BlueZ MTU acquire failed: %s", e)

        try:
            negotiated = client.mtu_size
        except Exception as e:
            _LOGGER.warning("Could not read MTU: %s", e)
            return MtuResult(mtu=DEFAULT_MTU, success=False)

        return MtuResult(mtu=min(negotiated, mtu), success=True)

    async def discover_services(self) -> ServicesDiscovered:
        """Snapshot the GATT tree bleak discovered on connect."""
        client = self._client
        if client is None or not client.is_connected:
            return ServicesDiscovered(success=False, error="Not connected")

        try:
            services = tuple(
                ServiceInfo(
                    uuid=service.uuid,
                    characteristics=tuple(
                        CharacteristicInfo(
                            uuid=char.uuid,
                            properties=CharacteristicProperties.from_names(char.properties),
                            handle=char.handle,
                            ref=char,
                        )
                        for char in service.characteristics
                    ),
                )
                for service in client.services
            )
        except Exception as e:
            return ServicesDiscovered(success=False, error=str(e))

        _LOGGER.debug("Discovered %d services", len(services))
        return ServicesDiscovered(services=services)

    async def write(self, endpoint: ResolvedEndpoint, data: bytes, without_response: bool) -> bool:
        """Write one chunk to the endpoint characteristic."""
        client = self._client
        if client is None or not client.is_connected:
            _LOGGER.warning("Write attempted without a link")
            return False

        target = endpoint.characteristic.ref or endpoint.characteristic.uuid
        try:
            await client.write_gatt_char(target, data, response=not without_response)
        except Exception as e:
            _LOGGER.warning("Write failed: %s", e)
            return False
        return True

    async def disconnect(self) -> None:
        """Disconnect from the peripheral."""
        client, self._client = self._client, None
        if client is None:
            return
        try:
            _LOGGER.debug("Disconnecting from %s", client.address)
            await client.disconnect()
        except Exception as e:
            _LOGGER.warning("Error during disconnect: %s", e)
