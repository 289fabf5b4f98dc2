"""Shared fixtures for bletext tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from bletext.const import (
    DEFAULT_MTU,
    NUS_RX_CHARACTERISTIC_UUID as NUS_RX,
    NUS_SERVICE_UUID as NUS_SERVICE,
    NUS_TX_CHARACTERISTIC_UUID as NUS_TX,
)
from bletext.exceptions import ScanError
from bletext.models import (
    CharacteristicInfo,
    CharacteristicProperties,
    ScannedPeripheral,
    ServiceInfo,
)
from bletext.state import ConnectFailed, LinkDown, LinkEvent, LinkUp, MtuResult, ServicesDiscovered
from bletext.transport import ScanFilters

BATTERY_SERVICE = "0000180f-0000-1000-8000-00805f9b34fb"
BATTERY_LEVEL = "00002a19-0000-1000-8000-00805f9b34fb"

W = CharacteristicProperties.WRITE
WNR = CharacteristicProperties.WRITE_WITHOUT_RESPONSE
NOTIFY = CharacteristicProperties.NOTIFY
READ = CharacteristicProperties.READ


def nus_services() -> tuple[ServiceInfo, ...]:
    """Battery service followed by a Nordic UART service."""
    return (
        ServiceInfo(
            BATTERY_SERVICE,
            (CharacteristicInfo(BATTERY_LEVEL, READ | NOTIFY),),
        ),
        ServiceInfo(
            NUS_SERVICE,
            (
                CharacteristicInfo(NUS_TX, NOTIFY),
                CharacteristicInfo(NUS_RX, W | WNR),
            ),
        ),
    )


class FakeAdapter:
    """In-memory RadioAdapter.

    connect_mode:
        "up": report LinkUp immediately
        "fail": report ConnectFailed immediately
        "hang": never report (until cancelled)
    """

    def __init__(self) -> None:
        self.connect_mode = "up"
        self.services: tuple[ServiceInfo, ...] = nus_services()
        self.discovery_success = True
        self.mtu = 247
        self.mtu_success = True
        self.fail_write_at: int | None = None
        self.scan_error: str | None = None

        self.writes: list[tuple[bytes, bool]] = []
        self.scan_filters: ScanFilters | None = None
        self.on_discovered: Callable[[ScannedPeripheral], None] | None = None
        self.on_event: Callable[[LinkEvent], None] | None = None
        self.start_scan_calls = 0
        self.stop_scan_calls = 0
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.connect_cancelled = False

    async def start_scan(self, filters, on_discovered) -> None:
        self.start_scan_calls += 1
        if self.scan_error is not None:
            raise ScanError(f"Scan failed: {self.scan_error}")
        self.scan_filters = filters
        self.on_discovered = on_discovered

    async def stop_scan(self) -> None:
        self.stop_scan_calls += 1

    async def connect(self, peripheral, on_event) -> None:
        self.connect_calls += 1
        self.on_event = on_event
        if self.connect_mode == "up":
            on_event(LinkUp())
        elif self.connect_mode == "fail":
            on_event(ConnectFailed(status="133"))
        else:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.connect_cancelled = True
                raise

    async def request_mtu(self, mtu: int) -> MtuResult:
        if not self.mtu_success:
            return MtuResult(mtu=DEFAULT_MTU, success=False)
        return MtuResult(mtu=min(self.mtu, mtu))

    async def discover_services(self) -> ServicesDiscovered:
        if not self.discovery_success:
            return ServicesDiscovered(success=False, error="129")
        return ServicesDiscovered(services=self.services)

    async def write(self, endpoint, data: bytes, without_response: bool) -> bool:
        if self.fail_write_at is not None and len(self.writes) == self.fail_write_at:
            self.writes.append((bytes(data), without_response))
            return False
        self.writes.append((bytes(data), without_response))
        return True

    async def disconnect(self) -> None:
        self.disconnect_calls += 1

    def drop_link(self) -> None:
        """Simulate the peer going away."""
        assert self.on_event is not None
        self.on_event(LinkDown())


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def peripheral() -> ScannedPeripheral:
    return ScannedPeripheral(address="AA:BB:CC:DD:EE:FF", name="Even G1_L_1A2B")


@pytest.fixture
def gatt_services() -> tuple[ServiceInfo, ...]:
    return nus_services()
