"""Test write endpoint resolution."""

from __future__ import annotations

from bletext.const import NUS_RX_CHARACTERISTIC_UUID, NUS_SERVICE_UUID, NUS_TX_CHARACTERISTIC_UUID
from bletext.models import (
    CharacteristicInfo,
    CharacteristicProperties,
    ProtocolConfig,
    ResolutionTier,
    ServiceInfo,
)
from bletext.protocol import resolve_endpoint

READ = CharacteristicProperties.READ
NOTIFY = CharacteristicProperties.NOTIFY
WRITE = CharacteristicProperties.WRITE
WNR = CharacteristicProperties.WRITE_WITHOUT_RESPONSE

BATTERY = "0000180f-0000-1000-8000-00805f9b34fb"
BATTERY_LEVEL = "00002a19-0000-1000-8000-00805f9b34fb"
VENDOR = "0000fff0-0000-1000-8000-00805f9b34fb"
VENDOR_WRITE = "0000fff1-0000-1000-8000-00805f9b34fb"
VENDOR_ALT = "0000fff2-0000-1000-8000-00805f9b34fb"


def _battery() -> ServiceInfo:
    return ServiceInfo(BATTERY, (CharacteristicInfo(BATTERY_LEVEL, READ | NOTIFY),))


class TestExactTier:
    """Configured service and characteristic."""

    def test_nus_rx_selected(self, gatt_services):
        endpoint = resolve_endpoint(gatt_services, ProtocolConfig.NUS)

        assert endpoint is not None
        assert endpoint.tier is ResolutionTier.EXACT
        assert endpoint.service.uuid == NUS_SERVICE_UUID
        assert endpoint.characteristic.uuid == NUS_RX_CHARACTERISTIC_UUID

    def test_exact_beats_earlier_writable(self):
        """A writable characteristic listed first does not shadow the configured one."""
        services = (
            ServiceInfo(
                VENDOR,
                (
                    CharacteristicInfo(VENDOR_ALT, WRITE),
                    CharacteristicInfo(VENDOR_WRITE, WNR),
                ),
            ),
        )
        protocol = ProtocolConfig(service_uuid="fff0", write_characteristic_uuid="fff1")

        endpoint = resolve_endpoint(services, protocol)

        assert endpoint.tier is ResolutionTier.EXACT
        assert endpoint.characteristic.uuid == VENDOR_WRITE


class TestServiceTier:
    """Configured service, any writable characteristic."""

    def test_missing_characteristic_falls_back_within_service(self):
        services = (
            _battery(),
            ServiceInfo(
                NUS_SERVICE_UUID,
                (
                    CharacteristicInfo(NUS_TX_CHARACTERISTIC_UUID, NOTIFY),
                    CharacteristicInfo(VENDOR_WRITE, WRITE),
                ),
            ),
        )

        endpoint = resolve_endpoint(services, ProtocolConfig.NUS)

        assert endpoint.tier is ResolutionTier.SERVICE
        assert endpoint.service.uuid == NUS_SERVICE_UUID
        assert endpoint.characteristic.uuid == VENDOR_WRITE

    def test_non_writable_configured_characteristic_skipped(self):
        services = (
            ServiceInfo(
                NUS_SERVICE_UUID,
                (
                    CharacteristicInfo(NUS_RX_CHARACTERISTIC_UUID, READ),
                    CharacteristicInfo(VENDOR_WRITE, WNR),
                ),
            ),
        )

        endpoint = resolve_endpoint(services, ProtocolConfig.NUS)

        assert endpoint.tier is ResolutionTier.SERVICE
        assert endpoint.characteristic.uuid == VENDOR_WRITE

    def test_service_only_protocol(self):
        services = (_battery(), ServiceInfo(VENDOR, (CharacteristicInfo(VENDOR_WRITE, WRITE),)))

        endpoint = resolve_endpoint(services, ProtocolConfig(service_uuid=VENDOR))

        assert endpoint.tier is ResolutionTier.SERVICE
        assert endpoint.characteristic.uuid == VENDOR_WRITE


class TestFallbackTier:
    """First writable characteristic anywhere."""

    def test_service_absent(self):
        services = (
            _battery(),
            ServiceInfo(VENDOR, (CharacteristicInfo(VENDOR_ALT, READ), CharacteristicInfo(VENDOR_WRITE, WRITE))),
        )

        endpoint = resolve_endpoint(services, ProtocolConfig.NUS)

        assert endpoint.tier is ResolutionTier.FALLBACK
        assert endpoint.service.uuid == VENDOR
        assert endpoint.characteristic.uuid == VENDOR_WRITE

    def test_discovery_order_wins(self):
        services = (
            ServiceInfo(VENDOR, (CharacteristicInfo(VENDOR_WRITE, WNR),)),
            ServiceInfo(BATTERY, (CharacteristicInfo(BATTERY_LEVEL, WRITE),)),
        )

        endpoint = resolve_endpoint(services, ProtocolConfig.NUS)

        assert endpoint.characteristic.uuid == VENDOR_WRITE

    def test_wildcard_protocol(self, gatt_services):
        endpoint = resolve_endpoint(gatt_services, ProtocolConfig.WILDCARD)

        assert endpoint.tier is ResolutionTier.FALLBACK
        assert endpoint.characteristic.uuid == NUS_RX_CHARACTERISTIC_UUID

    def test_configured_service_without_writable_characteristic(self):
        services = (
            ServiceInfo(NUS_SERVICE_UUID, (CharacteristicInfo(NUS_TX_CHARACTERISTIC_UUID, NOTIFY),)),
            ServiceInfo(VENDOR, (CharacteristicInfo(VENDOR_WRITE, WRITE),)),
        )

        endpoint = resolve_endpoint(services, ProtocolConfig.NUS)

        assert endpoint.tier is ResolutionTier.FALLBACK
        assert endpoint.service.uuid == VENDOR


class TestNoEndpoint:
    """Nothing writable on the peripheral."""

    def test_only_readable(self):
        assert resolve_endpoint((_battery(),), ProtocolConfig.NUS) is None

    def test_no_services(self):
        assert resolve_endpoint((), ProtocolConfig.WILDCARD) is None

    def test_accepts_generator(self, gatt_services):
        endpoint = resolve_endpoint((svc for svc in gatt_services), ProtocolConfig.NUS)
        assert endpoint is not None
