"""Write endpoint resolution over a discovered GATT tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from ..models.enums import ResolutionTier
from ..models.gatt import CharacteristicInfo, ResolvedEndpoint, ServiceInfo

if TYPE_CHECKING:
    from ..models.protocol_config import ProtocolConfig

_LOGGER = logging.getLogger(__name__)


def _find_service(services: tuple[ServiceInfo, ...], uuid: str) -> ServiceInfo | None:
    return next((svc for svc in services if svc.uuid == uuid), None)


def _first_writable(service: ServiceInfo) -> CharacteristicInfo | None:
    return next((char for char in service.characteristics if char.is_writable), None)


def resolve_endpoint(
        services: Iterable[ServiceInfo],
        protocol: ProtocolConfig,
) -> ResolvedEndpoint | None:
    """Pick the characteristic to write text chunks to.

    Rules, first match wins:
    1. EXACT: configured service and characteristic, if writable
    2. SERVICE: configured service, first writable characteristic
    3. FALLBACK: first writable characteristic of any service, in
       discovery order

    Args:
        services: Discovered services in discovery order
        protocol: Target service/characteristic UUIDs (either may be None)

    Returns:
        The resolved endpoint, or None if nothing on the peripheral is writable
    """
    services = tuple(services)
    target = _find_service(services, protocol.service_uuid) if protocol.service_uuid else None

    if target is not None and protocol.write_characteristic_uuid is not None:
        for char in target.characteristics:
            if char.uuid == protocol.write_characteristic_uuid and char.is_writable:
                return ResolvedEndpoint(target, char, ResolutionTier.EXACT)
        _LOGGER.debug(
            "Characteristic %s not writable or missing in service %s",
            protocol.write_characteristic_uuid,
            target.uuid,
        )

    if target is not None:
        char = _first_writable(target)
        if char is not None:
            return ResolvedEndpoint(target, char, ResolutionTier.SERVICE)

    for svc in services:
        char = _first_writable(svc)
        if char is not None:
            return ResolvedEndpoint(svc, char, ResolutionTier.FALLBACK)

    return None
