"""Snapshot of a peripheral's discovered GATT tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import CharacteristicProperties, ResolutionTier


@dataclass(frozen=True)
class CharacteristicInfo:
    """One discovered characteristic.

    Attributes:
        uuid: Normalized 128-bit UUID string
        properties: GATT property flags
        handle: Attribute handle, if the backend exposes it
        ref: Backend object used by the adapter to address the characteristic
    """
    uuid: str
    properties: CharacteristicProperties = CharacteristicProperties.NONE
    handle: int | None = None
    ref: Any = field(default=None, compare=False, repr=False)

    @property
    def is_writable(self) -> bool:
        return self.properties.is_writable


@dataclass(frozen=True)
class ServiceInfo:
    """One discovered service and its characteristics, in discovery order."""
    uuid: str
    characteristics: tuple[CharacteristicInfo, ...] = ()


@dataclass(frozen=True)
class ResolvedEndpoint:
    """The characteristic chosen for writes and the service that owns it.

    Only valid while the link it was discovered on stays open.
    """
    service: ServiceInfo
    characteristic: CharacteristicInfo
    tier: ResolutionTier

    def write_without_response(self, prefer: bool) -> bool:
        """Pick the ATT write mode for this endpoint.

        Returns the preferred mode when the characteristic supports it,
        otherwise the mode it does support.
        """
        props = self.characteristic.properties
        supports_command = bool(props & CharacteristicProperties.WRITE_WITHOUT_RESPONSE)
        supports_request = bool(props & CharacteristicProperties.WRITE)
        if prefer:
            return supports_command or not supports_request
        return not supports_request and supports_command
