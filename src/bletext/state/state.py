"""
Link state representation.

LinkState is immutable (frozen dataclass) so every transition produces a
new value and the client can publish snapshots without copying.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..const import DEFAULT_MTU, REQUESTED_MTU
from ..models.enums import ConnectionState
from ..models.gatt import ResolvedEndpoint
from ..models.peripheral import ScannedPeripheral
from ..models.protocol_config import ProtocolConfig


@dataclass(frozen=True)
class LinkState:
    """Immutable link state owned by one client."""

    phase: ConnectionState = ConnectionState.DISCONNECTED

    # Incremented on every accepted connect; tags adapter events
    attempt: int = 0

    peripheral: ScannedPeripheral | None = None
    protocol: ProtocolConfig = ProtocolConfig.NUS

    # Negotiated ATT MTU, reset on connect and disconnect
    mtu: int = DEFAULT_MTU
    requested_mtu: int = REQUESTED_MTU

    # Write target, set only after service discovery succeeds
    endpoint: ResolvedEndpoint | None = None

    last_error: str | None = None

    @property
    def is_ready(self) -> bool:
        """True once text can be sent."""
        return self.phase is ConnectionState.CONNECTED and self.endpoint is not None
