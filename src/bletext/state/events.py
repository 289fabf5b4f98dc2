"""
Events are inputs to the link state machine.

Commands come from the client API. Link events come from the radio
adapter and carry the connect attempt they belong to, so callbacks from
an abandoned attempt cannot disturb the current one.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..models.gatt import ServiceInfo
from ..models.peripheral import ScannedPeripheral
from ..models.protocol_config import ProtocolConfig


@dataclass(frozen=True)
class Event:
    """Base class for all link events."""
    pass


# === Commands ===

@dataclass(frozen=True)
class ConnectRequested(Event):
    """Caller wants a link to this peripheral."""
    peripheral: ScannedPeripheral
    protocol: ProtocolConfig


@dataclass(frozen=True)
class DisconnectRequested(Event):
    """Caller wants the link torn down (valid in any phase)."""
    pass


# === Adapter events ===

@dataclass(frozen=True, kw_only=True)
class LinkEvent(Event):
    """Event reported by the radio adapter for one connect attempt."""
    attempt: int = 0


@dataclass(frozen=True, kw_only=True)
class ConnectFailed(LinkEvent):
    """The stack rejected the connection."""
    status: str = "unknown"


@dataclass(frozen=True, kw_only=True)
class LinkUp(LinkEvent):
    """Radio link established."""
    pass


@dataclass(frozen=True, kw_only=True)
class LinkDown(LinkEvent):
    """Radio link lost or closed by the peer."""
    pass


@dataclass(frozen=True, kw_only=True)
class MtuResult(LinkEvent):
    """Outcome of the ATT MTU exchange."""
    mtu: int
    success: bool = True


@dataclass(frozen=True, kw_only=True)
class ServicesDiscovered(LinkEvent):
    """Outcome of GATT service discovery."""
    services: tuple[ServiceInfo, ...] = ()
    success: bool = True
    error: str | None = None


@dataclass(frozen=True, kw_only=True)
class ConnectTimedOut(LinkEvent):
    """The connect attempt did not become ready in time."""
    pass


@dataclass(frozen=True, kw_only=True)
class WriteResult(LinkEvent):
    """Outcome of one text transmission."""
    success: bool
    bytes_sent: int = 0
    chunks_sent: int = 0
    chunk_count: int = 0
