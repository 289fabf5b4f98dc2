"""bletext: send text to BLE peripherals.

Scan, connect, negotiate the ATT MTU, resolve a writable characteristic
and write text in link-sized chunks.
"""

from .client import BleTextClient
from .exceptions import (
    BLEConnectionError,
    BleTextError,
    BLETimeoutError,
    PayloadError,
    ProtocolError,
    ScanError,
)
from .models import (
    CharacteristicInfo,
    CharacteristicProperties,
    ConnectionState,
    ProtocolConfig,
    ResolutionTier,
    ResolvedEndpoint,
    ScannedPeripheral,
    ServiceInfo,
    TextEncoding,
)
from .observable import StateStream, StatusFeed
from .permissions import AlwaysGranted, PermissionGate, StaticPermissionGate
from .protocol import prepare_payload, resolve_endpoint, split_into_chunks
from .registry import ScanRegistry
from .transport import BleakAdapter, RadioAdapter, ScanFilters, TransmitResult, transmit

__version__ = "0.1.0"

__all__ = [
    # Main API
    "BleTextClient",
    # Exceptions
    "BleTextError",
    "BLEConnectionError",
    "BLETimeoutError",
    "PayloadError",
    "ProtocolError",
    "ScanError",
    # Models
    "CharacteristicInfo",
    "CharacteristicProperties",
    "ConnectionState",
    "ProtocolConfig",
    "ResolutionTier",
    "ResolvedEndpoint",
    "ScannedPeripheral",
    "ServiceInfo",
    "TextEncoding",
    # Observables
    "StateStream",
    "StatusFeed",
    "ScanRegistry",
    # Permissions
    "AlwaysGranted",
    "PermissionGate",
    "StaticPermissionGate",
    # Transport
    "BleakAdapter",
    "RadioAdapter",
    "ScanFilters",
    "TransmitResult",
    "transmit",
    # Utilities
    "prepare_payload",
    "resolve_endpoint",
    "split_into_chunks",
]
