"""Data models for bletext."""

from .enums import (
    CharacteristicProperties,
    ConnectionState,
    ResolutionTier,
    TextEncoding,
)
from .gatt import CharacteristicInfo, ResolvedEndpoint, ServiceInfo
from .peripheral import ScannedPeripheral
from .protocol_config import ProtocolConfig

__all__ = [
    "CharacteristicInfo",
    "CharacteristicProperties",
    "ConnectionState",
    "ProtocolConfig",
    "ResolutionTier",
    "ResolvedEndpoint",
    "ScannedPeripheral",
    "ServiceInfo",
    "TextEncoding",
]
