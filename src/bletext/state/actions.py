"""
Actions are outputs from the link state machine.

The client executes them against the radio adapter, the pending connect
future and the status feed.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..models.peripheral import ScannedPeripheral


@dataclass(frozen=True)
class Action:
    """Base class for all link actions."""
    pass


# === Radio actions ===

@dataclass(frozen=True)
class StopScan(Action):
    """Stop any active scan before using the radio for a connection."""
    pass


@dataclass(frozen=True)
class OpenLink(Action):
    """Start opening a link to a peripheral."""
    peripheral: ScannedPeripheral
    attempt: int


@dataclass(frozen=True)
class RequestMtu(Action):
    """Ask the stack for a larger ATT MTU."""
    mtu: int
    attempt: int


@dataclass(frozen=True)
class DiscoverServices(Action):
    """Fetch the peripheral's GATT tree."""
    attempt: int


@dataclass(frozen=True)
class CloseLink(Action):
    """Release the link and any in-flight open."""
    pass


# === Caller notifications ===

@dataclass(frozen=True)
class CompleteConnect(Action):
    """Resolve the pending connect() call of one attempt (first completion wins)."""
    success: bool
    attempt: int


@dataclass(frozen=True)
class RejectConnect(Action):
    """Refuse a connect() call without touching the current link."""
    reason: str


@dataclass(frozen=True)
class EmitStatus(Action):
    """Publish a human-readable status message."""
    message: str


# === Logging ===

@dataclass(frozen=True)
class Log(Action):
    """Emit a log message."""
    level: str  # "debug", "info", "warning", "error"
    message: str
