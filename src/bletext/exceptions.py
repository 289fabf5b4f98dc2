"""Exceptions raised by the bletext package."""

from __future__ import annotations


class BleTextError(Exception):
    """Base error for bletext."""


class ScanError(BleTextError):
    """Raised when the radio refuses to start a scan."""


class BLEConnectionError(BleTextError):
    """Raised when a BLE link cannot be opened."""


class BLETimeoutError(BleTextError):
    """Raised when opening a BLE link times out."""


class ProtocolError(BleTextError):
    """Raised when outgoing data violates the link protocol."""


class PayloadError(ProtocolError):
    """Raised when text cannot be turned into a frameable payload."""
