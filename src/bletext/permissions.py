"""Permission gate consulted before any radio operation."""

from __future__ import annotations

from typing import Protocol


class PermissionGate(Protocol):
    """Answers whether the host has granted scan/connect permissions."""

    def has_required_permissions(self) -> bool:
        ...


class AlwaysGranted:
    """Gate for hosts without a runtime permission model (desktop BlueZ, macOS CLI)."""

    def has_required_permissions(self) -> bool:
        return True


class StaticPermissionGate:
    """Gate whose answer is set by the host after its own permission flow."""

    def __init__(self, granted: bool = False):
        self.granted = granted

    def has_required_permissions(self) -> bool:
        return self.granted
