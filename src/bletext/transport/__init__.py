"""Radio transport and transmission."""

from .adapter import RadioAdapter, ScanFilters
from .bleak_adapter import BleakAdapter
from .pipeline import TransmitResult, WriteFunc, transmit

__all__ = [
    "BleakAdapter",
    "RadioAdapter",
    "ScanFilters",
    "TransmitResult",
    "WriteFunc",
    "transmit",
]
