"""BLE link constants."""

from __future__ import annotations

# Nordic UART Service
NUS_SERVICE_UUID = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
NUS_RX_CHARACTERISTIC_UUID = "6e400002-b5a3-f393-e0a9-e50e24dcca9e"  # Central -> peripheral writes
NUS_TX_CHARACTERISTIC_UUID = "6e400003-b5a3-f393-e0a9-e50e24dcca9e"  # Peripheral notifications

# ATT MTU
DEFAULT_MTU = 23  # Protocol floor before any exchange
REQUESTED_MTU = 517  # Largest ATT MTU a central may ask for
ATT_WRITE_OVERHEAD = 3  # Opcode (1) + attribute handle (2)

# Chunking
MIN_CHUNK_SIZE = 20  # DEFAULT_MTU - ATT_WRITE_OVERHEAD

# Framing
LENGTH_HEADER_SIZE = 2
MAX_FRAMED_PAYLOAD = 0xFFFF
