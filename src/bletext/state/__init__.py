"""Connection lifecycle state machine."""

from .actions import (
    Action,
    CloseLink,
    CompleteConnect,
    DiscoverServices,
    EmitStatus,
    Log,
    OpenLink,
    RejectConnect,
    RequestMtu,
    StopScan,
)
from .events import (
    ConnectFailed,
    ConnectRequested,
    ConnectTimedOut,
    DisconnectRequested,
    Event,
    LinkDown,
    LinkEvent,
    LinkUp,
    MtuResult,
    ServicesDiscovered,
    WriteResult,
)
from .machine import step
from .state import LinkState

__all__ = [
    "Action",
    "CloseLink",
    "CompleteConnect",
    "ConnectFailed",
    "ConnectRequested",
    "ConnectTimedOut",
    "DisconnectRequested",
    "DiscoverServices",
    "EmitStatus",
    "Event",
    "LinkDown",
    "LinkEvent",
    "LinkState",
    "LinkUp",
    "Log",
    "MtuResult",
    "OpenLink",
    "RejectConnect",
    "RequestMtu",
    "ServicesDiscovered",
    "StopScan",
    "WriteResult",
    "step",
]
