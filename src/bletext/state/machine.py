"""
Link state machine.

The connection lifecycle implemented as a pure function:
    step(state, event) -> (new_state, actions)

No I/O and no clock. The client executes the returned actions.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable

from ..const import DEFAULT_MTU
from ..models.enums import ConnectionState
from ..protocol.resolver import resolve_endpoint
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
from .state import LinkState

StepResult = tuple[LinkState, list[Action]]

DISCONNECTED = ConnectionState.DISCONNECTED
CONNECTING = ConnectionState.CONNECTING
CONNECTED = ConnectionState.CONNECTED


def step(state: LinkState, event: Event) -> StepResult:
    """Process an event and return (new_state, actions).

    Link events from an earlier connect attempt are dropped. Events with
    no handler for the current phase leave the state untouched.
    """
    if isinstance(event, LinkEvent) and event.attempt != state.attempt:
        return (state, [Log("debug", f"Ignoring stale {type(event).__name__} from attempt {event.attempt}")])

    handler = _HANDLERS.get((state.phase, type(event)))
    if handler is None:
        handler = _GLOBAL_HANDLERS.get(type(event))
    if handler is None:
        return (state, [])

    return handler(state, event)


def _torn_down(state: LinkState, **changes) -> LinkState:
    """Disconnected state with per-connection fields reset."""
    return replace(state, phase=DISCONNECTED, endpoint=None, mtu=DEFAULT_MTU, **changes)


def _fail(state: LinkState, message: str) -> StepResult:
    """Tear the link down and fail the pending connect."""
    return (
        _torn_down(state, last_error=message),
        [
            EmitStatus(message),
            CloseLink(),
            CompleteConnect(False, state.attempt),
        ],
    )


# =============================================================================
# Phase-specific handlers
# =============================================================================

def _handle_disconnected_connect(state: LinkState, event: ConnectRequested) -> StepResult:
    """DISCONNECTED + ConnectRequested -> start opening the link."""
    attempt = state.attempt + 1
    return (
        replace(
            state,
            phase=CONNECTING,
            attempt=attempt,
            peripheral=event.peripheral,
            protocol=event.protocol,
            mtu=DEFAULT_MTU,
            endpoint=None,
            last_error=None,
        ),
        [
            StopScan(),
            EmitStatus(f"Connecting to {event.peripheral.address}..."),
            OpenLink(event.peripheral, attempt),
        ],
    )


def _handle_busy_connect(state: LinkState, event: ConnectRequested) -> StepResult:
    """CONNECTING/CONNECTED + ConnectRequested -> refuse, keep current link."""
    current = state.peripheral.address if state.peripheral else "?"
    return (
        state,
        [RejectConnect(f"Already {state.phase.value} to {current}; disconnect first")],
    )


def _handle_connecting_failed(state: LinkState, event: ConnectFailed) -> StepResult:
    """CONNECTING + ConnectFailed -> back to DISCONNECTED."""
    return _fail(state, f"GATT error: {event.status}")


def _handle_connecting_link_up(state: LinkState, event: LinkUp) -> StepResult:
    """CONNECTING + LinkUp -> CONNECTED, then discover services and negotiate MTU.

    CONNECTED tracks the radio link; the endpoint is resolved later.
    """
    return (
        replace(state, phase=CONNECTED),
        [
            EmitStatus("Connected, discovering services..."),
            DiscoverServices(state.attempt),
            RequestMtu(state.requested_mtu, state.attempt),
        ],
    )


def _handle_disconnected_link_up(state: LinkState, event: LinkUp) -> StepResult:
    """DISCONNECTED + LinkUp -> the attempt was abandoned; release the link."""
    return (
        state,
        [
            Log("info", "Link came up after connect was abandoned; closing it"),
            CloseLink(),
        ],
    )


def _handle_connected_mtu(state: LinkState, event: MtuResult) -> StepResult:
    """CONNECTED + MtuResult -> adopt the MTU, or keep the default on failure."""
    if not event.success:
        return (state, [Log("warning", f"MTU negotiation failed, keeping {state.mtu}")])
    return (
        replace(state, mtu=event.mtu),
        [EmitStatus(f"MTU negotiated: {event.mtu}")],
    )


def _handle_connected_services(state: LinkState, event: ServicesDiscovered) -> StepResult:
    """CONNECTED + ServicesDiscovered -> resolve the write endpoint or tear down."""
    if not event.success:
        return _fail(state, f"Service discovery failed: {event.error or 'unknown'}")

    if state.endpoint is not None:
        return (state, [Log("debug", "Endpoint already resolved; ignoring repeated discovery")])

    endpoint = resolve_endpoint(event.services, state.protocol)
    if endpoint is None:
        return _fail(state, "Write characteristic not found")

    return (
        replace(state, endpoint=endpoint),
        [
            Log(
                "debug",
                f"Resolved {endpoint.characteristic.uuid} in {endpoint.service.uuid} "
                f"via {endpoint.tier.name}",
            ),
            EmitStatus(f"Ready to send via {endpoint.characteristic.uuid}"),
            CompleteConnect(True, state.attempt),
        ],
    )


def _handle_link_down(state: LinkState, event: LinkDown) -> StepResult:
    """CONNECTING/CONNECTED + LinkDown -> DISCONNECTED."""
    return (
        _torn_down(state),
        [
            EmitStatus("Disconnected"),
            CloseLink(),
            CompleteConnect(False, state.attempt),
        ],
    )


def _handle_timeout(state: LinkState, event: ConnectTimedOut) -> StepResult:
    """CONNECTING, or CONNECTED without endpoint, + ConnectTimedOut -> give up."""
    if state.endpoint is not None:
        return (state, [])
    return _fail(state, "Connection timed out")


def _handle_connected_write(state: LinkState, event: WriteResult) -> StepResult:
    """CONNECTED + WriteResult -> report the transmission outcome."""
    if event.success:
        return (state, [EmitStatus(f"Sent {event.bytes_sent} bytes in {event.chunk_count} chunks")])
    return (
        replace(state, last_error="write rejected"),
        [EmitStatus(f"Write failed at chunk {event.chunks_sent + 1}/{event.chunk_count}")],
    )


# =============================================================================
# Global handlers
# =============================================================================

def _handle_disconnect(state: LinkState, event: DisconnectRequested) -> StepResult:
    """Any phase + DisconnectRequested -> DISCONNECTED (idempotent)."""
    if state.phase is DISCONNECTED:
        return (_torn_down(state), [CloseLink(), CompleteConnect(False, state.attempt)])
    return (
        _torn_down(state),
        [
            CloseLink(),
            CompleteConnect(False, state.attempt),
            EmitStatus("Disconnected"),
        ],
    )


_HANDLERS: dict[tuple[ConnectionState, type], Callable[..., StepResult]] = {
    (DISCONNECTED, ConnectRequested): _handle_disconnected_connect,
    (CONNECTING, ConnectRequested): _handle_busy_connect,
    (CONNECTED, ConnectRequested): _handle_busy_connect,
    (CONNECTING, ConnectFailed): _handle_connecting_failed,
    (CONNECTING, LinkUp): _handle_connecting_link_up,
    (DISCONNECTED, LinkUp): _handle_disconnected_link_up,
    (CONNECTED, MtuResult): _handle_connected_mtu,
    (CONNECTED, ServicesDiscovered): _handle_connected_services,
    (CONNECTING, LinkDown): _handle_link_down,
    (CONNECTED, LinkDown): _handle_link_down,
    (CONNECTING, ConnectTimedOut): _handle_timeout,
    (CONNECTED, ConnectTimedOut): _handle_timeout,
    (CONNECTED, WriteResult): _handle_connected_write,
}

_GLOBAL_HANDLERS: dict[type, Callable[..., StepResult]] = {
    DisconnectRequested: _handle_disconnect,
}
