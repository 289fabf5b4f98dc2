"""Main bletext client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import replace
from functools import partial
from typing import Any

from bleak.uuids import normalize_uuid_str

from .const import REQUESTED_MTU
from .exceptions import PayloadError, ScanError
from .models.enums import ConnectionState
from .models.gatt import ResolvedEndpoint
from .models.peripheral import ScannedPeripheral
from .models.protocol_config import ProtocolConfig
from .observable import StateStream, StatusFeed
from .permissions import AlwaysGranted, PermissionGate
from .registry import ScanRegistry
from .state import (
    Action,
    CloseLink,
    CompleteConnect,
    ConnectFailed,
    ConnectRequested,
    ConnectTimedOut,
    DisconnectRequested,
    DiscoverServices,
    EmitStatus,
    Event,
    LinkEvent,
    LinkState,
    Log,
    MtuResult,
    OpenLink,
    RejectConnect,
    RequestMtu,
    ServicesDiscovered,
    StopScan,
    WriteResult,
    step,
)
from .transport.adapter import RadioAdapter, ScanFilters
from .transport.pipeline import transmit

_LOGGER = logging.getLogger(__name__)


class BleTextClient:
    """Scan for, connect to and send text to one BLE peripheral at a time.

    All link state lives in an immutable LinkState that only this client
    replaces, by feeding events through the state machine and executing
    the actions it returns. Adapter callbacks may come from any thread;
    they are moved onto the client's event loop before touching state.

    Usage:
        async with BleTextClient() as client:
            await client.start_scan(name_filter="Even G1_L")
            await asyncio.sleep(5)
            await client.stop_scan()
            peripheral = client.scan_results.value[0]
            if await client.connect(peripheral, ProtocolConfig.NUS):
                await client.send_text("Hello, Even G1!")
    """

    def __init__(
            self,
            adapter: RadioAdapter | None = None,
            permissions: PermissionGate | None = None,
            *,
            connect_timeout: float | None = 30.0,
            requested_mtu: int = REQUESTED_MTU,
            status_buffer: int = 16,
    ):
        """Initialize the client.

        Args:
            adapter: Radio adapter (default: BleakAdapter())
            permissions: Permission gate checked before scanning or connecting
                (default: AlwaysGranted())
            connect_timeout: Seconds connect() waits for a usable endpoint,
                None to wait forever (default: 30)
            requested_mtu: ATT MTU asked for after the link comes up (default: 517)
            status_buffer: Per-subscriber status queue length (default: 16)
        """
        if adapter is None:
            from .transport.bleak_adapter import BleakAdapter
            adapter = BleakAdapter()

        self._adapter = adapter
        self._permissions = permissions if permissions is not None else AlwaysGranted()
        self.connect_timeout = connect_timeout

        self._state = LinkState(requested_mtu=requested_mtu)
        self._registry = ScanRegistry()
        self._scanning = False

        self.connection_state: StateStream[ConnectionState] = StateStream(self._state.phase)
        self.status_messages = StatusFeed(status_buffer)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending_connect: tuple[int, asyncio.Future[bool]] | None = None
        self._link_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._action_tasks: set[asyncio.Task] = set()
        self._send_lock = asyncio.Lock()

    async def __aenter__(self) -> BleTextClient:
        self._bind_loop()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Stop scanning and release the link."""
        await self.close()

    @property
    def scan_results(self) -> StateStream[tuple[ScannedPeripheral, ...]]:
        """Peripherals seen in the current scan, sorted for display."""
        return self._registry.stream

    @property
    def state(self) -> LinkState:
        """Current link state snapshot."""
        return self._state

    @property
    def mtu(self) -> int:
        return self._state.mtu

    @property
    def endpoint(self) -> ResolvedEndpoint | None:
        return self._state.endpoint

    @property
    def protocol(self) -> ProtocolConfig:
        return self._state.protocol

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    def has_required_permissions(self) -> bool:
        """Ask the permission gate whether radio use is allowed."""
        return self._permissions.has_required_permissions()

    async def start_scan(
            self,
            name_filter: str | None = None,
            service_filter: str | None = None,
    ) -> bool:
        """Start a new scan session, clearing previous results.

        Args:
            name_filter: Only report peripherals advertising exactly this name
            service_filter: Only report peripherals advertising this service UUID

        Returns:
            True if scanning started
        """
        if not self._check_permissions():
            return False
        self._bind_loop()

        self._registry.clear()
        filters = ScanFilters(
            name=name_filter.strip() if name_filter and name_filter.strip() else None,
            service_uuid=normalize_uuid_str(service_filter) if service_filter else None,
        )

        try:
            await self._adapter.start_scan(filters, self._on_discovered)
        except ScanError as e:
            _LOGGER.warning("%s", e)
            self._scanning = False
            self.status_messages.emit(str(e))
            return False

        self._scanning = True
        self.status_messages.emit("Scanning...")
        return True

    async def stop_scan(self) -> None:
        """Stop scanning. No-op when no scan is active."""
        if not self._scanning:
            return
        self._scanning = False
        await self._adapter.stop_scan()
        self.status_messages.emit("Scan stopped")

    async def connect(
            self,
            peripheral: ScannedPeripheral,
            protocol: ProtocolConfig = ProtocolConfig.NUS,
    ) -> bool:
        """Connect and resolve a write endpoint.

        Completes once an endpoint is resolved (True) or any failure path
        is hit (False): stack rejection, link loss, discovery failure, no
        writable characteristic, timeout or an explicit disconnect().
        Refused (False) while another connection is in progress or open.

        Args:
            peripheral: Peripheral from scan_results
            protocol: Framing and target endpoint (default: Nordic UART)

        Returns:
            True if the client is ready to send
        """
        if not self._check_permissions():
            return False
        loop = self._bind_loop()
        await self._drain_actions()

        state, actions = step(self._state, ConnectRequested(peripheral, protocol))
        for action in actions:
            if isinstance(action, RejectConnect):
                _LOGGER.warning("Connect to %s refused: %s", peripheral.address, action.reason)
                self.status_messages.emit(action.reason)
                return False

        future: asyncio.Future[bool] = loop.create_future()
        attempt = state.attempt
        pending = (attempt, future)
        self._pending_connect = pending

        try:
            await self._run(state, actions)
            if self.connect_timeout is None:
                return await future
            return await asyncio.wait_for(asyncio.shield(future), self.connect_timeout)
        except asyncio.TimeoutError:
            _LOGGER.warning("Connect to %s timed out after %ss", peripheral.address, self.connect_timeout)
            await self._process(ConnectTimedOut(attempt=attempt))
            return future.result() if future.done() else False
        except asyncio.CancelledError:
            await self.disconnect()
            raise
        finally:
            if self._pending_connect is pending:
                self._pending_connect = None

    async def disconnect(self) -> None:
        """Drop the link from any state. Idempotent."""
        await self._drain_actions()
        await self._process(DisconnectRequested())

    async def send_text(self, text: str) -> bool:
        """Send text to the resolved endpoint.

        Returns after every chunk has been written or the first one is
        rejected. Concurrent calls are serialized.

        Returns:
            True if every chunk was accepted; False if not ready, the text
            cannot be framed, or a write was rejected
        """
        async with self._send_lock:
            state = self._state
            if not state.is_ready or state.endpoint is None:
                _LOGGER.debug("send_text called without a resolved endpoint")
                return False

            try:
                result = await transmit(
                    text,
                    state.protocol,
                    state.mtu,
                    state.endpoint,
                    self._adapter.write,
                )
            except PayloadError as e:
                _LOGGER.warning("Cannot send text: %s", e)
                self.status_messages.emit(str(e))
                return False

            await self._process(
                WriteResult(
                    attempt=state.attempt,
                    success=result.success,
                    bytes_sent=result.total_bytes,
                    chunks_sent=result.chunks_sent,
                    chunk_count=result.chunk_count,
                )
            )
            return result.success

    async def close(self) -> None:
        """Stop scanning, disconnect and cancel background work."""
        await self.stop_scan()
        await self.disconnect()
        tasks = [task for task in self._tasks if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)

    def _check_permissions(self) -> bool:
        if self.has_required_permissions():
            return True
        _LOGGER.warning("Bluetooth permissions not granted")
        self.status_messages.emit("Bluetooth permissions required")
        return False

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise RuntimeError("BleTextClient is bound to a different event loop")
        return loop

    def _call_on_loop(self, func: Callable[..., Any], *args: Any) -> None:
        """Run func on the client's loop, hopping threads if needed."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if self._loop is None or running is self._loop:
            func(*args)
        else:
            self._loop.call_soon_threadsafe(func, *args)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            _LOGGER.error("Background task failed", exc_info=task.exception())

    # --- Event intake ---

    def _on_discovered(self, peripheral: ScannedPeripheral) -> None:
        self._call_on_loop(self._registry.add, peripheral)

    def _on_link_event(self, attempt: int, event: LinkEvent) -> None:
        self._call_on_loop(self._dispatch, replace(event, attempt=attempt))

    def _dispatch(self, event: Event) -> None:
        """Apply an adapter event now and run its actions in the background."""
        state, actions = step(self._state, event)
        self._commit(state)
        if actions:
            task = self._spawn(self._execute_all(actions))
            self._action_tasks.add(task)
            task.add_done_callback(self._action_tasks.discard)

    async def _drain_actions(self) -> None:
        """Wait until actions of earlier adapter events have run.

        Commands step from the state those actions leave behind, so a
        teardown queued for one attempt never lands on the next.
        """
        current = asyncio.current_task()
        while True:
            pending = [task for task in self._action_tasks if task is not current]
            if not pending:
                return
            await asyncio.wait(pending)

    async def _process(self, event: Event) -> None:
        """Apply a command event and wait for its actions."""
        state, actions = step(self._state, event)
        await self._run(state, actions)

    async def _run(self, state: LinkState, actions: list[Action]) -> None:
        self._commit(state)
        await self._execute_all(actions)

    def _commit(self, state: LinkState) -> None:
        self._state = state
        self.connection_state.publish(state.phase)

    # --- Action execution ---

    async def _execute_all(self, actions: list[Action]) -> None:
        for action in actions:
            await self._execute(action)

    async def _execute(self, action: Action) -> None:
        if isinstance(action, EmitStatus):
            self.status_messages.emit(action.message)
        elif isinstance(action, Log):
            _LOGGER.log(logging.getLevelName(action.level.upper()), action.message)
        elif isinstance(action, CompleteConnect):
            pending = self._pending_connect
            if pending is not None and pending[0] == action.attempt and not pending[1].done():
                pending[1].set_result(action.success)
        elif isinstance(action, StopScan):
            await self.stop_scan()
        elif isinstance(action, OpenLink):
            self._link_task = self._spawn(self._open_link(action.peripheral, action.attempt))
        elif isinstance(action, DiscoverServices):
            self._spawn(self._discover_services(action.attempt))
        elif isinstance(action, RequestMtu):
            self._spawn(self._request_mtu(action.mtu, action.attempt))
        elif isinstance(action, CloseLink):
            await self._close_link()
        else:
            raise TypeError(f"Unhandled action: {action!r}")

    async def _open_link(self, peripheral: ScannedPeripheral, attempt: int) -> None:
        try:
            await self._adapter.connect(peripheral, partial(self._on_link_event, attempt))
        except Exception as e:
            _LOGGER.exception("Adapter connect raised")
            self._dispatch(ConnectFailed(attempt=attempt, status=str(e) or type(e).__name__))

    async def _request_mtu(self, mtu: int, attempt: int) -> None:
        try:
            result = await self._adapter.request_mtu(mtu)
        except Exception as e:
            _LOGGER.warning("MTU request failed: %s", e)
            result = MtuResult(mtu=self._state.mtu, success=False)
        self._dispatch(replace(result, attempt=attempt))

    async def _discover_services(self, attempt: int) -> None:
        try:
            result = await self._adapter.discover_services()
        except Exception as e:
            result = ServicesDiscovered(success=False, error=str(e))
        self._dispatch(replace(result, attempt=attempt))

    async def _close_link(self) -> None:
        """Cancel any in-flight open, then release the adapter's link."""
        task, self._link_task = self._link_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            await asyncio.wait({task})
        await self._adapter.disconnect()
