"""High-level async session controller for a SWIOTT parking sensor."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyswiott._client import settings as _settings
from pyswiott._dispatcher import CommandDispatcher
from pyswiott._framing import LineFramer
from pyswiott._operations import OperationTracker
from pyswiott._scheduler import PollScheduler
from pyswiott._timers import TimerGroup
from pyswiott._transport import BleTransport, Transport, TransportSession
from pyswiott.config import SwiottConfig
from pyswiott.exceptions import SwiottConnectError, SwiottNotConnectedError, SwiottTransportError
from pyswiott.ingestion.decode import decode_line
from pyswiott.models.device_config import DeviceConfig, MountOrientation
from pyswiott.models.lora import LoRaConfig, LoRaRegion
from pyswiott.models.nbiot import NbIotConfig
from pyswiott.models.operation import OperationKind, OperationState
from pyswiott.models.session import ConnectionState, SessionView
from pyswiott.models.telemetry import SensorTelemetry
from pyswiott.session_log import SessionLog
from pyswiott.state.events import FrameRejected, OperationSignal, StateSection, StateUpdate
from pyswiott.state.store import StateStore

_logger = logging.getLogger(__name__)

_FLUSH_TIMER = "framer.flush"


class SwiottClient:
    """Async session with one sensor.

    Usage::

        async with SwiottClient(config) as client:
            await client.connect()
            client.calibrate()

    All methods must be called from the event loop the session runs on.
    Command methods never block: commands are queued and transmitted at
    most one every ``config.timing.command_spacing`` seconds.
    """

    def __init__(
        self,
        config: SwiottConfig | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or SwiottConfig()
        self._transport = transport
        timing = self._config.timing

        self._log = SessionLog(self._config.log_capacity)
        self._store = StateStore()
        self._framer = LineFramer()
        self._timers = TimerGroup()
        self._dispatcher = CommandDispatcher(spacing=timing.command_spacing, log=self._log)
        self._operations = OperationTracker(
            timing=timing,
            timers=self._timers,
            dispatcher=self._dispatcher,
            log=self._log,
            on_reboot_confirmed=self._disconnect_after_reboot,
            on_change=self._operation_changed,
        )
        self._scheduler = PollScheduler(
            timing=timing,
            timers=self._timers,
            dispatcher=self._dispatcher,
            is_eligible=self._polling_eligible,
        )

        self._session: TransportSession | None = None
        self._connection_state = ConnectionState.DISCONNECTED
        self._demo = False
        self._view = SessionView.STATUS
        self._listeners: list[Callable[[], None]] = []
        self._store.subscribe(self._store_changed)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SwiottClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._connection_state is not ConnectionState.DISCONNECTED:
            await self.disconnect()

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SwiottConfig:
        return self._config

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def log(self) -> SessionLog:
        return self._log

    @property
    def telemetry(self) -> SensorTelemetry:
        return self._store.telemetry

    @property
    def device_config(self) -> DeviceConfig:
        return self._store.device_config

    @property
    def lora(self) -> LoRaConfig:
        return self._store.lora

    @property
    def nbiot(self) -> NbIotConfig:
        return self._store.nbiot

    @property
    def operation(self) -> OperationState | None:
        return self._operations.state

    @property
    def status_message(self) -> str:
        return self._operations.status_message

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    @property
    def is_connected(self) -> bool:
        return self._connection_state is ConnectionState.CONNECTED

    @property
    def is_demo(self) -> bool:
        return self._demo

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_polling

    @property
    def view(self) -> SessionView:
        return self._view

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call *callback* after every state, operation or connection change.

        Returns a function that removes the subscription.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Connect, unlock the command channel and start the bootstrap reads.

        Raises
        ------
        SwiottConnectError
            Discovery, GATT connection or notify subscription failed.
        """
        if self._connection_state is not ConnectionState.DISCONNECTED:
            _logger.warning("connect() ignored: session is %s", self._connection_state)
            return
        if self._config.demo_mode:
            await self.start_demo()
            return

        self._set_connection_state(ConnectionState.CONNECTING)
        self._log.info("Connecting...")
        transport = self._transport or BleTransport(self._config)
        try:
            session = await transport.connect(
                on_data=self._on_data,
                on_disconnected=self._on_transport_disconnected,
            )
        except SwiottTransportError as exc:
            self._log.error(str(exc))
            self._set_connection_state(ConnectionState.DISCONNECTED)
            raise

        if self._connection_state is not ConnectionState.CONNECTING:
            # Lost the link (or disconnect() was called) while connecting.
            await self._close_session(session)
            raise SwiottConnectError("Disconnected while connecting", operation="connect")
        self._session = session

        if self._config.handshake:
            try:
                await session.send(self._config.handshake)
            except SwiottTransportError as exc:
                self._log.error(f"Handshake failed: {exc}")
        if self._session is not session:
            raise SwiottConnectError("Disconnected during handshake", operation="handshake")

        self._dispatcher.attach(session.send)
        self._set_connection_state(ConnectionState.CONNECTED)
        self._log.info("Connected")
        self._scheduler.bootstrap()
        self._scheduler.refresh()

    async def start_demo(self) -> None:
        """Enter a simulated session: commands are logged, never sent."""
        if self._connection_state is not ConnectionState.DISCONNECTED:
            _logger.warning("start_demo() ignored: session is %s", self._connection_state)
            return
        self._demo = True
        self._dispatcher.attach(None, demo=True)
        self._set_connection_state(ConnectionState.CONNECTED)
        self._log.info("Demo mode started")
        self._scheduler.refresh()

    async def disconnect(self) -> None:
        """Tear the session down and close the transport."""
        session = self._session
        self._teardown("Disconnected")
        if session is not None:
            await self._close_session(session)

    async def drain(self) -> None:
        """Wait until every queued command has been transmitted."""
        await self._dispatcher.drain()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def calibrate(self) -> bool:
        """Start a radar calibration.  ``False`` if an operation is already running."""
        self._require_connected()
        return self._operations.start(OperationKind.CALIBRATING)

    def reboot(self) -> bool:
        """Reboot the sensor.  The session disconnects once the device acknowledges."""
        self._require_connected()
        return self._operations.start(OperationKind.REBOOTING)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_status(self) -> None:
        self._require_connected()
        self._scheduler.query_status()

    def query_config(self) -> None:
        self._require_connected()
        self._scheduler.query_config()

    def query_lora(self) -> None:
        self._require_connected()
        self._scheduler.query_lora()

    def query_nbiot(self) -> None:
        self._require_connected()
        self._scheduler.query_nbiot()

    def set_view(self, view: SessionView | str) -> None:
        """Record the front end's current screen; CONFIG re-reads radar settings."""
        self._view = SessionView(view)
        if self._view is SessionView.CONFIG and self.is_connected:
            self._scheduler.query_config()
        self._notify()

    def send_command(self, command: str) -> None:
        """Queue a free-form console command."""
        text = command.strip()
        if not text:
            raise ValueError("command must not be empty")
        self._require_connected()
        self._dispatcher.send(text)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_threshold(self, threshold_cm: int) -> None:
        _settings.set_threshold(self, threshold_cm)

    def set_orientation(self, orientation: MountOrientation | str) -> None:
        _settings.set_orientation(self, orientation)

    def set_radar_enabled(self, enabled: bool) -> None:
        _settings.set_radar_enabled(self, enabled)

    def set_lora_key(self, field: str, value: str) -> None:
        """Set ``dev_eui``, ``app_eui``, ``dev_addr``, ``app_skey`` or ``nwk_skey``."""
        _settings.set_lora_key(self, field, value)

    def set_region(self, region: LoRaRegion | str) -> None:
        _settings.set_region(self, region)

    def set_apn(self, apn: str) -> None:
        _settings.set_apn(self, apn)

    def set_mqtt(
        self,
        host: str,
        port: int | str,
        user: str,
        password: str,
        *,
        clean: str = "0",
        keepalive: int | str = "120",
        ssl: str = "0",
    ) -> None:
        _settings.set_mqtt(
            self,
            host=host,
            port=port,
            user=user,
            password=password,
            clean=clean,
            keepalive=keepalive,
            ssl=ssl,
        )

    def set_nb_connected(self, enabled: bool) -> None:
        _settings.set_nb_connected(self, enabled)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_connected(self) -> None:
        if self._connection_state is not ConnectionState.CONNECTED:
            raise SwiottNotConnectedError("Sensor is not connected")

    def _polling_eligible(self) -> bool:
        return (
            self._connection_state is ConnectionState.CONNECTED
            and not self._demo
            and not self._operations.is_active
        )

    def _set_connection_state(self, state: ConnectionState) -> None:
        if state is self._connection_state:
            return
        _logger.debug("Connection state %s -> %s", self._connection_state, state)
        self._connection_state = state
        self._notify()

    def _teardown(self, reason: str) -> None:
        """Shared cleanup for user and transport initiated disconnects."""
        if self._connection_state is ConnectionState.DISCONNECTED:
            return
        _logger.debug("Tearing down session: %s", reason)
        # Mark disconnected first so nothing below re-arms polling.
        self._connection_state = ConnectionState.DISCONNECTED
        self._session = None
        self._demo = False
        self._scheduler.stop()
        self._timers.cancel_all()
        self._dispatcher.detach()
        self._framer.reset()
        self._operations.reset()
        self._store.reset(StateSection.TELEMETRY)
        self._scheduler.refresh()
        self._log.info(reason)
        self._notify()

    async def _close_session(self, session: TransportSession) -> None:
        try:
            await session.disconnect()
        except SwiottTransportError as exc:
            self._log.error(str(exc))

    def _on_transport_disconnected(self) -> None:
        if self._connection_state is ConnectionState.DISCONNECTED:
            return
        _logger.info("Transport reported disconnect")
        self._teardown("Device disconnected")

    async def _disconnect_after_reboot(self) -> None:
        await self.disconnect()

    def _on_data(self, chunk: bytes) -> None:
        if self._connection_state is ConnectionState.DISCONNECTED:
            _logger.debug("Dropping %d bytes received while disconnected", len(chunk))
            return
        for line in self._framer.feed(chunk):
            self._handle_line(line)
        if self._framer.pending:
            self._timers.schedule(_FLUSH_TIMER, self._config.timing.line_flush_delay, self._flush_partial_line)
        else:
            self._timers.cancel(_FLUSH_TIMER)

    def _flush_partial_line(self) -> None:
        for line in self._framer.flush():
            self._handle_line(line)

    def _handle_line(self, line: str) -> None:
        self._log.rx(line)
        result = decode_line(line)
        if result is None:
            return
        if isinstance(result, StateUpdate):
            self._store.apply(result)
        elif isinstance(result, OperationSignal):
            self._operations.handle(result)
        elif isinstance(result, FrameRejected):
            self._log.error(f"{result.tag} parse error: {result.reason}")

    def _operation_changed(self) -> None:
        self._scheduler.refresh()
        self._notify()

    def _store_changed(self, _section: StateSection) -> None:
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                _logger.exception("Session listener failed")
