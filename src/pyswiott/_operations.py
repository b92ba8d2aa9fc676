"""Calibration / reboot state machine.

The device answers both operations (and every setting) with a bare
``OK`` or ``ERROR`` and no correlation id.  What such a line means is
decided here, in one table keyed by the kind of the running operation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pyswiott._at import operation as _operation
from pyswiott._dispatcher import CommandDispatcher
from pyswiott._timers import TimerGroup
from pyswiott.config import TimingProfile
from pyswiott.models.operation import OperationKind, OperationOutcome, OperationState
from pyswiott.session_log import SessionLog
from pyswiott.state.events import OperationSignal, SignalKind

_logger = logging.getLogger(__name__)

_DEADLINE_TIMER = "operation.deadline"
_CLEAR_TIMER = "operation.clear"
_DISCONNECT_TIMER = "operation.disconnect"

_START_COMMANDS: dict[OperationKind, tuple[str, str]] = {
    OperationKind.CALIBRATING: (_operation.CALIBRATE_COMMAND, "Initializing Calibration..."),
    OperationKind.REBOOTING: (_operation.REBOOT_COMMAND, "Rebooting..."),
}


class OperationTracker:
    """Owns the (at most one) long-running device operation.

    ``state`` is ``None`` when idle.  A finished operation keeps its final
    message for a short display window before the tracker returns to idle;
    :attr:`is_active` stays true during that window so polling does not
    resume while the result is still shown.
    """

    def __init__(
        self,
        *,
        timing: TimingProfile,
        timers: TimerGroup,
        dispatcher: CommandDispatcher,
        log: SessionLog,
        on_reboot_confirmed: Callable[[], Awaitable[None] | None],
        on_change: Callable[[], None],
    ) -> None:
        self._timing = timing
        self._timers = timers
        self._dispatcher = dispatcher
        self._log = log
        self._on_reboot_confirmed = on_reboot_confirmed
        self._on_change = on_change
        self._state: OperationState | None = None
        self._notice = ""
        self._ok_handlers: dict[OperationKind | None, Callable[[OperationSignal], None]] = {
            OperationKind.CALIBRATING: self._calibration_succeeded,
            OperationKind.REBOOTING: self._reboot_acknowledged,
            None: self._generic_ok,
        }

    @property
    def state(self) -> OperationState | None:
        return self._state

    @property
    def status_message(self) -> str:
        """Message to show the user, empty when there is nothing to show."""
        if self._state is not None:
            return self._state.message
        return self._notice

    @property
    def is_active(self) -> bool:
        return self._state is not None

    @property
    def running_kind(self) -> OperationKind | None:
        if self._state is None or not self._state.is_running:
            return None
        return self._state.kind

    def start(self, kind: OperationKind) -> bool:
        """Send the operation's command and arm its deadline.

        Returns ``False`` (and sends nothing) if an operation is already
        running.
        """
        if self.running_kind is not None:
            _logger.warning("Ignoring %s request: %s already in progress", kind, self.running_kind)
            return False

        command, message = _START_COMMANDS[kind]
        self._timers.cancel(_CLEAR_TIMER)
        self._begin(kind, message)
        self._dispatcher.send(command)
        return True

    def handle(self, signal: OperationSignal) -> None:
        if signal.kind is SignalKind.PROGRESS:
            self._progress(signal)
        elif signal.kind is SignalKind.OK:
            self._ok_handlers[self.running_kind](signal)
        else:
            self._failed(signal)

    def reset(self) -> None:
        """Drop any operation and notice without waiting for their timers."""
        for name in (_DEADLINE_TIMER, _CLEAR_TIMER, _DISCONNECT_TIMER):
            self._timers.cancel(name)
        changed = self._state is not None or bool(self._notice)
        self._state = None
        self._notice = ""
        if changed:
            self._on_change()

    def _begin(self, kind: OperationKind, message: str) -> None:
        now = asyncio.get_running_loop().time()
        timeout = self._timing.calibration_timeout if kind is OperationKind.CALIBRATING else self._timing.reboot_timeout
        self._state = OperationState(kind=kind, message=message, started_at=now, deadline=now + timeout)
        self._notice = ""
        self._timers.schedule(_DEADLINE_TIMER, timeout, self._expired)
        _logger.debug("%s started, deadline in %.1fs", kind, timeout)
        self._on_change()

    def _progress(self, signal: OperationSignal) -> None:
        message = f"Calibrating: {signal.remaining or '...'}s left..."
        state = self._state
        if state is None:
            # Calibration started outside this session (or before our OK
            # handling cleared it); track it with a fresh deadline.
            self._timers.cancel(_CLEAR_TIMER)
            self._begin(OperationKind.CALIBRATING, message)
            return
        if self.running_kind is not OperationKind.CALIBRATING:
            _logger.debug("Ignoring calibration progress while %s", state.kind)
            return
        self._state = state.model_copy(update={"message": message})
        self._on_change()

    def _calibration_succeeded(self, _signal: OperationSignal) -> None:
        self._finish(OperationOutcome.SUCCEEDED, "Calibration Successful!", self._timing.calibration_success_display)

    def _reboot_acknowledged(self, _signal: OperationSignal) -> None:
        self._finish(OperationOutcome.SUCCEEDED, "Rebooting... Disconnecting", None)
        self._timers.schedule(_DISCONNECT_TIMER, self._timing.reboot_disconnect_delay, self._on_reboot_confirmed)

    def _generic_ok(self, _signal: OperationSignal) -> None:
        # Settings and raw console commands also answer OK; nothing to
        # resolve, only let whatever is displayed expire.
        self._timers.schedule(_CLEAR_TIMER, self._timing.generic_success_display, self._clear)

    def _failed(self, _signal: OperationSignal) -> None:
        if self._state is None:
            self._notice = "Operation Failed"
            self._timers.schedule(_CLEAR_TIMER, self._timing.failure_display, self._clear)
            self._on_change()
            return
        self._finish(OperationOutcome.FAILED, "Operation Failed", self._timing.failure_display)

    def _expired(self) -> None:
        state = self._state
        if state is None or not state.is_running:
            return
        if state.kind is OperationKind.CALIBRATING:
            self._log.error("Calibration timed out")
            message = "Calibration Timed Out"
        else:
            message = "Rebooting Command Sent"
        self._finish(OperationOutcome.TIMED_OUT, message, self._timing.failure_display)

    def _finish(self, outcome: OperationOutcome, message: str, display: float | None) -> None:
        self._timers.cancel(_DEADLINE_TIMER)
        state = self._state
        if state is not None:
            self._state = state.model_copy(update={"message": message, "outcome": outcome})
        _logger.debug("Operation finished: %s (%s)", outcome, message)
        if display is not None:
            self._timers.schedule(_CLEAR_TIMER, display, self._clear)
        self._on_change()

    def _clear(self) -> None:
        self._state = None
        self._notice = ""
        self._on_change()
