"""Connect-time bootstrap queries and idle telemetry polling."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyswiott._at import lora as _lora
from pyswiott._at import nbiot as _nbiot
from pyswiott._at import radar as _radar
from pyswiott._at import telemetry as _telemetry
from pyswiott._dispatcher import CommandDispatcher
from pyswiott._timers import TimerGroup
from pyswiott.config import TimingProfile

_logger = logging.getLogger(__name__)

_POLL_TIMER = "poll"
_BOOTSTRAP_STATUS_TIMER = "bootstrap.status"
_BOOTSTRAP_RADIO_TIMER = "bootstrap.radio"


class PollScheduler:
    """Issues query batches through the dispatcher.

    *is_eligible* tells whether idle polling may run right now (connected,
    not in demo mode, no operation).  The session calls :meth:`refresh`
    whenever one of those conditions may have changed.
    """

    def __init__(
        self,
        *,
        timing: TimingProfile,
        timers: TimerGroup,
        dispatcher: CommandDispatcher,
        is_eligible: Callable[[], bool],
    ) -> None:
        self._timing = timing
        self._timers = timers
        self._dispatcher = dispatcher
        self._is_eligible = is_eligible

    @property
    def is_polling(self) -> bool:
        return self._timers.is_scheduled(_POLL_TIMER)

    def bootstrap(self) -> None:
        """Schedule the initial status, config, LoRa and NB-IoT reads."""
        self._timers.schedule(_BOOTSTRAP_STATUS_TIMER, self._timing.bootstrap_status_delay, self._bootstrap_status)
        self._timers.schedule(_BOOTSTRAP_RADIO_TIMER, self._timing.bootstrap_radio_delay, self._bootstrap_radio)

    def query_status(self) -> None:
        self._dispatcher.send(_telemetry.QUERY_COMMAND)

    def query_config(self) -> None:
        self._dispatcher.send_batch(_radar.QUERY_COMMANDS)

    def query_lora(self) -> None:
        self._dispatcher.send_batch(_lora.QUERY_COMMANDS)

    def query_nbiot(self) -> None:
        self._dispatcher.send_batch(_nbiot.QUERY_COMMANDS)

    def refresh(self) -> None:
        """Arm the poll timer if eligible, tear it down otherwise."""
        if not self._is_eligible():
            if self.is_polling:
                _logger.debug("Polling suspended")
            self._timers.cancel(_POLL_TIMER)
            return
        if not self.is_polling:
            _logger.debug("Polling every %.1fs", self._timing.poll_interval)
            self._timers.schedule(_POLL_TIMER, self._timing.poll_interval, self._tick)

    def stop(self) -> None:
        for name in (_POLL_TIMER, _BOOTSTRAP_STATUS_TIMER, _BOOTSTRAP_RADIO_TIMER):
            self._timers.cancel(name)

    def _bootstrap_status(self) -> None:
        self.query_status()
        self.query_config()

    def _bootstrap_radio(self) -> None:
        self.query_lora()
        self.query_nbiot()

    def _tick(self) -> None:
        if not self._is_eligible():
            return
        self.query_status()
        self._timers.schedule(_POLL_TIMER, self._timing.poll_interval, self._tick)
