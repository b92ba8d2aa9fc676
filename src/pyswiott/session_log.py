"""Bounded observability log of protocol traffic."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator

from pyswiott._redact import redact_command
from pyswiott.models.session import LogDirection, LogEntry

_logger = logging.getLogger("pyswiott.session")

_LEVELS: dict[LogDirection, int] = {
    LogDirection.INFO: logging.INFO,
    LogDirection.ERROR: logging.ERROR,
    LogDirection.TX: logging.DEBUG,
    LogDirection.RX: logging.DEBUG,
}


class SessionLog:
    """Append-only ring of :class:`LogEntry`; the oldest entries are evicted.

    Every entry is mirrored to the ``pyswiott.session`` logger with
    secrets redacted.  Nothing in the protocol logic reads this log.
    """

    def __init__(self, capacity: int = 100) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._listeners: list[Callable[[LogEntry], None]] = []

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def append(self, direction: LogDirection, message: str) -> LogEntry:
        entry = LogEntry(direction=direction, message=message)
        self._entries.append(entry)
        _logger.log(_LEVELS[direction], "%s %s", direction.value.upper(), redact_command(message))
        for callback in list(self._listeners):
            try:
                callback(entry)
            except Exception:
                _logger.exception("Session log listener failed")
        return entry

    def info(self, message: str) -> LogEntry:
        return self.append(LogDirection.INFO, message)

    def error(self, message: str) -> LogEntry:
        return self.append(LogDirection.ERROR, message)

    def tx(self, message: str) -> LogEntry:
        return self.append(LogDirection.TX, message)

    def rx(self, message: str) -> LogEntry:
        return self.append(LogDirection.RX, message)

    def clear(self) -> None:
        self._entries.clear()

    def subscribe(self, callback: Callable[[LogEntry], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe
