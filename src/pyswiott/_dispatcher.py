"""Serialized, rate-limited AT command transmission.

The firmware drops or corrupts commands that arrive less than 350 ms
apart.  Every send in a session (single commands, batches, polls)
therefore goes through one FIFO queue drained by one worker task that
keeps the minimum gap between consecutive writes globally, not per batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from pyswiott._at._common import with_terminator
from pyswiott._redact import redact_command
from pyswiott.exceptions import SwiottTransportError
from pyswiott.session_log import SessionLog

_logger = logging.getLogger(__name__)

Writer = Callable[[bytes], Awaitable[None]]


class CommandDispatcher:
    """Queue AT commands and transmit them no closer than ``spacing`` seconds."""

    def __init__(self, *, spacing: float, log: SessionLog) -> None:
        self._spacing = spacing
        self._log = log
        self._writer: Writer | None = None
        self._demo = False
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._last_sent_at: float | None = None

    @property
    def spacing(self) -> float:
        return self._spacing

    @property
    def is_attached(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        """Number of queued commands not yet transmitted."""
        return self._queue.qsize()

    def attach(self, writer: Writer | None, *, demo: bool = False) -> None:
        """Start transmitting through *writer* (or only logging in demo mode)."""
        self.detach()
        self._writer = writer
        self._demo = demo
        self._worker = asyncio.get_running_loop().create_task(self._run(), name="pyswiott-dispatcher")

    def detach(self) -> None:
        """Stop the worker and drop every queued command."""
        worker = self._worker
        self._worker = None
        self._writer = None
        self._demo = False
        self._last_sent_at = None
        # A fresh queue also releases anyone blocked in drain().
        old_queue = self._queue
        self._queue = asyncio.Queue()
        dropped = 0
        while not old_queue.empty():
            old_queue.get_nowait()
            old_queue.task_done()
            dropped += 1
        if dropped:
            _logger.debug("Dropped %d queued command(s) on detach", dropped)
        if worker is not None and worker is not asyncio.current_task():
            worker.cancel()

    def send(self, command: str) -> None:
        """Queue one command.  Never blocks."""
        if self._worker is None:
            _logger.debug("Not attached, dropping %s", redact_command(command.strip()))
            return
        self._queue.put_nowait(command)

    def send_batch(self, commands: Iterable[str]) -> None:
        """Queue related commands in order; spacing is applied between each."""
        for command in commands:
            self.send(command)

    async def drain(self) -> None:
        """Wait until every command queued so far has been handled."""
        await self._queue.join()

    async def _run(self) -> None:
        queue = self._queue
        loop = asyncio.get_running_loop()
        while True:
            command = await queue.get()
            try:
                if self._last_sent_at is not None:
                    ready_at = self._last_sent_at + self._spacing
                    # Loop until the deadline has really passed; sleep() may wake
                    # within the clock resolution of the target.
                    while loop.time() < ready_at:
                        await asyncio.sleep(ready_at - loop.time())
                try:
                    await self._transmit(command)
                except Exception as exc:
                    # The worker is the only sender; it must outlive any write.
                    _logger.exception("Unexpected failure sending %s", redact_command(command.strip()))
                    self._log.error(f"Send failed: {exc}")
                self._last_sent_at = loop.time()
            finally:
                queue.task_done()

    async def _transmit(self, command: str) -> None:
        line = with_terminator(command)
        text = line.strip()
        if self._demo:
            self._log.tx(text)
            return
        writer = self._writer
        if writer is None:
            return
        try:
            await writer(line.encode("ascii", errors="replace"))
        except SwiottTransportError as exc:
            self._log.error(str(exc))
            _logger.debug("Write of %s failed", redact_command(text), exc_info=True)
            return
        self._log.tx(text)
