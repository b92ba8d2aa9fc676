"""Named, cancellable delayed callbacks bound to a session generation."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None] | None]


class TimerGroup:
    """Owns every delayed action of a session.

    Scheduling a name that is already pending replaces the old timer.
    :meth:`cancel_all` cancels everything and bumps :attr:`generation`;
    a timer that still wakes up afterwards sees a different generation
    and does nothing, so a stale timer can never touch a newer session.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def generation(self) -> int:
        return self._generation

    def is_scheduled(self, name: str) -> bool:
        task = self._tasks.get(name)
        return task is not None and not task.done()

    def schedule(self, name: str, delay: float, callback: TimerCallback) -> None:
        """Run *callback* after *delay* seconds unless cancelled first."""
        self.cancel(name)
        loop = asyncio.get_running_loop()
        self._tasks[name] = loop.create_task(
            self._run(name, self._generation, delay, callback),
            name=f"pyswiott-timer-{name}",
        )

    def cancel(self, name: str) -> None:
        task = self._tasks.pop(name, None)
        if task is not None and task is not _current_task():
            task.cancel()

    def cancel_all(self) -> None:
        self._generation += 1
        tasks = list(self._tasks.values())
        self._tasks.clear()
        current = _current_task()
        for task in tasks:
            if task is not current:
                task.cancel()

    async def _run(self, name: str, generation: int, delay: float, callback: TimerCallback) -> None:
        await asyncio.sleep(delay)
        if generation != self._generation:
            return
        if self._tasks.get(name) is asyncio.current_task():
            del self._tasks[name]
        _logger.debug("Timer %s fired (generation %d)", name, generation)
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("Timer %s callback failed", name)


def _current_task() -> asyncio.Task[object] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
