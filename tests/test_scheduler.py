from __future__ import annotations

import asyncio
from collections.abc import Iterable

import pytest

from pyswiott._scheduler import PollScheduler
from pyswiott._timers import TimerGroup
from pyswiott.config import TimingProfile


class _FakeDispatcher:
    def __init__(self) -> None:
        self.commands: list[str] = []

    def send(self, command: str) -> None:
        self.commands.append(command)

    def send_batch(self, commands: Iterable[str]) -> None:
        self.commands.extend(commands)


class _Eligibility:
    def __init__(self, value: bool) -> None:
        self.value = value

    def __call__(self) -> bool:
        return self.value


def _scheduler(eligible: _Eligibility, **timing: float) -> tuple[PollScheduler, _FakeDispatcher, TimerGroup]:
    dispatcher = _FakeDispatcher()
    timers = TimerGroup()
    scheduler = PollScheduler(
        timing=TimingProfile(**timing),
        timers=timers,
        dispatcher=dispatcher,  # type: ignore[arg-type]
        is_eligible=eligible,
    )
    return scheduler, dispatcher, timers


@pytest.mark.asyncio
async def test_bootstrap_issues_batches_in_order() -> None:
    scheduler, dispatcher, timers = _scheduler(
        _Eligibility(False), bootstrap_status_delay=0.05, bootstrap_radio_delay=0.15
    )

    scheduler.bootstrap()
    await asyncio.sleep(0.1)
    assert dispatcher.commands == ["AT+SWQUERY?", "AT+SWRDTARTH?", "AT+SWRDPARKTYPE?", "AT+SWRDENABLE?"]

    await asyncio.sleep(0.1)
    assert dispatcher.commands[4:] == [
        "AT+CDEVEUI?",
        "AT+CAPPEUI?",
        "AT+CDEVADDR?",
        "AT+CAPPSKEY?",
        "AT+CNWKSKEY?",
        "AT+CREGION?",
        "AT+NBAPN?",
        "AT+NBMQTT?",
        "AT+NBCONNECT?",
    ]
    timers.cancel_all()


@pytest.mark.asyncio
async def test_polls_status_while_eligible() -> None:
    eligible = _Eligibility(True)
    scheduler, dispatcher, timers = _scheduler(eligible, poll_interval=0.2)

    scheduler.refresh()
    assert scheduler.is_polling
    await asyncio.sleep(0.5)

    assert dispatcher.commands == ["AT+SWQUERY?", "AT+SWQUERY?"]
    timers.cancel_all()


@pytest.mark.asyncio
async def test_polling_is_suspended_and_rearmed() -> None:
    eligible = _Eligibility(True)
    scheduler, dispatcher, timers = _scheduler(eligible, poll_interval=0.2)
    scheduler.refresh()

    await asyncio.sleep(0.1)
    eligible.value = False
    scheduler.refresh()
    assert not scheduler.is_polling

    await asyncio.sleep(0.5)
    assert dispatcher.commands == []

    eligible.value = True
    scheduler.refresh()
    # The interval restarts from the moment polling is re-armed.
    await asyncio.sleep(0.1)
    assert dispatcher.commands == []
    await asyncio.sleep(0.15)
    assert dispatcher.commands == ["AT+SWQUERY?"]
    timers.cancel_all()


@pytest.mark.asyncio
async def test_tick_rechecks_eligibility() -> None:
    eligible = _Eligibility(True)
    scheduler, dispatcher, timers = _scheduler(eligible, poll_interval=0.1)
    scheduler.refresh()

    eligible.value = False
    await asyncio.sleep(0.3)

    assert dispatcher.commands == []
    assert not scheduler.is_polling
    timers.cancel_all()


@pytest.mark.asyncio
async def test_refresh_does_not_restart_running_timer() -> None:
    eligible = _Eligibility(True)
    scheduler, dispatcher, timers = _scheduler(eligible, poll_interval=0.2)

    scheduler.refresh()
    await asyncio.sleep(0.15)
    scheduler.refresh()
    await asyncio.sleep(0.1)

    assert dispatcher.commands == ["AT+SWQUERY?"]
    timers.cancel_all()


@pytest.mark.asyncio
async def test_stop_cancels_pending_bootstrap() -> None:
    scheduler, dispatcher, _timers = _scheduler(
        _Eligibility(True), bootstrap_status_delay=0.05, bootstrap_radio_delay=0.1, poll_interval=0.1
    )
    scheduler.bootstrap()
    scheduler.refresh()
    scheduler.stop()

    await asyncio.sleep(0.3)
    assert dispatcher.commands == []
