from __future__ import annotations

import asyncio

import pytest

from pyswiott._dispatcher import CommandDispatcher
from pyswiott.exceptions import SwiottTransportError
from pyswiott.models.session import LogDirection
from pyswiott.session_log import SessionLog

_EPSILON = 1e-6


class _RecordingWriter:
    def __init__(self, *, fail_on: bytes | None = None, error: Exception | None = None) -> None:
        self.sent: list[tuple[float, bytes]] = []
        self._fail_on = fail_on
        self._error = error or SwiottTransportError("GATT write failed: gone", operation="write")

    async def __call__(self, data: bytes) -> None:
        if data == self._fail_on:
            raise self._error
        self.sent.append((asyncio.get_running_loop().time(), data))

    @property
    def payloads(self) -> list[bytes]:
        return [data for _, data in self.sent]

    @property
    def gaps(self) -> list[float]:
        times = [ts for ts, _ in self.sent]
        return [later - earlier for earlier, later in zip(times, times[1:], strict=False)]


@pytest.mark.asyncio
async def test_batch_commands_are_spaced_and_terminated() -> None:
    dispatcher = CommandDispatcher(spacing=0.35, log=SessionLog())
    writer = _RecordingWriter()
    dispatcher.attach(writer)

    dispatcher.send_batch(["AT+SWRDTARTH?", "AT+SWRDPARKTYPE?", "AT+SWRDENABLE?\r\n"])
    await dispatcher.drain()
    dispatcher.detach()

    assert writer.payloads == [b"AT+SWRDTARTH?\r\n", b"AT+SWRDPARKTYPE?\r\n", b"AT+SWRDENABLE?\r\n"]
    assert all(gap >= 0.35 - _EPSILON for gap in writer.gaps)


@pytest.mark.asyncio
async def test_spacing_is_global_across_batches() -> None:
    dispatcher = CommandDispatcher(spacing=0.35, log=SessionLog())
    writer = _RecordingWriter()
    dispatcher.attach(writer)

    dispatcher.send("AT+SWQUERY?")
    await asyncio.sleep(0.1)
    dispatcher.send_batch(["AT+NBAPN?", "AT+NBMQTT?"])
    dispatcher.send("AT+SWQUERY?")
    await dispatcher.drain()
    dispatcher.detach()

    assert len(writer.sent) == 4
    assert all(gap >= 0.35 - _EPSILON for gap in writer.gaps)


@pytest.mark.asyncio
async def test_send_does_not_block_caller() -> None:
    dispatcher = CommandDispatcher(spacing=0.35, log=SessionLog())
    writer = _RecordingWriter()
    dispatcher.attach(writer)
    loop = asyncio.get_running_loop()

    started = loop.time()
    dispatcher.send_batch(["AT+CDEVEUI?", "AT+CAPPEUI?", "AT+CDEVADDR?"])
    assert loop.time() - started < 0.05
    assert dispatcher.pending == 3

    dispatcher.detach()


@pytest.mark.asyncio
async def test_successful_sends_are_logged_as_tx() -> None:
    log = SessionLog()
    dispatcher = CommandDispatcher(spacing=0.35, log=log)
    dispatcher.attach(_RecordingWriter())

    dispatcher.send("AT+SWQUERY?")
    await dispatcher.drain()
    dispatcher.detach()

    assert [(e.direction, e.message) for e in log] == [(LogDirection.TX, "AT+SWQUERY?")]


@pytest.mark.asyncio
async def test_transport_error_is_logged_and_worker_keeps_running() -> None:
    log = SessionLog()
    dispatcher = CommandDispatcher(spacing=0.35, log=log)
    writer = _RecordingWriter(fail_on=b"AT+SWREBOOT\r\n")
    dispatcher.attach(writer)

    dispatcher.send_batch(["AT+SWREBOOT", "AT+SWQUERY?"])
    await dispatcher.drain()
    assert dispatcher.is_attached
    dispatcher.detach()

    assert writer.payloads == [b"AT+SWQUERY?\r\n"]
    directions = [e.direction for e in log]
    assert directions == [LogDirection.ERROR, LogDirection.TX]
    assert "GATT write failed" in log.entries()[0].message


@pytest.mark.asyncio
async def test_demo_mode_logs_without_transmitting() -> None:
    log = SessionLog()
    dispatcher = CommandDispatcher(spacing=0.35, log=log)
    dispatcher.attach(None, demo=True)

    dispatcher.send("AT+SWRDCALI")
    await dispatcher.drain()
    dispatcher.detach()

    assert [(e.direction, e.message) for e in log] == [(LogDirection.TX, "AT+SWRDCALI")]


@pytest.mark.asyncio
async def test_detach_drops_queued_commands() -> None:
    dispatcher = CommandDispatcher(spacing=0.35, log=SessionLog())
    writer = _RecordingWriter()
    dispatcher.attach(writer)

    dispatcher.send_batch(["AT+NBAPN?", "AT+NBMQTT?", "AT+NBCONNECT?"])
    await asyncio.sleep(0.05)
    dispatcher.detach()
    await asyncio.sleep(0.5)

    assert writer.payloads == [b"AT+NBAPN?\r\n"]
    assert dispatcher.pending == 0
    assert not dispatcher.is_attached


@pytest.mark.asyncio
async def test_send_while_detached_is_dropped() -> None:
    log = SessionLog()
    dispatcher = CommandDispatcher(spacing=0.35, log=log)

    dispatcher.send("AT+SWQUERY?")

    assert dispatcher.pending == 0
    assert len(log) == 0


@pytest.mark.asyncio
async def test_unexpected_write_error_does_not_stop_worker() -> None:
    log = SessionLog()
    dispatcher = CommandDispatcher(spacing=0.35, log=log)
    writer = _RecordingWriter(fail_on=b"AT+SWREBOOT\r\n", error=OSError("adapter gone"))
    dispatcher.attach(writer)

    dispatcher.send_batch(["AT+SWREBOOT", "AT+SWQUERY?"])
    await asyncio.wait_for(dispatcher.drain(), timeout=2.0)

    assert dispatcher.is_attached
    assert writer.payloads == [b"AT+SWQUERY?\r\n"]
    errors = [e.message for e in log if e.direction is LogDirection.ERROR]
    assert errors == ["Send failed: adapter gone"]
    dispatcher.detach()


@pytest.mark.asyncio
async def test_failing_log_listener_does_not_stop_worker() -> None:
    log = SessionLog()

    def _boom(_entry: object) -> None:
        raise RuntimeError("listener bug")

    log.subscribe(_boom)
    dispatcher = CommandDispatcher(spacing=0.35, log=log)
    writer = _RecordingWriter()
    dispatcher.attach(writer)

    dispatcher.send_batch(["AT+NBAPN?", "AT+NBMQTT?"])
    await asyncio.wait_for(dispatcher.drain(), timeout=2.0)

    assert writer.payloads == [b"AT+NBAPN?\r\n", b"AT+NBMQTT?\r\n"]
    assert [e.message for e in log] == ["AT+NBAPN?", "AT+NBMQTT?"]
    dispatcher.detach()
