from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pyswiott._constants import is_valid_device_name
from pyswiott.models import (
    DeviceConfig,
    EventType,
    LogDirection,
    LogEntry,
    MountOrientation,
    NbConnectStatus,
    SensorTelemetry,
    StatusFlag,
)
from pyswiott.session_log import SessionLog


def test_event_type_maps_unknown_codes() -> None:
    assert SensorTelemetry(event_type=1).event is EventType.ENTRY
    assert SensorTelemetry(event_type=3).event is EventType.MOVE
    assert SensorTelemetry(event_type=42).event is EventType.UNKNOWN


def test_reserved_status_bits_are_ignored() -> None:
    telemetry = SensorTelemetry(status_byte=0b1011_0001)
    assert telemetry.flags == StatusFlag(0)
    assert not telemetry.is_high_mag


def test_merged_keeps_untouched_fields_and_validates() -> None:
    config = DeviceConfig(threshold=55)
    updated = config.merged({"radar_enabled": True})

    assert updated.threshold == 55
    assert updated.radar_enabled
    assert config.radar_enabled is False
    assert config.merged({}) is config

    with pytest.raises(ValidationError):
        config.merged({"no_such_field": 1})


def test_orientation_codes() -> None:
    assert MountOrientation.HORIZONTAL.code == "0"
    assert MountOrientation.VERTICAL.code == "1"


def test_nb_connect_status_codes() -> None:
    assert NbConnectStatus.from_code("0") is NbConnectStatus.NOT_REGISTERED
    assert NbConnectStatus.from_code(" 2 ") is NbConnectStatus.CONNECTED
    assert NbConnectStatus.from_code("3") is NbConnectStatus.ERROR


@pytest.mark.parametrize(
    ("name", "valid"),
    [
        ("0123456789abcdef", True),
        ("0123456789ABCDEF", True),
        ("0123456789abcde", False),
        ("0123456789abcdeg", False),
        ("SWIOTT-SENSOR", False),
        (None, False),
    ],
)
def test_device_name_validation(name: str | None, valid: bool) -> None:
    assert is_valid_device_name(name) is valid


def test_log_entry_render_uses_local_time() -> None:
    ts = datetime(2026, 1, 1, 12, 0, 5, tzinfo=UTC)
    entry = LogEntry(timestamp=ts, direction=LogDirection.TX, message="AT+SWQUERY?")

    rendered = entry.render()
    assert rendered.endswith("TX    AT+SWQUERY?")
    assert rendered[:8] == f"{ts.astimezone():%H:%M:%S}"


def test_session_log_evicts_oldest_entries() -> None:
    log = SessionLog(capacity=3)
    seen: list[str] = []
    log.subscribe(lambda entry: seen.append(entry.message))

    for index in range(5):
        log.info(f"line {index}")

    assert [e.message for e in log] == ["line 2", "line 3", "line 4"]
    assert len(log) == log.capacity == 3
    assert seen == [f"line {index}" for index in range(5)]


def test_session_log_listener_errors_are_contained() -> None:
    log = SessionLog()
    seen: list[str] = []

    def _boom(_entry: LogEntry) -> None:
        raise RuntimeError("listener bug")

    log.subscribe(_boom)
    log.subscribe(lambda entry: seen.append(entry.message))

    log.rx("OK")

    assert [e.message for e in log] == ["OK"]
    assert seen == ["OK"]
