from __future__ import annotations

from datetime import UTC, datetime

from pyswiott.ingestion.decode import decode_line
from pyswiott.models.device_config import MountOrientation
from pyswiott.state.events import StateSection, StateUpdate
from pyswiott.state.store import StateStore


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def _apply_line(store: StateStore, line: str) -> None:
    result = decode_line(line)
    assert isinstance(result, StateUpdate)
    store.apply(result)


def test_partial_update_keeps_other_fields() -> None:
    store = StateStore()

    _apply_line(store, "+SWQUERY:1E320205013412B5FF0A002C01")
    _apply_line(store, "+SWRDSTATUS:3,1,1,2,3,999,-60,4,250,1,0")

    telemetry = store.telemetry
    # From the binary frame only.
    assert telemetry.battery == 50
    assert telemetry.temperature == 30
    assert telemetry.is_high_mag
    # Overwritten by the CSV frame.
    assert telemetry.mag_value == 999
    assert telemetry.rssi == -60
    assert telemetry.distance == 250
    assert telemetry.occupied


def test_device_config_fields_are_set_disjointly() -> None:
    store = StateStore()

    _apply_line(store, "+SWRDTARTH:55")
    assert store.device_config.threshold == 55
    assert store.device_config.orientation is MountOrientation.HORIZONTAL

    _apply_line(store, "+SWRDPARKTYPE:1")
    _apply_line(store, "+SWRDENABLE:1")
    assert store.device_config.threshold == 55
    assert store.device_config.orientation is MountOrientation.VERTICAL
    assert store.device_config.radar_enabled


def test_applying_same_update_twice_is_idempotent() -> None:
    once = StateStore()
    twice = StateStore()

    _apply_line(once, "+NBMQTT:h,1883,u,p,1,60")
    _apply_line(twice, "+NBMQTT:h,1883,u,p,1,60")
    _apply_line(twice, "+NBMQTT:h,1883,u,p,1,60")

    assert once.snapshot() == twice.snapshot()


def test_empty_update_is_ignored() -> None:
    store = StateStore()
    seen: list[StateSection] = []
    store.subscribe(seen.append)

    store.apply(StateUpdate(section=StateSection.LORA, data={}))

    assert seen == []
    assert store.observed_at(StateSection.LORA) is None


def test_observed_at_and_listener_notification() -> None:
    store = StateStore()
    seen: list[StateSection] = []
    unsubscribe = store.subscribe(seen.append)

    store.apply(StateUpdate(section=StateSection.LORA, data={"dev_eui": "0011223344556677"}, observed_at=_dt()))
    assert store.observed_at(StateSection.LORA) == _dt()
    assert seen == [StateSection.LORA]

    unsubscribe()
    store.apply(StateUpdate(section=StateSection.LORA, data={"region": "EU868"}))
    assert seen == [StateSection.LORA]


def test_failing_listener_does_not_block_merge() -> None:
    store = StateStore()

    def _boom(_section: StateSection) -> None:
        raise RuntimeError("listener bug")

    store.subscribe(_boom)
    store.apply(StateUpdate(section=StateSection.NBIOT, data={"apn": "iot"}))

    assert store.nbiot.apn == "iot"


def test_reset_restores_defaults_for_one_section_only() -> None:
    store = StateStore()
    _apply_line(store, "+SWQUERY:1E320205013412B5FF0A002C01")
    _apply_line(store, "+SWRDTARTH:80")

    store.reset(StateSection.TELEMETRY)

    assert store.telemetry.battery == 0
    assert store.observed_at(StateSection.TELEMETRY) is None
    assert store.device_config.threshold == 80


def test_snapshot_is_plain_json_data() -> None:
    store = StateStore()
    _apply_line(store, "+NBCONNECT:2,imei")

    snapshot = store.snapshot()

    assert snapshot[StateSection.NBIOT]["status"] == "Connected"
    assert snapshot[StateSection.DEVICE_CONFIG]["orientation"] == "horizontal"
