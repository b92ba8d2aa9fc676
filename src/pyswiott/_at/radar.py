"""Radar detection settings: threshold, mounting orientation, enable flag."""

from __future__ import annotations

from typing import Any

from pyswiott._at._common import parse_int
from pyswiott.models.device_config import MountOrientation

THRESHOLD_PREFIX = "+SWRDTARTH:"
ORIENTATION_PREFIX = "+SWRDPARKTYPE:"
ENABLE_PREFIX = "+SWRDENABLE:"

QUERY_COMMANDS: tuple[str, ...] = ("AT+SWRDTARTH?", "AT+SWRDPARKTYPE?", "AT+SWRDENABLE?")


def build_set_threshold(threshold_cm: int) -> str:
    value = int(threshold_cm)
    if value < 0:
        raise ValueError(f"threshold must not be negative, got {value}")
    return f"AT+SWRDTARTH={value}"


def build_set_orientation(orientation: MountOrientation | str) -> str:
    return f"AT+SWRDPARKTYPE={MountOrientation(orientation).code}"


def build_set_radar_enabled(enabled: bool) -> str:
    return f"AT+SWRDENABLE={1 if enabled else 0}"


def parse_threshold(payload: str) -> dict[str, Any]:
    return {"threshold": parse_int(payload, tag="SWRDTARTH", field="threshold")}


def parse_orientation(payload: str) -> dict[str, Any]:
    orientation = MountOrientation.HORIZONTAL if payload.strip() == "0" else MountOrientation.VERTICAL
    return {"orientation": orientation}


def parse_enabled(payload: str) -> dict[str, Any]:
    return {"radar_enabled": payload.strip() == "1"}
