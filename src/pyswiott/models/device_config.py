"""Radar detection settings."""

from __future__ import annotations

from enum import StrEnum

from pyswiott.models._base import SwiottBaseModel


class MountOrientation(StrEnum):
    """How the sensor is mounted in the parking bay (``AT+SWRDPARKTYPE``)."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def code(self) -> str:
        return "0" if self is MountOrientation.HORIZONTAL else "1"


class DeviceConfig(SwiottBaseModel):
    """Radar settings as last reported by the sensor.

    Each field is filled by its own query response.
    """

    orientation: MountOrientation = MountOrientation.HORIZONTAL
    threshold: int = 30
    """Detection threshold in centimeters (``AT+SWRDTARTH``)."""
    radar_enabled: bool = False
