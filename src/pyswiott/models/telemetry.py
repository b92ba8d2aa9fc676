"""Sensor telemetry model.

Filled from two frames: the binary ``+SWQUERY:`` snapshot and the CSV
``+SWRDSTATUS:`` / ``+MRSTATUS:`` radar report.  Each frame only carries
part of the record.
"""

from __future__ import annotations

import enum

from pyswiott.models._base import SwiottBaseModel, SwiottEnum


class EventType(SwiottEnum):
    """Last parking event reported by the radar."""

    UNKNOWN = -1
    NONE = 0
    ENTRY = 1
    EXIT = 2
    MOVE = 3


class StatusFlag(enum.IntFlag):
    """Bits of the ``+SWQUERY:`` status byte.

    Bits 0, 4, 5 and 7 are reserved.
    """

    HIGH_MAGNETIC = 1 << 1
    LOW_BATTERY = 1 << 2
    WATER_COVER = 1 << 3
    LOW_RSSI = 1 << 6


_STATUS_MASK = int(StatusFlag.HIGH_MAGNETIC | StatusFlag.LOW_BATTERY | StatusFlag.WATER_COVER | StatusFlag.LOW_RSSI)


class SensorTelemetry(SwiottBaseModel):
    """Latest known sensor readings."""

    occupied: bool = False
    battery: int = 0
    """Battery level in percent."""
    temperature: int = 0
    """Temperature in device units (signed)."""
    rssi: int = 0
    cover_value: int = 0
    distance: int = 0
    mag_value: int = 0
    mag_x: int = 0
    mag_y: int = 0
    mag_z: int = 0
    event_type: int = 0
    """Raw event code; see :attr:`event`."""
    is_valid: bool = False
    err_code: int = 0
    park_count_24h: int = 0
    park_count_current_hour: int = 0
    status_byte: int = 0

    @property
    def event(self) -> EventType:
        return EventType(self.event_type)

    @property
    def flags(self) -> StatusFlag:
        return StatusFlag(self.status_byte & _STATUS_MASK)

    @property
    def is_high_mag(self) -> bool:
        return StatusFlag.HIGH_MAGNETIC in self.flags

    @property
    def is_low_battery(self) -> bool:
        return StatusFlag.LOW_BATTERY in self.flags

    @property
    def is_water_cover(self) -> bool:
        return StatusFlag.WATER_COVER in self.flags

    @property
    def is_low_rssi(self) -> bool:
        return StatusFlag.LOW_RSSI in self.flags
