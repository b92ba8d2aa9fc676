"""Telemetry query command and the two telemetry frames.

``+SWQUERY:`` carries a hex-encoded binary snapshot::

    offset  size  field
    0       1     temperature (signed)
    1       1     battery percent
    2       1     status bitfield
    3       1     park count, last 24h
    4       1     park count, current hour
    5       2     magnetic value (LE)
    7       2     RSSI (LE, signed)
    9       2     cover value (LE)
    11      2     distance (LE)

``+SWRDSTATUS:`` / ``+MRSTATUS:`` carry the radar report as CSV integers.
"""

from __future__ import annotations

import binascii
import struct
from typing import Any

from pyswiott._at._common import parse_int, split_fields
from pyswiott.exceptions import SwiottFrameError

QUERY_COMMAND = "AT+SWQUERY?"

QUERY_PREFIX = "+SWQUERY:"
STATUS_PREFIXES = ("+SWRDSTATUS:", "+MRSTATUS:")

_QUERY_LAYOUT = struct.Struct("<bBBBBHhHH")
QUERY_FRAME_SIZE = _QUERY_LAYOUT.size

_STATUS_FIELDS = (
    "event_type",
    "occupied",
    "mag_x",
    "mag_y",
    "mag_z",
    "mag_value",
    "rssi",
    "cover_value",
    "distance",
    "is_valid",
    "err_code",
)
_STATUS_FLAGS = frozenset({"occupied", "is_valid"})


def parse_query_frame(payload: str) -> dict[str, Any]:
    """Decode the hex payload of a ``+SWQUERY:`` line into a telemetry patch."""
    try:
        data = binascii.unhexlify(payload.strip())
    except (binascii.Error, ValueError):
        raise SwiottFrameError(f"malformed hex payload ({len(payload)} chars)", tag="SWQUERY") from None
    if len(data) < QUERY_FRAME_SIZE:
        raise SwiottFrameError(
            f"expected at least {QUERY_FRAME_SIZE} bytes, got {len(data)}",
            tag="SWQUERY",
        )

    (
        temperature,
        battery,
        status,
        park_count_24h,
        park_count_current_hour,
        mag_value,
        rssi,
        cover_value,
        distance,
    ) = _QUERY_LAYOUT.unpack_from(data)
    return {
        "temperature": temperature,
        "battery": battery,
        "status_byte": status,
        "park_count_24h": park_count_24h,
        "park_count_current_hour": park_count_current_hour,
        "mag_value": mag_value,
        "rssi": rssi,
        "cover_value": cover_value,
        "distance": distance,
    }


def parse_status_frame(payload: str) -> dict[str, Any]:
    """Decode a CSV radar report into a telemetry patch.

    The first 11 fields are required and all must be integers; extra
    trailing fields are ignored.
    """
    parts = split_fields(payload)
    if len(parts) < len(_STATUS_FIELDS):
        raise SwiottFrameError(
            f"expected at least {len(_STATUS_FIELDS)} fields, got {len(parts)}",
            tag="SWRDSTATUS",
        )

    patch: dict[str, Any] = {}
    for name, raw in zip(_STATUS_FIELDS, parts, strict=False):
        value = parse_int(raw, tag="SWRDSTATUS", field=name)
        patch[name] = value == 1 if name in _STATUS_FLAGS else value
    return patch
