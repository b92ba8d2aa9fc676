"""Calibration and reboot commands plus the operation signal lines."""

from __future__ import annotations

from pyswiott._at._common import split_fields

CALIBRATE_COMMAND = "AT+SWRDCALI"
REBOOT_COMMAND = "AT+SWREBOOT"

PROGRESS_PREFIX = "+SWRDCALI:"
OK_LINE = "OK"
ERROR_LINE = "ERROR"


def parse_progress(payload: str) -> str | None:
    """Return the remaining-seconds field of a progress frame.

    The countdown is the second comma-separated field; it is kept as the
    raw string.  ``None`` when missing or not a number.
    """
    parts = split_fields(payload)
    if len(parts) < 2:
        return None
    remaining = parts[1]
    try:
        int(remaining)
    except ValueError:
        return None
    return remaining
