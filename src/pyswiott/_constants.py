"""Internal constants shared across the library."""

import re

# ------------------------------------------------------------------
# GATT layout (16-bit UUIDs 0xFFF0 / 0xFFF1 / 0xFFF2)
# ------------------------------------------------------------------

SERVICE_UUID = "0000fff0-0000-1000-8000-00805f9b34fb"
NOTIFY_CHAR_UUID = "0000fff1-0000-1000-8000-00805f9b34fb"
WRITE_CHAR_UUID = "0000fff2-0000-1000-8000-00805f9b34fb"

#: Raw unlock word written right after the GATT connection is up.
HANDSHAKE = b"SWIOTT"

COMMAND_TERMINATOR = "\r\n"

#: Hard firmware limit: commands closer than this are dropped or corrupted.
MIN_COMMAND_SPACING = 0.35

_DEVICE_NAME_RE = re.compile(r"^[0-9a-fA-F]{16}$")


def is_valid_device_name(name: str | None) -> bool:
    """Return ``True`` when *name* looks like a sensor ID (16 hex chars)."""
    if not name:
        return False
    return _DEVICE_NAME_RE.match(name) is not None
