"""Helpers for safe debug logging.

The sensor configuration includes LoRaWAN session keys and the MQTT
broker password.  This module redacts them before anything reaches the
standard ``logging`` tree.  The in-app session log keeps raw text; it is
the device console.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "app_skey",
        "nwk_skey",
        "mqtt_pass",
        "password",
    }
)

# Verbs and response prefixes whose whole value is secret.
_SECRET_VERBS: tuple[str, ...] = ("AT+CAPPSKEY=", "AT+CNWKSKEY=", "+CAPPSKEY:", "+CNWKSKEY:")
# Verbs and response prefixes carrying the password as 4th CSV field.
_MQTT_VERBS: tuple[str, ...] = ("AT+NBMQTT=", "+NBMQTT:")
_MQTT_PASSWORD_INDEX = 3


def redact_command(line: str) -> str:
    """Return *line* (a command or response) with secret values masked."""
    for verb in _SECRET_VERBS:
        if line.startswith(verb):
            return f"{verb}<redacted>"
    for verb in _MQTT_VERBS:
        if line.startswith(verb):
            fields = line[len(verb) :].split(",")
            if len(fields) > _MQTT_PASSWORD_INDEX:
                fields[_MQTT_PASSWORD_INDEX] = "<redacted>"
            return verb + ",".join(fields)
    return line


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>" if v else v
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
