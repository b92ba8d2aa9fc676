"""LoRaWAN identifiers, session keys and region plan."""

from __future__ import annotations

import string
from typing import Any

from pyswiott.models.lora import LoRaRegion

#: Response prefix -> LoRaConfig field.
RESPONSE_FIELDS: dict[str, str] = {
    "+CDEVEUI:": "dev_eui",
    "+CAPPEUI:": "app_eui",
    "+CDEVADDR:": "dev_addr",
    "+CAPPSKEY:": "app_skey",
    "+CNWKSKEY:": "nwk_skey",
    "+CREGION:": "region",
}

QUERY_COMMANDS: tuple[str, ...] = (
    "AT+CDEVEUI?",
    "AT+CAPPEUI?",
    "AT+CDEVADDR?",
    "AT+CAPPSKEY?",
    "AT+CNWKSKEY?",
    "AT+CREGION?",
)

#: LoRaConfig field -> (command verb, hex length).
KEY_FIELDS: dict[str, tuple[str, int]] = {
    "dev_eui": ("AT+CDEVEUI", 16),
    "app_eui": ("AT+CAPPEUI", 16),
    "dev_addr": ("AT+CDEVADDR", 8),
    "app_skey": ("AT+CAPPSKEY", 32),
    "nwk_skey": ("AT+CNWKSKEY", 32),
}

_HEX_DIGITS = frozenset(string.hexdigits)


def build_set_key(field: str, value: str) -> str:
    """Build the set command for one hex identifier or session key."""
    try:
        verb, length = KEY_FIELDS[field]
    except KeyError:
        raise ValueError(f"unknown LoRa key field {field!r}; expected one of {sorted(KEY_FIELDS)}") from None
    hex_value = value.strip()
    if len(hex_value) != length or not set(hex_value) <= _HEX_DIGITS:
        raise ValueError(f"{field} must be {length} hex characters, got {hex_value!r}")
    return f"{verb}={hex_value.upper()}"


def build_set_region(region: LoRaRegion | str) -> str:
    try:
        code = LoRaRegion(str(region).strip().upper())
    except ValueError:
        raise ValueError(f"unsupported region {region!r}; expected one of {[r.value for r in LoRaRegion]}") from None
    return f"AT+CREGION={code.value}"


def parse_field(field: str, payload: str) -> dict[str, Any]:
    return {field: payload}
