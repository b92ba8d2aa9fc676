"""NB-IoT modem: APN, MQTT uplink parameters and network registration."""

from __future__ import annotations

from typing import Any

from pyswiott._at._common import split_fields
from pyswiott.exceptions import SwiottFrameError
from pyswiott.models.nbiot import NbConnectStatus

APN_PREFIX = "+NBAPN:"
MQTT_PREFIX = "+NBMQTT:"
CONNECT_PREFIX = "+NBCONNECT:"

QUERY_COMMANDS: tuple[str, ...] = ("AT+NBAPN?", "AT+NBMQTT?", "AT+NBCONNECT?")

_MQTT_FIELDS = ("mqtt_host", "mqtt_port", "mqtt_user", "mqtt_pass", "mqtt_clean", "mqtt_keepalive")
_MODEM_FIELDS = ("imei", "imsi", "ccid", "band", "operator", "rssi", "snr")


def build_set_apn(apn: str) -> str:
    return f"AT+NBAPN={apn.strip()}"


def build_set_mqtt(
    host: str,
    port: int | str,
    user: str,
    password: str,
    *,
    clean: str = "0",
    keepalive: int | str = "120",
    ssl: str = "0",
) -> str:
    values = [host, str(port), user, password, clean or "0", str(keepalive or "120"), ssl or "0"]
    if any("," in value for value in values):
        raise ValueError("MQTT parameters must not contain commas")
    return "AT+NBMQTT=" + ",".join(values)


def build_set_connected(enabled: bool) -> str:
    return f"AT+NBCONNECT={1 if enabled else 0}"


def parse_apn(payload: str) -> dict[str, Any]:
    return {"apn": payload}


def parse_mqtt(payload: str) -> dict[str, Any]:
    parts = split_fields(payload)
    if len(parts) < len(_MQTT_FIELDS):
        raise SwiottFrameError(
            f"expected at least {len(_MQTT_FIELDS)} fields, got {len(parts)}",
            tag="NBMQTT",
        )
    patch: dict[str, Any] = dict(zip(_MQTT_FIELDS, parts, strict=False))
    patch["mqtt_ssl"] = parts[6] if len(parts) > 6 and parts[6] else "0"
    return patch


def parse_connect(payload: str) -> dict[str, Any]:
    parts = split_fields(payload)
    patch: dict[str, Any] = {"status": NbConnectStatus.from_code(parts[0])}
    for index, name in enumerate(_MODEM_FIELDS, start=1):
        patch[name] = parts[index] if index < len(parts) else ""
    return patch
