"""Internal settings operations for :class:`pyswiott.client.SwiottClient`.

These functions keep `client.py` small without changing the public API.
Parameters are validated before anything is queued, so a bad value raises
``ValueError`` and sends nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyswiott._at import lora as _lora
from pyswiott._at import nbiot as _nbiot
from pyswiott._at import radar as _radar
from pyswiott.models.device_config import MountOrientation
from pyswiott.models.lora import LoRaRegion

if TYPE_CHECKING:
    from pyswiott.client import SwiottClient

_REQUERY_TIMER = "settings.requery"


def _send_radar_setting(client: SwiottClient, command: str) -> None:
    client._require_connected()
    client._dispatcher.send(command)
    # Read back all three radar settings once the device has applied it.
    client._timers.schedule(
        _REQUERY_TIMER,
        client._config.timing.settings_requery_delay,
        client._scheduler.query_config,
    )


def set_threshold(client: SwiottClient, threshold_cm: int) -> None:
    _send_radar_setting(client, _radar.build_set_threshold(threshold_cm))


def set_orientation(client: SwiottClient, orientation: MountOrientation | str) -> None:
    _send_radar_setting(client, _radar.build_set_orientation(orientation))


def set_radar_enabled(client: SwiottClient, enabled: bool) -> None:
    _send_radar_setting(client, _radar.build_set_radar_enabled(enabled))


def set_lora_key(client: SwiottClient, field: str, value: str) -> None:
    command = _lora.build_set_key(field, value)
    client._require_connected()
    client._dispatcher.send(command)


def set_region(client: SwiottClient, region: LoRaRegion | str) -> None:
    command = _lora.build_set_region(region)
    client._require_connected()
    client._dispatcher.send(command)


def set_apn(client: SwiottClient, apn: str) -> None:
    client._require_connected()
    client._dispatcher.send(_nbiot.build_set_apn(apn))


def set_mqtt(
    client: SwiottClient,
    *,
    host: str,
    port: int | str,
    user: str,
    password: str,
    clean: str = "0",
    keepalive: int | str = "120",
    ssl: str = "0",
) -> None:
    command = _nbiot.build_set_mqtt(host, port, user, password, clean=clean, keepalive=keepalive, ssl=ssl)
    client._require_connected()
    client._dispatcher.send(command)


def set_nb_connected(client: SwiottClient, enabled: bool) -> None:
    client._require_connected()
    client._dispatcher.send(_nbiot.build_set_connected(enabled))
