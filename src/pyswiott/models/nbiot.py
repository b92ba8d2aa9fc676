"""NB-IoT modem settings and registration state."""

from __future__ import annotations

from enum import StrEnum

from pyswiott.models._base import SwiottBaseModel


class NbConnectStatus(StrEnum):
    """Registration status reported by ``+NBCONNECT:``.

    Codes ``0``/``1``/``2`` map to the first three members; any other
    code is reported as :attr:`ERROR`.  :attr:`UNKNOWN` means the modem
    has not been queried yet.
    """

    NOT_REGISTERED = "Not registered"
    REGISTERED = "Registered (No MQTT)"
    CONNECTED = "Connected"
    ERROR = "Error"
    UNKNOWN = "Unknown"

    @classmethod
    def from_code(cls, code: str) -> NbConnectStatus:
        mapping = {"0": cls.NOT_REGISTERED, "1": cls.REGISTERED, "2": cls.CONNECTED}
        try:
            return mapping.get(str(int(code.strip())), cls.ERROR)
        except ValueError:
            return cls.ERROR


class NbIotConfig(SwiottBaseModel):
    """APN, MQTT uplink parameters and modem identity, all raw strings."""

    apn: str = ""
    mqtt_host: str = ""
    mqtt_port: str = ""
    mqtt_user: str = ""
    mqtt_pass: str = ""
    mqtt_clean: str = ""
    mqtt_keepalive: str = ""
    mqtt_ssl: str = "0"
    status: NbConnectStatus = NbConnectStatus.UNKNOWN
    imei: str = ""
    imsi: str = ""
    ccid: str = ""
    band: str = ""
    operator: str = ""
    rssi: str = ""
    snr: str = ""
