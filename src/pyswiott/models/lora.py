"""LoRaWAN radio settings."""

from __future__ import annotations

from enum import StrEnum

from pyswiott.models._base import SwiottBaseModel


class LoRaRegion(StrEnum):
    """Region plans accepted by ``AT+CREGION``."""

    AS923 = "AS923"
    AU915 = "AU915"
    CN470 = "CN470"
    CN779 = "CN779"
    EU433 = "EU433"
    EU868 = "EU868"
    KR920 = "KR920"
    IN865 = "IN865"
    US915 = "US915"
    RU864 = "RU864"


class LoRaConfig(SwiottBaseModel):
    """LoRaWAN identifiers and keys as hex strings.

    ``region`` is kept as the raw string reported by the firmware; it is
    not guaranteed to be a :class:`LoRaRegion` member.
    """

    dev_eui: str = ""
    app_eui: str = ""
    dev_addr: str = ""
    app_skey: str = ""
    nwk_skey: str = ""
    region: str = ""
