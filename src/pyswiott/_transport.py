"""Byte-pipe transport boundary and the BLE implementation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from bleak import BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError
from bleak_retry_connector import (
    BLEAK_RETRY_EXCEPTIONS,
    BleakClientWithServiceCache,
    establish_connection,
)

from pyswiott._constants import (
    NOTIFY_CHAR_UUID,
    SERVICE_UUID,
    WRITE_CHAR_UUID,
    is_valid_device_name,
)
from pyswiott.config import SwiottConfig
from pyswiott.exceptions import SwiottConnectError, SwiottDeviceNameError, SwiottTransportError

_logger = logging.getLogger(__name__)

DataCallback = Callable[[bytes], None]
DisconnectCallback = Callable[[], None]


class TransportSession(Protocol):
    """An open byte pipe to one sensor."""

    async def send(self, data: bytes) -> None: ...

    async def disconnect(self) -> None: ...


class Transport(Protocol):
    """Structural transport interface used by the session controller.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (:class:`BleTransport`)
    concrete.  ``on_data`` and ``on_disconnected`` must be invoked on the
    event loop thread.
    """

    async def connect(
        self,
        *,
        on_data: DataCallback,
        on_disconnected: DisconnectCallback,
    ) -> TransportSession: ...


class BleSession:
    """GATT session: notify on ``0xFFF1``, write-without-response on ``0xFFF2``."""

    def __init__(self, client: BleakClientWithServiceCache, device: BLEDevice) -> None:
        self._client = client
        self._device = device

    @property
    def address(self) -> str:
        return self._device.address

    async def send(self, data: bytes) -> None:
        if not self._client.is_connected:
            raise SwiottTransportError("GATT client is not connected", operation="write")
        try:
            await self._client.write_gatt_char(WRITE_CHAR_UUID, data, response=False)
        except BLEAK_RETRY_EXCEPTIONS as exc:
            raise SwiottTransportError(f"GATT write failed: {exc}", operation="write") from exc

    async def disconnect(self) -> None:
        try:
            await self._client.stop_notify(NOTIFY_CHAR_UUID)
        except BLEAK_RETRY_EXCEPTIONS:
            _logger.debug("[%s] stop_notify failed during disconnect", self.address, exc_info=True)
        try:
            await self._client.disconnect()
        except BLEAK_RETRY_EXCEPTIONS as exc:
            raise SwiottTransportError(f"GATT disconnect failed: {exc}", operation="disconnect") from exc


class BleTransport:
    """Discovers and connects to a sensor with bleak."""

    def __init__(self, config: SwiottConfig) -> None:
        self._config = config

    async def _find_device(self) -> tuple[BLEDevice, str | None]:
        """Return the sensor and the name it advertised."""
        advertised: dict[str, str | None] = {}

        def _match(device: BLEDevice, adv: AdvertisementData) -> bool:
            name = adv.local_name or device.name
            if not _is_sensor_advertisement(name, adv):
                return False
            advertised[device.address] = name
            return True

        timeout = self._config.connect_timeout
        address = self._config.address
        try:
            if address:
                _logger.info("Looking for sensor %s...", address)
                device = await BleakScanner.find_device_by_address(address, timeout=timeout)
            else:
                _logger.info("Scanning for sensors...")
                device = await BleakScanner.find_device_by_filter(_match, timeout=timeout)
        except BleakError as exc:
            raise SwiottConnectError(f"BLE scan failed: {exc}", operation="scan") from exc
        if device is None:
            target = address or "any sensor"
            raise SwiottConnectError(f"No device found for {target} within {timeout:.0f}s", operation="scan")
        return device, advertised.get(device.address, device.name)

    async def connect(
        self,
        *,
        on_data: DataCallback,
        on_disconnected: DisconnectCallback,
    ) -> BleSession:
        device, name = await self._find_device()
        if not is_valid_device_name(name):
            raise SwiottDeviceNameError(name)

        def _handle_disconnect(_client: Any) -> None:
            _logger.debug("[%s] GATT disconnected", device.address)
            on_disconnected()

        def _handle_notify(_sender: Any, data: bytearray) -> None:
            on_data(bytes(data))

        _logger.info("[%s] Connecting to sensor %s...", device.address, name)
        try:
            client: BleakClientWithServiceCache = await establish_connection(
                BleakClientWithServiceCache,
                device,
                f"SWIOTT {name}",
                disconnected_callback=_handle_disconnect,
                use_services_cache=True,
                ble_device_callback=lambda: device,
            )
        except BLEAK_RETRY_EXCEPTIONS as exc:
            raise SwiottConnectError(f"Connection to {device.address} failed: {exc}", operation="connect") from exc

        try:
            await client.start_notify(NOTIFY_CHAR_UUID, _handle_notify)
        except BLEAK_RETRY_EXCEPTIONS as exc:
            try:
                await client.disconnect()
            except BLEAK_RETRY_EXCEPTIONS:
                _logger.debug("[%s] disconnect after failed subscribe also failed", device.address, exc_info=True)
            raise SwiottConnectError(f"Notify subscription failed: {exc}", operation="subscribe") from exc

        _logger.info("[%s] Connected to sensor %s", device.address, name)
        return BleSession(client, device)


def _is_sensor_advertisement(name: str | None, adv: AdvertisementData) -> bool:
    if not is_valid_device_name(name):
        return False
    return SERVICE_UUID in [uuid.lower() for uuid in adv.service_uuids]
