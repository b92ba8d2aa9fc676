"""In-memory state store.

This is the only component allowed to merge decoded updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, cast

from pyswiott._redact import redact_for_log
from pyswiott.models._base import SwiottBaseModel
from pyswiott.models.device_config import DeviceConfig
from pyswiott.models.lora import LoRaConfig
from pyswiott.models.nbiot import NbIotConfig
from pyswiott.models.telemetry import SensorTelemetry
from pyswiott.state.events import StateSection, StateUpdate

_logger = logging.getLogger(__name__)

_DEFAULTS: dict[StateSection, type[SwiottBaseModel]] = {
    StateSection.TELEMETRY: SensorTelemetry,
    StateSection.DEVICE_CONFIG: DeviceConfig,
    StateSection.LORA: LoRaConfig,
    StateSection.NBIOT: NbIotConfig,
}


class StateStore:
    """Latest-known snapshot of every section.

    Updates are read-modify-write merges: a patch only overwrites the
    keys it carries.  Applying the same update twice yields the same
    state as applying it once.
    """

    def __init__(self) -> None:
        self._sections: dict[StateSection, SwiottBaseModel] = {
            section: model_cls() for section, model_cls in _DEFAULTS.items()
        }
        self._observed_at: dict[StateSection, datetime] = {}
        self._listeners: list[Callable[[StateSection], None]] = []

    @property
    def telemetry(self) -> SensorTelemetry:
        return cast(SensorTelemetry, self._sections[StateSection.TELEMETRY])

    @property
    def device_config(self) -> DeviceConfig:
        return cast(DeviceConfig, self._sections[StateSection.DEVICE_CONFIG])

    @property
    def lora(self) -> LoRaConfig:
        return cast(LoRaConfig, self._sections[StateSection.LORA])

    @property
    def nbiot(self) -> NbIotConfig:
        return cast(NbIotConfig, self._sections[StateSection.NBIOT])

    def apply(self, update: StateUpdate) -> None:
        """Merge *update* into its section."""
        if not update.data:
            return
        current = self._sections[update.section]
        self._sections[update.section] = current.merged(update.data)
        self._observed_at[update.section] = update.observed_at
        _logger.debug("Merged %s %s", update.section, redact_for_log(update.data))
        self._notify(update.section)

    def reset(self, section: StateSection) -> None:
        """Restore a section to its defaults."""
        self._sections[section] = _DEFAULTS[section]()
        self._observed_at.pop(section, None)
        self._notify(section)

    def observed_at(self, section: StateSection) -> datetime | None:
        """When the section last received an update, if ever."""
        return self._observed_at.get(section)

    def snapshot(self) -> dict[StateSection, dict[str, Any]]:
        """Plain-dict copy of every section."""
        return {section: model.model_dump(mode="json") for section, model in self._sections.items()}

    def subscribe(self, callback: Callable[[StateSection], None]) -> Callable[[], None]:
        """Call *callback* with the changed section after every merge or reset."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, section: StateSection) -> None:
        for callback in list(self._listeners):
            try:
                callback(section)
            except Exception:
                _logger.exception("State listener failed for section %s", section)
