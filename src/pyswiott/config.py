"""Client configuration for pyswiott."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyswiott._constants import HANDSHAKE, MIN_COMMAND_SPACING
from pyswiott.exceptions import SwiottConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TimingProfile:
    """Delays (in seconds) that drive the session engine.

    The defaults mirror the sensor firmware's observed behaviour; tests
    shrink the display/poll delays but can never go below the
    inter-command spacing floor.

    Parameters
    ----------
    command_spacing : float
        Minimum gap between two transmitted commands.  Must be at least
        ``0.35``; the firmware silently drops commands sent faster.
    poll_interval : float
        Idle telemetry polling period.
    bootstrap_status_delay : float
        Settle delay after connecting before the status + config queries.
    bootstrap_radio_delay : float
        Delay after connecting before the LoRa and NB-IoT query batches.
    settings_requery_delay : float
        Delay before re-reading the radar config after a radar setting.
    calibration_timeout : float
        Deadline for a calibration to report ``OK``/``ERROR``.
    reboot_timeout : float
        Deadline for a reboot acknowledgement.
    calibration_success_display : float
        How long "Calibration Successful!" stays visible.
    generic_success_display : float
        How long a bare ``OK`` notice stays visible.
    failure_display : float
        How long failure/timeout messages stay visible.
    reboot_disconnect_delay : float
        Delay between a reboot ``OK`` and the forced disconnect.
    line_flush_delay : float
        Idle time after which an unterminated trailing line is processed.
    """

    command_spacing: float = MIN_COMMAND_SPACING
    poll_interval: float = 10.0
    bootstrap_status_delay: float = 0.5
    bootstrap_radio_delay: float = 2.0
    settings_requery_delay: float = 0.5
    calibration_timeout: float = 30.0
    reboot_timeout: float = 15.0
    calibration_success_display: float = 2.0
    generic_success_display: float = 1.0
    failure_display: float = 3.0
    reboot_disconnect_delay: float = 0.5
    line_flush_delay: float = 0.05

    def __post_init__(self) -> None:
        if self.command_spacing < MIN_COMMAND_SPACING:
            raise SwiottConfigError(
                f"command_spacing must be at least {MIN_COMMAND_SPACING}s, got {self.command_spacing}"
            )
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value < 0:
                raise SwiottConfigError(f"{field.name} must not be negative, got {value}")


@dataclasses.dataclass(frozen=True)
class SwiottConfig:
    """Client configuration.

    Parameters
    ----------
    address : str or None
        BLE address (or CoreBluetooth UUID on macOS) of the sensor.  When
        omitted the transport picks the first peripheral advertising a
        valid sensor ID.
    connect_timeout : float
        Seconds allowed for discovery plus GATT connection.
    log_capacity : int
        Number of entries kept by the session log.
    demo_mode : bool
        Start sessions in simulated mode (commands are logged, never sent).
    handshake : bytes
        Raw unlock word written right after connecting.  Empty disables it.
    timing : TimingProfile
        Engine delays.
    """

    address: str | None = None
    connect_timeout: float = 20.0
    log_capacity: int = 100
    demo_mode: bool = False
    handshake: bytes = HANDSHAKE
    timing: TimingProfile = dataclasses.field(default_factory=TimingProfile)

    def __post_init__(self) -> None:
        if self.log_capacity < 1:
            raise SwiottConfigError(f"log_capacity must be positive, got {self.log_capacity}")
        if self.connect_timeout <= 0:
            raise SwiottConfigError(f"connect_timeout must be positive, got {self.connect_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> SwiottConfig:
        """Create configuration from environment variables.

        Reads ``SWIOTT_ADDRESS``, ``SWIOTT_CONNECT_TIMEOUT``,
        ``SWIOTT_LOG_CAPACITY``, ``SWIOTT_DEMO_MODE``,
        ``SWIOTT_POLL_INTERVAL`` and ``SWIOTT_COMMAND_SPACING``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SwiottConfig
            Populated configuration.
        """
        env = os.environ

        timing_kwargs: dict[str, float] = {}
        _ENV_TIMING_MAP = {
            "SWIOTT_POLL_INTERVAL": "poll_interval",
            "SWIOTT_COMMAND_SPACING": "command_spacing",
        }
        for env_key, field_name in _ENV_TIMING_MAP.items():
            val = env.get(env_key)
            if val is not None:
                timing_kwargs[field_name] = float(val)

        # Allow overriding timing fields via a nested dict
        timing_overrides = overrides.pop("timing", None)
        if isinstance(timing_overrides, dict):
            timing_kwargs.update(timing_overrides)
        elif isinstance(timing_overrides, TimingProfile):
            timing_kwargs = dataclasses.asdict(timing_overrides)

        config_kwargs: dict[str, Any] = {"timing": TimingProfile(**timing_kwargs)}

        address = env.get("SWIOTT_ADDRESS")
        if address:
            config_kwargs["address"] = address

        timeout_env = env.get("SWIOTT_CONNECT_TIMEOUT")
        if timeout_env is not None and "connect_timeout" not in overrides:
            config_kwargs["connect_timeout"] = float(timeout_env)

        capacity_env = env.get("SWIOTT_LOG_CAPACITY")
        if capacity_env is not None and "log_capacity" not in overrides:
            config_kwargs["log_capacity"] = int(capacity_env)

        if "demo_mode" not in overrides:
            config_kwargs["demo_mode"] = _env_bool(env.get("SWIOTT_DEMO_MODE"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
