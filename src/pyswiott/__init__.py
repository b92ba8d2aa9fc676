"""pyswiott - Async Python client for SWIOTT BLE parking sensors."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyswiott")
except PackageNotFoundError:
    __version__ = "0+local"
from pyswiott.client import SwiottClient
from pyswiott.config import SwiottConfig, TimingProfile
from pyswiott.exceptions import (
    SwiottConfigError,
    SwiottConnectError,
    SwiottDeviceNameError,
    SwiottError,
    SwiottFrameError,
    SwiottNotConnectedError,
    SwiottTransportError,
)
from pyswiott.models import (
    ConnectionState,
    DeviceConfig,
    EventType,
    LogDirection,
    LogEntry,
    LoRaConfig,
    LoRaRegion,
    MountOrientation,
    NbConnectStatus,
    NbIotConfig,
    OperationKind,
    OperationOutcome,
    OperationState,
    SensorTelemetry,
    SessionView,
    StatusFlag,
)

__all__ = [
    "__version__",
    "ConnectionState",
    "DeviceConfig",
    "EventType",
    "LoRaConfig",
    "LoRaRegion",
    "LogDirection",
    "LogEntry",
    "MountOrientation",
    "NbConnectStatus",
    "NbIotConfig",
    "OperationKind",
    "OperationOutcome",
    "OperationState",
    "SensorTelemetry",
    "SessionView",
    "StatusFlag",
    "SwiottClient",
    "SwiottConfig",
    "SwiottConfigError",
    "SwiottConnectError",
    "SwiottDeviceNameError",
    "SwiottError",
    "SwiottFrameError",
    "SwiottNotConnectedError",
    "SwiottTransportError",
    "TimingProfile",
]
