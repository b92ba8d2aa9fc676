"""Data models for sensor state."""

from pyswiott.models._base import SwiottBaseModel, SwiottEnum
from pyswiott.models.device_config import DeviceConfig, MountOrientation
from pyswiott.models.lora import LoRaConfig, LoRaRegion
from pyswiott.models.nbiot import NbConnectStatus, NbIotConfig
from pyswiott.models.operation import OperationKind, OperationOutcome, OperationState
from pyswiott.models.session import ConnectionState, LogDirection, LogEntry, SessionView
from pyswiott.models.telemetry import EventType, SensorTelemetry, StatusFlag

__all__ = [
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
    "SwiottBaseModel",
    "SwiottEnum",
]
