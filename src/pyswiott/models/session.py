"""Session-level enums and the observability log entry."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SessionView(StrEnum):
    """Screen currently shown by the front end.

    Switching to :attr:`CONFIG` re-reads the radar settings.
    """

    STATUS = "status"
    CONFIG = "config"
    LOGS = "logs"


class LogDirection(StrEnum):
    INFO = "info"
    ERROR = "error"
    TX = "tx"
    RX = "rx"


class LogEntry(BaseModel):
    """One line of the session log."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    direction: LogDirection
    message: str

    def render(self) -> str:
        local = self.timestamp.astimezone()
        return f"{local:%H:%M:%S} {self.direction.value.upper():<5} {self.message}"
