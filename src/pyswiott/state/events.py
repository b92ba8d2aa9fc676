"""Normalized decode results.

Every response line is converted into one of these values by
:func:`pyswiott.ingestion.decode.decode_line`.  Only the state store is
allowed to merge :class:`StateUpdate` patches; :class:`OperationSignal`
values go to the operation tracker.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StateSection(StrEnum):
    TELEMETRY = "telemetry"
    DEVICE_CONFIG = "device_config"
    LORA = "lora"
    NBIOT = "nbiot"


class SignalKind(StrEnum):
    PROGRESS = "progress"
    OK = "ok"
    ERROR = "error"


class StateUpdate(BaseModel):
    """A partial update for one store section."""

    model_config = ConfigDict(frozen=True)

    section: StateSection
    data: dict[str, Any] = Field(default_factory=dict, description="Fields carried by the frame")
    line: str = Field(default="", description="Response line as received")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OperationSignal(BaseModel):
    """Progress or completion line for the current operation.

    The protocol carries no correlation id, so the meaning of ``OK`` and
    ``ERROR`` is resolved by the tracker from its current state.
    """

    model_config = ConfigDict(frozen=True)

    kind: SignalKind
    remaining: str | None = Field(default=None, description="Seconds left, progress frames only")
    line: str = ""


class FrameRejected(BaseModel):
    """A line with a known prefix whose payload could not be decoded."""

    model_config = ConfigDict(frozen=True)

    tag: str
    reason: str
    line: str


DecodeResult = StateUpdate | OperationSignal | FrameRejected
