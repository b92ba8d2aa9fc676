"""Long-running device operation state."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class OperationKind(StrEnum):
    CALIBRATING = "calibrating"
    REBOOTING = "rebooting"


class OperationOutcome(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class OperationState(BaseModel):
    """An active calibration or reboot.

    ``outcome`` stays ``None`` while the device is still working.  Once
    the operation ends the state lingers with its final message until the
    display delay elapses and the tracker returns to idle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: OperationKind
    message: str
    started_at: float
    """Event-loop timestamp at which the operation started."""
    deadline: float
    """Event-loop timestamp after which the operation is timed out."""
    outcome: OperationOutcome | None = None

    @property
    def is_running(self) -> bool:
        return self.outcome is None
