"""Custom exception hierarchy for pyswiott."""

from __future__ import annotations


class SwiottError(Exception):
    """Base exception for all pyswiott errors."""


class SwiottConfigError(SwiottError):
    """Invalid or missing configuration."""


class SwiottNotConnectedError(SwiottError):
    """A device command was requested while no session is connected."""


class SwiottTransportError(SwiottError):
    """Byte-pipe level failure (write, notify subscription, disconnect)."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
    ) -> None:
        self.operation = operation
        super().__init__(message)


class SwiottConnectError(SwiottTransportError):
    """Sensor discovery or connection failed."""


class SwiottDeviceNameError(SwiottConnectError):
    """The selected peripheral does not advertise a valid sensor ID.

    SWIOTT sensors advertise their 8-byte device ID as a 16 character
    hex string.  Anything else is rejected before a GATT connection is
    attempted.
    """

    def __init__(self, name: str | None) -> None:
        self.name = name
        super().__init__(f'Invalid device ID: "{name}"', operation="connect")


class SwiottFrameError(SwiottError):
    """A response line matched a known prefix but could not be decoded.

    Raised inside the AT codecs only; the decode boundary converts it into
    a :class:`pyswiott.state.events.FrameRejected` value so that a bad
    frame never escapes as an exception.
    """

    def __init__(
        self,
        message: str,
        *,
        tag: str,
        line: str = "",
    ) -> None:
        self.tag = tag
        self.line = line
        super().__init__(message)
