"""Shared helpers for AT command building and frame parsing."""

from __future__ import annotations

from pyswiott._constants import COMMAND_TERMINATOR
from pyswiott.exceptions import SwiottFrameError


def with_terminator(command: str) -> str:
    """Append CRLF unless the command already ends with it."""
    if command.endswith(COMMAND_TERMINATOR):
        return command
    return command + COMMAND_TERMINATOR


def payload_of(line: str) -> str:
    """Return everything after the first colon of a response line, trimmed."""
    _, sep, payload = line.partition(":")
    if not sep:
        return ""
    return payload.strip()


def split_fields(payload: str) -> list[str]:
    return [part.strip() for part in payload.split(",")]


def parse_int(value: str, *, tag: str, field: str) -> int:
    """Strict integer parse; raises :class:`SwiottFrameError` on failure."""
    try:
        return int(value.strip())
    except ValueError:
        raise SwiottFrameError(f"{field} is not an integer: {value!r}", tag=tag) from None
