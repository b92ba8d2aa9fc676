"""Response-line dispatch table.

Lines are matched against :data:`_DISPATCH` in order and the first match
wins.  The order matters: ``OK`` and ``ERROR`` are exact matches checked
before any prefixed frame, and the calibration progress prefix is checked
first of all so a progress frame is never mistaken for a settings reply.

Decoding is pure: the same line always yields the same result, and a
malformed frame yields :class:`FrameRejected` instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from pyswiott._at import lora as _lora
from pyswiott._at import nbiot as _nbiot
from pyswiott._at import operation as _operation
from pyswiott._at import radar as _radar
from pyswiott._at import telemetry as _telemetry
from pyswiott._at._common import payload_of
from pyswiott.exceptions import SwiottFrameError
from pyswiott.state.events import (
    DecodeResult,
    FrameRejected,
    OperationSignal,
    SignalKind,
    StateSection,
    StateUpdate,
)

_logger = logging.getLogger(__name__)

_Decoder = Callable[[str], DecodeResult]


def _progress(line: str) -> DecodeResult:
    return OperationSignal(
        kind=SignalKind.PROGRESS,
        remaining=_operation.parse_progress(payload_of(line)),
        line=line,
    )


def _signal(kind: SignalKind, line: str) -> DecodeResult:
    return OperationSignal(kind=kind, line=line)


def _update(section: StateSection, parser: Callable[[str], dict[str, Any]], line: str) -> DecodeResult:
    return StateUpdate(section=section, data=parser(payload_of(line)), line=line)


def _exact(expected: str) -> Callable[[str], bool]:
    return lambda line: line == expected


def _prefix(*prefixes: str) -> Callable[[str], bool]:
    return lambda line: line.startswith(prefixes)


_DISPATCH: tuple[tuple[Callable[[str], bool], _Decoder], ...] = (
    (_prefix(_operation.PROGRESS_PREFIX), _progress),
    (_exact(_operation.OK_LINE), partial(_signal, SignalKind.OK)),
    (_exact(_operation.ERROR_LINE), partial(_signal, SignalKind.ERROR)),
    (
        _prefix(_telemetry.QUERY_PREFIX),
        partial(_update, StateSection.TELEMETRY, _telemetry.parse_query_frame),
    ),
    (
        _prefix(*_telemetry.STATUS_PREFIXES),
        partial(_update, StateSection.TELEMETRY, _telemetry.parse_status_frame),
    ),
    (
        _prefix(_radar.THRESHOLD_PREFIX),
        partial(_update, StateSection.DEVICE_CONFIG, _radar.parse_threshold),
    ),
    (
        _prefix(_radar.ORIENTATION_PREFIX),
        partial(_update, StateSection.DEVICE_CONFIG, _radar.parse_orientation),
    ),
    (
        _prefix(_radar.ENABLE_PREFIX),
        partial(_update, StateSection.DEVICE_CONFIG, _radar.parse_enabled),
    ),
    *(
        (
            _prefix(prefix),
            partial(_update, StateSection.LORA, partial(_lora.parse_field, field)),
        )
        for prefix, field in _lora.RESPONSE_FIELDS.items()
    ),
    (_prefix(_nbiot.APN_PREFIX), partial(_update, StateSection.NBIOT, _nbiot.parse_apn)),
    (_prefix(_nbiot.MQTT_PREFIX), partial(_update, StateSection.NBIOT, _nbiot.parse_mqtt)),
    (_prefix(_nbiot.CONNECT_PREFIX), partial(_update, StateSection.NBIOT, _nbiot.parse_connect)),
)


def decode_line(line: str) -> DecodeResult | None:
    """Decode one framed response line.

    Returns ``None`` for lines no decoder recognizes.
    """
    clean = line.strip()
    if not clean:
        return None

    for matches, decoder in _DISPATCH:
        if not matches(clean):
            continue
        try:
            return decoder(clean)
        except SwiottFrameError as exc:
            _logger.warning("%s frame rejected: %s", exc.tag, exc)
            return FrameRejected(tag=exc.tag, reason=str(exc), line=clean)

    _logger.debug("Unhandled response line: %r", clean)
    return None
