"""Reassembly of the notify byte stream into response lines."""

from __future__ import annotations

import codecs
import re

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class LineFramer:
    """Split an arbitrarily chunked byte stream into trimmed text lines.

    Lines end at CR, LF or CRLF.  Empty lines are dropped.  Text after the
    last line break of a chunk is held back until the next chunk or an
    explicit :meth:`flush`.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._partial = ""

    @property
    def pending(self) -> bool:
        """Whether an unterminated line is buffered."""
        return bool(self._partial.strip())

    def feed(self, chunk: bytes | bytearray) -> list[str]:
        """Consume *chunk* and return the lines it completes."""
        text = self._partial + self._decoder.decode(bytes(chunk))
        segments = _LINE_BREAK.split(text)
        # A trailing CR may be the first half of a CRLF split across chunks;
        # the leftover LF then only produces an empty line, which is dropped.
        self._partial = segments.pop()
        return [line for line in (segment.strip() for segment in segments) if line]

    def flush(self) -> list[str]:
        """Return the buffered partial line, if any, as a complete line."""
        text = self._partial + self._decoder.decode(b"", final=True)
        self._partial = ""
        line = text.strip()
        return [line] if line else []

    def reset(self) -> None:
        self._decoder.reset()
        self._partial = ""
