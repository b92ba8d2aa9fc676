from __future__ import annotations

from pyswiott._framing import LineFramer


def test_splits_on_cr_lf_and_crlf_and_drops_empty_lines() -> None:
    framer = LineFramer()

    lines = framer.feed(b"OK\r\n\r\n+SWRDTARTH:30\r+SWRDENABLE:1\n\n")

    assert lines == ["OK", "+SWRDTARTH:30", "+SWRDENABLE:1"]
    assert not framer.pending


def test_lines_are_trimmed() -> None:
    framer = LineFramer()
    assert framer.feed(b"  +NBAPN: iot.example  \r\n") == ["+NBAPN: iot.example"]


def test_partial_line_is_buffered_until_next_chunk() -> None:
    framer = LineFramer()

    assert framer.feed(b"+SWQUERY:1E32") == []
    assert framer.pending
    assert framer.feed(b"0205\r\nOK") == ["+SWQUERY:1E320205"]
    assert framer.feed(b"\r\n") == ["OK"]


def test_crlf_split_across_chunks_yields_one_line() -> None:
    framer = LineFramer()

    assert framer.feed(b"OK\r") == ["OK"]
    assert framer.feed(b"\nERROR\r\n") == ["ERROR"]


def test_multibyte_character_split_across_chunks() -> None:
    framer = LineFramer()
    encoded = "+NBAPN:café\r\n".encode()
    split_at = encoded.index(b"\xc3") + 1

    assert framer.feed(encoded[:split_at]) == []
    assert framer.feed(encoded[split_at:]) == ["+NBAPN:café"]


def test_invalid_utf8_is_replaced_not_raised() -> None:
    framer = LineFramer()
    assert framer.feed(b"+NBAPN:\xff\xfe\r\n") == ["+NBAPN:\ufffd\ufffd"]


def test_flush_returns_unterminated_line() -> None:
    framer = LineFramer()
    framer.feed(b"OK")

    assert framer.flush() == ["OK"]
    assert framer.flush() == []
    assert not framer.pending


def test_reset_discards_partial_line() -> None:
    framer = LineFramer()
    framer.feed(b"+SWRDSTATUS:1,2")
    framer.reset()

    assert framer.feed(b"OK\r\n") == ["OK"]
