"""Tests for keystroke decoding."""

import io

from uhf_tui.cli.core.input import END_OF_INPUT, InputDecoder, Key, KeyEvent


def decode_all(data: bytes) -> list[KeyEvent]:
    decoder = InputDecoder(io.BytesIO(data))
    events = []
    while True:
        event = decoder.next_event()
        events.append(event)
        if event.key is Key.EOF:
            return events


def keys_of(data: bytes) -> list:
    return [e.key if e.key is not None else e.char for e in decode_all(data)]


class TestSimpleKeys:
    """Single-byte keys."""

    def test_enter_variants(self) -> None:
        assert keys_of(b"\r\n") == [Key.ENTER, Key.ENTER, Key.EOF]

    def test_backspace_variants(self) -> None:
        assert keys_of(b"\x7f\x08") == [Key.BACKSPACE, Key.BACKSPACE, Key.EOF]

    def test_printable_chars(self) -> None:
        assert keys_of(b"jk7") == ["j", "k", "7", Key.EOF]

    def test_control_bytes_skipped(self) -> None:
        assert keys_of(b"\x01a\x02") == ["a", Key.EOF]

    def test_empty_input_is_eof(self) -> None:
        assert decode_all(b"") == [END_OF_INPUT]


class TestEscapeSequences:
    """ESC-prefixed input."""

    def test_arrows(self) -> None:
        data = b"\x1b[A\x1b[B\x1b[C\x1b[D"
        assert keys_of(data) == [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT, Key.EOF]

    def test_arrow_raw_bytes(self) -> None:
        assert decode_all(b"\x1b[D")[0].raw == b"\x1b[D"

    def test_lone_escape_at_end(self) -> None:
        assert keys_of(b"\x1b") == [Key.ESCAPE, Key.EOF]

    def test_escape_consumes_following_byte(self) -> None:
        assert keys_of(b"\x1bxa") == [Key.ESCAPE, "a", Key.EOF]

    def test_unknown_final_byte_discarded(self) -> None:
        assert keys_of(b"\x1b[Zq") == ["q", Key.EOF]

    def test_truncated_sequence_is_eof(self) -> None:
        assert keys_of(b"\x1b[") == [Key.EOF]


class TestMultibyte:
    """UTF-8 input."""

    def test_two_byte_char(self) -> None:
        events = decode_all("é".encode("utf-8"))
        assert events[0].char == "é"
        assert events[0].is_char

    def test_three_byte_char(self) -> None:
        assert keys_of("€x".encode("utf-8")) == ["€", "x", Key.EOF]

    def test_stray_continuation_byte_skipped(self) -> None:
        assert keys_of(b"\x80a") == ["a", Key.EOF]

    def test_broken_lead_keeps_enter(self) -> None:
        assert keys_of(b"\xc3\r") == [Key.ENTER, Key.EOF]

    def test_broken_lead_keeps_escape_sequence(self) -> None:
        assert keys_of(b"\xe2\x1b[A") == [Key.UP, Key.EOF]
        assert keys_of(b"\xe2\x82\x1b[B") == [Key.DOWN, Key.EOF]

    def test_broken_lead_keeps_next_char(self) -> None:
        assert keys_of(b"\xf0\x9fa") == ["a", Key.EOF]

    def test_truncated_char_at_end_of_input(self) -> None:
        assert keys_of(b"\xe2\x82") == [Key.EOF]


class TestReadLine:
    """Cooked line reading."""

    def test_reads_until_newline(self) -> None:
        decoder = InputDecoder(io.BytesIO(b"first\nsecond\n"))
        assert decoder.read_line() == "first"
        assert decoder.read_line() == "second"
        assert decoder.read_line() is None

    def test_strips_carriage_return(self) -> None:
        assert InputDecoder(io.BytesIO(b"abc\r\n")).read_line() == "abc"

    def test_partial_line_at_eof(self) -> None:
        assert InputDecoder(io.BytesIO(b"tail")).read_line() == "tail"

    def test_read_error_is_eof(self) -> None:
        stream = io.BytesIO(b"data")
        stream.close()
        decoder = InputDecoder(stream)
        assert decoder.read_byte() is None
        assert decoder.next_event() == END_OF_INPUT
