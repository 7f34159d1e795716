"""Tests for in-menu line editing and confirmation prompts."""

from uhf_tui.cli.core.ansi_text import CLEAR_LINE
from uhf_tui.cli.widgets.menu_frame import Hint

ENTER = b"\r"
ESC = b"\x1b"
LEFT = b"\x1b[D"
UP = b"\x1b[A"
BACKSPACE = b"\x7f"

OPTIONS = ["A", "B"]


def with_menu(make_console, keys: bytes):
    """Console whose first Enter accepts a menu, leaving its frame on screen."""
    h = make_console(ENTER + keys)
    h.ui.select_option("Menu", OPTIONS, 0)
    return h


class TestReadLineInMenu:
    """Editing inside an active frame."""

    def test_backspace_then_enter(self, make_console) -> None:
        h = with_menu(make_console, b"abc" + BACKSPACE + BACKSPACE + ENTER)
        assert h.ui.read_line_in_menu("Value: ") == "a"

    def test_backspace_on_empty_is_ignored(self, make_console) -> None:
        h = with_menu(make_console, BACKSPACE + b"z" + ENTER)
        assert h.ui.read_line_in_menu("Value: ") == "z"

    def test_escape_returns_default(self, make_console) -> None:
        h = with_menu(make_console, b"ab" + ESC)
        assert h.ui.read_line_in_menu("Value: ", default="dflt") == "dflt"

    def test_end_of_input_accepts_buffer(self, make_console) -> None:
        h = with_menu(make_console, b"xy")
        assert h.ui.read_line_in_menu("Value: ") == "xy"

    def test_utf8_input(self, make_console) -> None:
        h = with_menu(make_console, "né".encode("utf-8") + ENTER)
        assert h.ui.read_line_in_menu("Name: ") == "né"

    def test_each_key_rewrites_input_row(self, make_console) -> None:
        h = with_menu(make_console, b"ab" + ENTER)
        h.ui.read_line_in_menu("Value: ")
        assert "\r" + CLEAR_LINE + "| Value: a " in h.output
        assert "\r" + CLEAR_LINE + "| Value: ab " in h.output

    def test_frame_restored_after_edit(self, make_console) -> None:
        h = with_menu(make_console, b"ab" + ENTER)
        h.ui.read_line_in_menu("Value: ")
        frame = h.ui._renderer.frame
        assert frame is not None
        assert frame.input_prompt is None
        assert frame.hint is Hint.SELECT
        assert h.terminal.entered == h.terminal.restored == 2


class TestReadLineInMenuOrBack:
    """Cancellable editing."""

    def test_escape_is_back(self, make_console) -> None:
        h = with_menu(make_console, b"ab" + ESC)
        assert h.ui.read_line_in_menu_or_back("Value: ") is None

    def test_arrow_is_back(self, make_console) -> None:
        h = with_menu(make_console, b"x" + LEFT)
        assert h.ui.read_line_in_menu_or_back("Value: ") is None

    def test_up_arrow_is_back_too(self, make_console) -> None:
        h = with_menu(make_console, UP)
        assert h.ui.read_line_in_menu_or_back("Value: ") is None

    def test_enter_returns_text(self, make_console) -> None:
        h = with_menu(make_console, b"10.0.0.5" + ENTER)
        assert h.ui.read_line_in_menu_or_back("IP: ") == "10.0.0.5"

    def test_broken_utf8_does_not_hide_arrow(self, make_console) -> None:
        h = with_menu(make_console, b"ab\xe2" + LEFT + b"cd" + ENTER)
        assert h.ui.read_line_in_menu_or_back("Value: ") is None

    def test_broken_utf8_does_not_hide_enter(self, make_console) -> None:
        h = with_menu(make_console, b"ab\xc3" + ENTER + b"cd")
        assert h.ui.read_line_in_menu_or_back("Value: ") == "ab"


class TestPlainLineInput:
    """No active frame: a cooked prompt."""

    def test_prompt_and_line(self, make_console) -> None:
        h = make_console(b"bob\n")
        assert h.ui.read_line_in_menu("Name: ") == "bob"
        assert h.output == "Name: "

    def test_end_of_input_is_empty(self, make_console) -> None:
        h = make_console(b"")
        assert h.ui.read_line_in_menu("Name: ", default="x") == ""


class TestConfirm:
    """YES confirmation."""

    def test_accepts_yes_any_case(self, make_console) -> None:
        for answer in (b"YES", b"yes", b" Yes "):
            h = with_menu(make_console, answer + ENTER)
            assert h.ui.confirm("Write tag?") is True

    def test_rejects_other_answers(self, make_console) -> None:
        for answer in (b"y", b"no", b""):
            h = with_menu(make_console, answer + ENTER)
            assert h.ui.confirm("Write tag?") is False

    def test_escape_rejects(self, make_console) -> None:
        h = with_menu(make_console, b"YES" + ESC)
        assert h.ui.confirm("Write tag?") is False

    def test_plain_prompt_text(self, make_console) -> None:
        h = make_console(b"YES\n")
        assert h.ui.confirm("Kill tag?") is True
        assert h.output == "Kill tag? Type YES to continue: "
