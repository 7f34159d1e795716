"""Tests for menu navigation: selection, paging, Back/Forward and line fallback."""

import pytest

from uhf_tui.cli.console import parse_choice
from uhf_tui.cli.navigation import BACK, FORWARD, NavKind, NavResult, PageWindow

UP = b"\x1b[A"
DOWN = b"\x1b[B"
RIGHT = b"\x1b[C"
LEFT = b"\x1b[D"
ENTER = b"\r"
ESC = b"\x1b"

OPTIONS = ["A", "B", "C"]


class TestNavResult:
    """Tests for NavResult."""

    def test_selected(self) -> None:
        result = NavResult.selected(2)
        assert result.is_selected
        assert result.index == 2
        assert repr(result) == "Selected(2)"

    def test_back_and_forward(self) -> None:
        assert BACK.is_back and BACK.kind is NavKind.BACK
        assert FORWARD.is_forward
        assert repr(BACK) == "Back"
        assert repr(FORWARD) == "Forward"

    def test_resolve(self) -> None:
        assert NavResult.selected(1).resolve(5) == 1
        assert FORWARD.resolve(5) == 5
        assert BACK.resolve(5) is None

    def test_equality(self) -> None:
        assert NavResult.selected(0) == NavResult.selected(0)
        assert NavResult(NavKind.BACK) == BACK


class TestSelectOption:
    """Raw-mode select_option."""

    def test_down_down_enter(self, make_console) -> None:
        h = make_console(DOWN + DOWN + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(2)

    def test_left_is_back(self, make_console) -> None:
        h = make_console(LEFT)
        assert h.ui.select_option("Menu", OPTIONS, 0) == BACK

    def test_right_is_forward(self, make_console) -> None:
        h = make_console(DOWN + RIGHT)
        assert h.ui.select_option("Menu", OPTIONS, 0) == FORWARD
        assert h.ui.last_menu_index == 1

    def test_eof_accepts_default(self, make_console) -> None:
        h = make_console(b"")
        assert h.ui.select_option("Menu", OPTIONS, 1) == NavResult.selected(1)

    def test_escape_accepts_current(self, make_console) -> None:
        h = make_console(DOWN + ESC)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(1)

    def test_vi_keys(self, make_console) -> None:
        h = make_console(b"jjk" + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(1)

    @pytest.mark.parametrize("n", [2, 3, 5])
    def test_down_wraps_around(self, make_console, n: int) -> None:
        options = [f"opt{i}" for i in range(n)]
        h = make_console(DOWN * n + ENTER)
        assert h.ui.select_option("Menu", options, 0) == NavResult.selected(0)

    @pytest.mark.parametrize("n", [2, 4])
    def test_up_wraps_around(self, make_console, n: int) -> None:
        options = [f"opt{i}" for i in range(n)]
        h = make_console(UP * n + ENTER)
        assert h.ui.select_option("Menu", options, 1) == NavResult.selected(1)

    def test_up_from_first_goes_to_last(self, make_console) -> None:
        h = make_console(UP + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(2)

    def test_digit_jumps(self, make_console) -> None:
        h = make_console(b"3" + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(2)

    def test_digit_out_of_range_is_ignored(self, make_console) -> None:
        h = make_console(b"9" + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 1) == NavResult.selected(1)

    def test_malformed_sequence_ignored(self, make_console) -> None:
        h = make_console(b"\x1b[Z" + DOWN + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(1)

    def test_default_is_clamped(self, make_console) -> None:
        h = make_console(ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 10) == NavResult.selected(2)

    def test_empty_options_rejected(self, make_console) -> None:
        h = make_console(ENTER)
        with pytest.raises(ValueError):
            h.ui.select_option("Menu", [], 0)

    def test_broken_utf8_does_not_hide_enter(self, make_console) -> None:
        h = make_console(b"\xc3" + ENTER + DOWN + ENTER)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(0)

    def test_raw_mode_released(self, make_console) -> None:
        h = make_console(ENTER)
        h.ui.select_option("Menu", OPTIONS, 0)
        assert h.terminal.entered == 1
        assert h.terminal.restored == 1
        assert not h.terminal.is_raw


class TestRawModeReleasedOnError:
    """Raw mode is released when reading keys raises."""

    def assert_released(self, h) -> None:
        assert h.terminal.entered >= 1
        assert h.terminal.restored == h.terminal.entered
        assert not h.terminal.is_raw

    def test_select_option(self, make_console) -> None:
        h = make_console()
        h.feed(DOWN, KeyboardInterrupt())
        with pytest.raises(KeyboardInterrupt):
            h.ui.select_option("Menu", OPTIONS, 0)
        self.assert_released(h)

    def test_select_option_paged(self, make_console) -> None:
        h = make_console()
        h.feed(b"", RuntimeError("stream closed"))
        with pytest.raises(RuntimeError, match="stream closed"):
            h.ui.select_option_paged("Power", [str(n) for n in range(30)], 5, 10)
        self.assert_released(h)

    def test_read_line_in_menu(self, make_console) -> None:
        h = make_console(ENTER)
        h.ui.select_option("Menu", OPTIONS, 0)
        h.feed(b"ab", RuntimeError("stream closed"))
        with pytest.raises(RuntimeError):
            h.ui.read_line_in_menu("Value: ")
        self.assert_released(h)
        assert h.terminal.entered == 2
        assert h.ui._renderer.frame.input_prompt is None

    def test_show_lines(self, make_console) -> None:
        h = make_console(ENTER)
        h.ui.select_option("Menu", OPTIONS, 0)
        h.feed(b"", KeyboardInterrupt())
        with pytest.raises(KeyboardInterrupt):
            h.ui.show_lines("About", ["one"])
        self.assert_released(h)
        assert not h.ui._overlay

    def test_view_lines_paged(self, make_console) -> None:
        h = make_console(ENTER)
        h.ui.select_option("Menu", OPTIONS, 0)
        h.feed(b"j", RuntimeError("stream closed"))
        with pytest.raises(RuntimeError):
            h.ui.view_lines_paged("README", [f"line {n}" for n in range(30)], page_size=5)
        self.assert_released(h)
        assert not h.ui._overlay


class TestPagedSelection:
    """select_option_paged and PageWindow."""

    def test_window_follows_selection(self) -> None:
        window = PageWindow(total=30, page_size=10)
        for index in list(range(30)) + list(range(29, -1, -1)):
            window.follow(index)
            assert window.start <= index < window.end
            assert 0 <= window.start <= 20

    def test_window_label(self) -> None:
        window = PageWindow(total=34, page_size=12)
        window.follow(20)
        assert window.label("Power") == "Power (10-21/34)"

    def test_window_rejects_bad_sizes(self) -> None:
        with pytest.raises(ValueError):
            PageWindow(0, 10)
        with pytest.raises(ValueError):
            PageWindow(5, 0)

    def test_paged_down_past_page(self, make_console) -> None:
        options = [f"{i} dBm" for i in range(34)]
        h = make_console(DOWN * 13 + ENTER)
        assert h.ui.select_option_paged("Power", options, 0, 12) == NavResult.selected(13)
        assert "Power (3-14/34)" in h.output

    def test_paged_digit_is_page_relative(self, make_console) -> None:
        options = [f"{i} dBm" for i in range(34)]
        h = make_console(b"2" + ENTER)
        assert h.ui.select_option_paged("Power", options, 20, 12) == NavResult.selected(10)

    def test_paged_starts_on_default(self, make_console) -> None:
        options = [f"{i} dBm" for i in range(34)]
        h = make_console(ENTER)
        assert h.ui.select_option_paged("Power", options, 30, 12) == NavResult.selected(30)
        assert "Power (20-31/34)" in h.output
        assert "> 30 dBm" in h.output

    def test_zero_page_size_rejected(self, make_console) -> None:
        h = make_console(ENTER)
        with pytest.raises(ValueError):
            h.ui.select_option_paged("List", ["a", "b"], 0, 0)
        assert not h.terminal.is_raw

    def test_paged_wraps(self, make_console) -> None:
        options = [str(i) for i in range(25)]
        h = make_console(UP + ENTER)
        assert h.ui.select_option_paged("List", options, 0, 10) == NavResult.selected(24)


class TestLineFallback:
    """Numbered-prompt fallback when raw mode is unavailable."""

    def test_prompt_format(self, make_console) -> None:
        h = make_console(b"\n", raw=False)
        h.ui.select_option("Menu", OPTIONS, 1)
        assert h.output == "Menu (1=A, 2=B, 3=C) [B]: "

    def test_number(self, make_console) -> None:
        h = make_console(b"3\n", raw=False)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(2)

    def test_label_case_insensitive(self, make_console) -> None:
        h = make_console(b"b\n", raw=False)
        assert h.ui.select_option("Menu", OPTIONS, 0) == NavResult.selected(1)

    def test_blank_and_eof_give_default(self, make_console) -> None:
        assert make_console(b"\n", raw=False).ui.select_option("M", OPTIONS, 2).index == 2
        assert make_console(b"", raw=False).ui.select_option("M", OPTIONS, 2).index == 2

    def test_paged_falls_back_too(self, make_console) -> None:
        h = make_console(b"5\n", raw=False)
        options = [str(i) for i in range(20)]
        assert h.ui.select_option_paged("List", options, 0, 10) == NavResult.selected(4)

    def test_no_raw_acquired(self, make_console) -> None:
        h = make_console(b"1\n", raw=False)
        h.ui.select_option("Menu", OPTIONS, 0)
        assert h.terminal.restored == 0

    @pytest.mark.parametrize("line, expected", [
        ("1", 0),
        (" 2 ", 1),
        ("0", 1),
        ("4", 1),
        ("c", 2),
        ("C", 2),
        ("nope", 1),
        ("", 1),
        (None, 1),
    ])
    def test_parse_choice(self, line, expected: int) -> None:
        assert parse_choice(line, OPTIONS, 1) == expected
