"""Interactive console - menus, in-menu line editing, message boxes, status."""

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime
from typing import BinaryIO, Callable, Iterable, Optional, Sequence, TextIO, TypeVar

from uhf_tui.cli.core.ansi_text import CLEAR_LINE
from uhf_tui.cli.core.input import ARROWS, InputDecoder, Key, KeyEvent
from uhf_tui.cli.core.terminal import StyleProfile, TerminalModeController, TerminalSizeProbe
from uhf_tui.cli.navigation import BACK, FORWARD, NavResult, PageWindow
from uhf_tui.cli.renderer import ColumnSource, MenuRenderer
from uhf_tui.cli.widgets.base import BoxWidget
from uhf_tui.cli.widgets.menu_frame import Hint, MenuFrame
from uhf_tui.cli.widgets.message_box import MessageBox, PagedMessageBox
from uhf_tui.cli.widgets.status_bar import StatusLine

logger = logging.getLogger(__name__)

T = TypeVar("T")

MOVE_UP_CHARS = frozenset("kK")
MOVE_DOWN_CHARS = frozenset("jJ")
JUMP_DIGITS = frozenset("123456789")
ACCEPT_KEYS = frozenset({Key.ENTER, Key.ESCAPE, Key.EOF})
CLOSE_KEYS = frozenset({Key.ENTER, Key.ESCAPE, Key.EOF})
PAGER_CLOSE_KEYS = CLOSE_KEYS | {Key.LEFT}
SPINNER_FRAMES = "|/-\\"
CONFIRM_WORD = "YES"


def parse_choice(line: Optional[str], options: Sequence[str], default_index: int) -> int:
    """Parse a line-mode menu answer: 1-based number or exact option name."""
    if line is None:
        return default_index
    text = line.strip()
    if not text:
        return default_index
    try:
        number = int(text)
    except ValueError:
        pass
    else:
        if 1 <= number <= len(options):
            return number - 1
    lowered = text.lower()
    for i, option in enumerate(options):
        if option.lower() == lowered:
            return i
    return default_index


class ConsoleUi:
    """
    Terminal menu engine.

    One instance owns the screen state for a session: the frame currently
    drawn, the status line and the output lock. Menus are drawn as bordered
    boxes and redrawn in place; when raw input is unavailable every call
    degrades to a numbered line prompt.

    Keys inside menus:
        Up/k, Down/j    Move (wraps around)
        1-9             Jump to an option on the visible page
        Enter, Esc      Accept the highlighted option
        Left            Back
        Right           Forward

    Thread safety:
        Only the main thread reads keys. Background workers may call
        set_status_base(), set_status_message(), set_header_right() and
        print_event() at any time; those redraw under the same lock the
        navigation loop renders with.
    """

    PROMPT = "uhf> "
    SPINNER_INTERVAL = 0.1

    def __init__(
        self,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[TextIO] = None,
        terminal: Optional[TerminalModeController] = None,
        size_probe: Optional[ColumnSource] = None,
        style: Optional[StyleProfile] = None,
    ) -> None:
        self._out = stdout if stdout is not None else sys.stdout
        self._input = InputDecoder(stdin)
        self._terminal = terminal if terminal is not None else TerminalModeController()
        self._renderer = MenuRenderer(
            self._out,
            size_probe if size_probe is not None else TerminalSizeProbe(),
            style,
        )
        self._lock = threading.RLock()
        self._status = StatusLine()
        self._header_right = ""
        self._overlay = False
        self._prompt_shown = False
        self.last_menu_index = 0

    @property
    def menu_active(self) -> bool:
        return self._renderer.active

    @property
    def status_text(self) -> str:
        return self._status.text

    @property
    def input_closed(self) -> bool:
        """True once stdin has reported end of input."""
        return self._input.at_eof

    # Plain output

    def println(self, text: str = "") -> None:
        """Print a line below the menu; the menu is no longer redrawn in place."""
        with self._lock:
            self._renderer.forget()
            self._prompt_shown = False
            self._out.write(f"{text}\n")
            self._out.flush()

    def prompt(self) -> None:
        with self._lock:
            self._renderer.forget()
            self._out.write(self.PROMPT)
            self._out.flush()
            self._prompt_shown = True

    def read_line(self) -> Optional[str]:
        """Read a cooked line from stdin. None at end of input."""
        line = self._input.read_line()
        with self._lock:
            self._prompt_shown = False
        return line

    def print_event(self, text: str) -> None:
        """
        Report an asynchronous event such as a tag read.

        With a menu on screen the event goes to the status message so the
        frame stays intact; otherwise a timestamped line is printed and the
        shell prompt restored.
        """
        with self._lock:
            if self._renderer.active:
                self._status.set_message(text)
                self._refresh()
                return
            stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            if self._prompt_shown:
                self._out.write('\r' + CLEAR_LINE)
            self._out.write(f"{stamp} {text}\n")
            if self._prompt_shown:
                self._out.write(self.PROMPT)
            self._out.flush()

    def exit_menu_mode(self) -> None:
        with self._lock:
            self._renderer.forget()

    # Status

    def set_status_base(self, text: str) -> None:
        with self._lock:
            self._status.set_base(text)
            self._refresh()

    def set_status_message(self, text: str) -> None:
        with self._lock:
            self._status.set_message(text)
            self._refresh()

    def set_header_right(self, text: str) -> None:
        with self._lock:
            self._header_right = text or ""
            self._refresh()

    def _refresh(self) -> None:
        frame = self._renderer.frame
        if frame is None or self._overlay:
            return
        self._draw(frame)

    def _draw(self, frame: MenuFrame) -> None:
        """Render frame with the current status; caller holds the lock."""
        frame.status_base = self._status.base
        frame.status_message = self._status.message
        frame.header_right = self._header_right
        self._renderer.render(frame, not self._renderer.active)

    # Navigation

    def select_option(
        self,
        label: str,
        options: Sequence[str],
        default_index: int = 0,
    ) -> NavResult:
        """Pick one option from a short list."""
        return self._navigate(label, list(options), default_index, None)

    def select_option_paged(
        self,
        label: str,
        options: Sequence[str],
        default_index: int = 0,
        page_size: int = 10,
    ) -> NavResult:
        """Pick one option from a long list shown page_size rows at a time."""
        return self._navigate(label, list(options), default_index, page_size)

    def _navigate(
        self,
        label: str,
        options: list[str],
        default_index: int,
        page_size: Optional[int],
    ) -> NavResult:
        if not options:
            raise ValueError("a menu needs at least one option")
        total = len(options)
        index = min(max(default_index, 0), total - 1)

        with self._terminal.raw() as raw:
            if not raw:
                return NavResult.selected(self._select_by_line(label, options, index))

            window = PageWindow(total, total if page_size is None else page_size)
            window.follow(index)
            frame = MenuFrame(label=label, options=options[:1])
            self._show_page(frame, label, options, index, window, page_size is not None)

            while True:
                event = self._input.next_event()
                key = event.key
                if key in ACCEPT_KEYS:
                    return NavResult.selected(index)
                if key is Key.LEFT:
                    return BACK
                if key is Key.RIGHT:
                    return FORWARD
                if key is Key.UP or event.char in MOVE_UP_CHARS:
                    index = (index - 1) % total
                elif key is Key.DOWN or event.char in MOVE_DOWN_CHARS:
                    index = (index + 1) % total
                elif event.char in JUMP_DIGITS:
                    offset = int(event.char) - 1
                    if offset >= window.visible_count:
                        continue
                    index = window.start + offset
                else:
                    continue
                window.follow(index)
                self._show_page(frame, label, options, index, window, page_size is not None)

    def _show_page(
        self,
        frame: MenuFrame,
        label: str,
        options: list[str],
        index: int,
        window: PageWindow,
        paged: bool,
    ) -> None:
        with self._lock:
            frame.label = window.label(label) if paged else label
            frame.options = options[window.start:window.end]
            frame.selected_index = index - window.start
            self.last_menu_index = index
            self._draw(frame)

    def _select_by_line(self, label: str, options: list[str], default_index: int) -> int:
        choices = ", ".join(f"{i}={option}" for i, option in enumerate(options, 1))
        with self._lock:
            self._renderer.forget()
            self._out.write(f"{label} ({choices}) [{options[default_index]}]: ")
            self._out.flush()
        choice = parse_choice(self._input.read_line(), options, default_index)
        self.last_menu_index = choice
        return choice

    def confirm(self, message: str) -> bool:
        """Ask for an explicit YES before a destructive action."""
        answer = self.read_line_in_menu_or_back(f"{message} Type {CONFIRM_WORD} to continue: ")
        return answer is not None and answer.strip().upper() == CONFIRM_WORD

    # Line editing

    def read_line_in_menu(self, prompt: str, default: str = "") -> str:
        """Edit a value in the menu's input row; cancelling yields default."""
        line = self._edit_line(prompt)
        return default if line is None else line

    def read_line_in_menu_or_back(self, prompt: str) -> Optional[str]:
        """Edit a value in the menu's input row; None when the user cancels."""
        return self._edit_line(prompt)

    def _edit_line(self, prompt: str) -> Optional[str]:
        with self._lock:
            frame = self._renderer.frame
        if frame is None:
            return self._read_line_plain(prompt)

        with self._terminal.raw() as raw:
            if not raw:
                return self._read_line_plain(prompt)
            previous_hint = frame.hint
            with self._lock:
                frame.input_prompt = prompt
                frame.input_buffer = ""
                frame.hint = Hint.EDIT
                self._draw(frame)
            try:
                return self._edit_loop(frame)
            finally:
                with self._lock:
                    frame.input_prompt = None
                    frame.input_buffer = ""
                    frame.hint = previous_hint
                    if self._renderer.frame is frame:
                        self._draw(frame)

    def _edit_loop(self, frame: MenuFrame) -> Optional[str]:
        while True:
            event = self._input.next_event()
            key = event.key
            if key is Key.ENTER or key is Key.EOF:
                return frame.input_buffer
            if key is Key.ESCAPE or key in ARROWS:
                return None
            if key is Key.BACKSPACE:
                if not frame.input_buffer:
                    continue
                buffer = frame.input_buffer[:-1]
            elif event.is_char:
                buffer = frame.input_buffer + event.char
            else:
                continue
            with self._lock:
                frame.input_buffer = buffer
                if self._renderer.frame is frame and not self._overlay:
                    self._renderer.rewrite_input_row(frame)

    def _read_line_plain(self, prompt: str) -> str:
        with self._lock:
            self._renderer.forget()
            self._out.write(prompt)
            self._out.flush()
        line = self._input.read_line()
        return "" if line is None else line

    # Message boxes

    def show_lines(self, title: str, lines: Iterable[str]) -> None:
        """Show text in a box over the menu until Enter or Esc."""
        lines = list(lines)
        if not self.menu_active:
            self._print_block(title, lines)
            return
        with self._terminal.raw() as raw:
            if not raw:
                self._print_block(title, lines)
                return
            self._run_overlay(MessageBox(title, lines), CLOSE_KEYS)

    def view_lines_paged(self, title: str, lines: Iterable[str], page_size: int = 12) -> None:
        """Scrollable text viewer drawn over the menu."""
        lines = list(lines)
        box = PagedMessageBox(title, lines, page_size=page_size)
        if not self.menu_active:
            self._print_block(title, lines)
            return

        def scroll(event: KeyEvent) -> bool:
            if event.key is Key.UP or event.char in MOVE_UP_CHARS:
                box.scroll(-1)
            elif event.key is Key.DOWN or event.char in MOVE_DOWN_CHARS:
                box.scroll(1)
            else:
                return False
            return True

        with self._terminal.raw() as raw:
            if not raw:
                self._print_block(title, lines)
                return
            self._run_overlay(box, PAGER_CLOSE_KEYS, scroll)

    def _run_overlay(
        self,
        box: BoxWidget,
        close_keys: frozenset,
        on_key: Optional[Callable[[KeyEvent], bool]] = None,
    ) -> None:
        with self._lock:
            frame = self._renderer.frame
            self._overlay = True
            self._renderer.render_overlay(box)
        try:
            while True:
                event = self._input.next_event()
                if event.key in close_keys:
                    return
                if on_key is not None and on_key(event):
                    with self._lock:
                        self._renderer.render_overlay(box)
        finally:
            with self._lock:
                self._overlay = False
                if frame is not None and self._renderer.frame is frame:
                    self._draw(frame)

    def _print_block(self, title: str, lines: list[str]) -> None:
        with self._lock:
            self._renderer.forget()
            self._prompt_shown = False
            self._out.write(f"{title}\n")
            for line in lines:
                self._out.write(f"{line}\n")
            self._out.flush()

    # Long-running work

    def run_with_spinner(self, label: str, work: Callable[[], T]) -> T:
        """
        Run blocking work on a worker thread while animating a spinner.

        The spinner lives in the status line when a menu is on screen, or on
        its own line otherwise. Returns the work's result; an exception raised
        by the work is re-raised here.
        """
        outcome: dict = {}
        done = threading.Event()

        def target() -> None:
            try:
                outcome["value"] = work()
            except Exception as exc:
                outcome["error"] = exc
            finally:
                done.set()

        with self._lock:
            previous = self._status.message
        worker = threading.Thread(target=target, name="console-spinner", daemon=True)
        worker.start()
        tick = 0
        while not done.wait(self.SPINNER_INTERVAL):
            self._spin(f"{label} {SPINNER_FRAMES[tick % len(SPINNER_FRAMES)]}")
            tick += 1
        worker.join()

        with self._lock:
            if self._renderer.active:
                self._status.set_message(previous)
                self._refresh()
            elif tick:
                self._out.write('\r' + CLEAR_LINE)
                self._out.flush()
        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("value")

    def _spin(self, text: str) -> None:
        with self._lock:
            if self._renderer.active:
                self._status.set_message(text)
                self._refresh()
            else:
                self._out.write('\r' + CLEAR_LINE + text)
                self._out.flush()
