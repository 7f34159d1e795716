"""Pytest fixtures: a fake terminal, fixed widths and an in-memory console."""

import io
from typing import Callable, Optional

import pytest

from uhf_tui.cli.console import ConsoleUi
from uhf_tui.cli.core.terminal import PLAIN_STYLE, StyleProfile, TerminalModeController
from uhf_tui.cli.renderer import MenuRenderer


class FakeTerminal(TerminalModeController):
    """Raw-mode controller that never touches a real TTY."""

    def __init__(self, available: bool = True) -> None:
        super().__init__(tty_path="/nonexistent")
        self.available = available
        self.entered = 0
        self.restored = 0

    def enter_raw(self) -> bool:
        if not self.available:
            return False
        self.entered += 1
        self._depth += 1
        return True

    def restore_normal(self) -> None:
        if self._depth:
            self._depth -= 1
            self.restored += 1


class FailingInput(io.BytesIO):
    """Byte stream that raises once its scripted keys run out."""

    def __init__(self, keys: bytes, error: BaseException) -> None:
        super().__init__(keys)
        self.error = error

    def read(self, size: Optional[int] = -1) -> bytes:
        data = super().read(size)
        if not data:
            raise self.error
        return data


class FixedColumns:
    """Size probe reporting a constant width."""

    def __init__(self, columns: int = 80) -> None:
        self.value = columns

    def columns(self) -> int:
        return self.value


class ConsoleHarness:
    """A ConsoleUi wired to scripted input and captured output."""

    def __init__(
        self,
        keys: bytes = b"",
        columns: int = 80,
        raw: bool = True,
        style: StyleProfile = PLAIN_STYLE,
    ) -> None:
        self.stdin = io.BytesIO(keys)
        self.stdout = io.StringIO()
        self.terminal = FakeTerminal(available=raw)
        self.size = FixedColumns(columns)
        self.ui = ConsoleUi(
            stdin=self.stdin,
            stdout=self.stdout,
            terminal=self.terminal,
            size_probe=self.size,
            style=style,
        )

    @property
    def output(self) -> str:
        return self.stdout.getvalue()

    def feed(self, keys: bytes, error: Optional[BaseException] = None) -> None:
        """Replace the remaining input; with error, reading past keys raises it."""
        self.stdin = io.BytesIO(keys) if error is None else FailingInput(keys, error)
        self.ui._input._stream = self.stdin
        self.ui._input.at_eof = False


@pytest.fixture
def make_console() -> Callable[..., ConsoleHarness]:
    """Factory fixture: make_console(keys, columns=80, raw=True, style=PLAIN_STYLE)."""
    def factory(
        keys: bytes = b"",
        columns: int = 80,
        raw: bool = True,
        style: Optional[StyleProfile] = None,
    ) -> ConsoleHarness:
        return ConsoleHarness(keys, columns, raw, style or PLAIN_STYLE)
    return factory


@pytest.fixture
def make_renderer() -> Callable[..., tuple]:
    """Factory fixture: make_renderer(columns=80, style=PLAIN_STYLE) -> (renderer, out)."""
    def factory(columns: int = 80, style: Optional[StyleProfile] = None) -> tuple:
        out = io.StringIO()
        return MenuRenderer(out, FixedColumns(columns), style or PLAIN_STYLE), out
    return factory
