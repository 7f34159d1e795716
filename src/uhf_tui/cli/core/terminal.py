"""Low-level terminal operations - raw input mode, width probing, styling."""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Optional

try:
    import termios
except ImportError:  # Windows
    termios = None

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"


@dataclass(frozen=True)
class TerminalSize:
    """Measured terminal width."""
    columns: int
    measured_at: float


class TerminalModeController:
    """
    Scoped raw (non-canonical, non-echoing) input mode on the controlling TTY.

    The controlling terminal is opened directly so the mode change works even
    when stdin/stdout are redirected. Acquisitions nest: only the outermost
    release restores the saved attributes.
    """

    def __init__(self, tty_path: str = TTY_PATH) -> None:
        self._tty_path = tty_path
        self._lock = threading.Lock()
        self._fd: Optional[int] = None
        self._saved: Optional[list] = None
        self._depth = 0

    @property
    def is_raw(self) -> bool:
        return self._depth > 0

    def enter_raw(self) -> bool:
        """Switch to raw input. Returns False when no terminal is available."""
        with self._lock:
            if self._depth:
                self._depth += 1
                return True
            if termios is None:
                logger.debug("raw mode unavailable: no termios on %s", sys.platform)
                return False
            fd: Optional[int] = None
            try:
                fd = os.open(self._tty_path, os.O_RDWR | os.O_NOCTTY)
                saved = termios.tcgetattr(fd)
                raw = termios.tcgetattr(fd)
                raw[3] &= ~(termios.ICANON | termios.ECHO)
                raw[6][termios.VMIN] = 1
                raw[6][termios.VTIME] = 0
                termios.tcsetattr(fd, termios.TCSADRAIN, raw)
            except (OSError, termios.error) as exc:
                logger.debug("raw mode unavailable on %s: %s", self._tty_path, exc)
                if fd is not None:
                    _close_quietly(fd)
                return False
            self._fd = fd
            self._saved = saved
            self._depth = 1
            return True

    def restore_normal(self) -> None:
        """Release one raw-mode acquisition. Never raises."""
        with self._lock:
            if self._depth == 0:
                return
            self._depth -= 1
            if self._depth:
                return
            fd, saved = self._fd, self._saved
            self._fd = None
            self._saved = None
        if fd is None:
            return
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (OSError, termios.error) as exc:
            logger.debug("failed to restore terminal mode: %s", exc)
        finally:
            _close_quietly(fd)

    @contextmanager
    def raw(self) -> Iterator[bool]:
        """Context manager yielding whether raw mode is active."""
        ok = self.enter_raw()
        try:
            yield ok
        finally:
            if ok:
                self.restore_normal()


class TerminalSizeProbe:
    """Terminal column count, cached for a short time."""

    TTL = 1.0
    DEFAULT_COLUMNS = 80

    def __init__(
        self,
        tty_path: str = TTY_PATH,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tty_path = tty_path
        self._clock = clock
        self._cached: Optional[TerminalSize] = None

    def columns(self) -> int:
        now = self._clock()
        if self._cached is not None and now - self._cached.measured_at < self.TTL:
            return self._cached.columns
        self._cached = TerminalSize(self._measure(), now)
        return self._cached.columns

    def _measure(self) -> int:
        try:
            fd = os.open(self._tty_path, os.O_RDONLY | os.O_NOCTTY)
        except OSError as exc:
            logger.debug("cannot open %s for size query: %s", self._tty_path, exc)
            return self.DEFAULT_COLUMNS
        try:
            columns = os.get_terminal_size(fd).columns
        except OSError as exc:
            logger.debug("terminal size query failed: %s", exc)
            return self.DEFAULT_COLUMNS
        finally:
            _close_quietly(fd)
        return columns if columns > 0 else self.DEFAULT_COLUMNS


def _close_quietly(fd: int) -> None:
    try:
        os.close(fd)
    except OSError as exc:
        logger.debug("close(%d) failed: %s", fd, exc)


# Styling

@dataclass(frozen=True)
class BoxGlyphs:
    """Characters used to draw frame borders."""
    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    tee_left: str
    tee_right: str


UNICODE_BOX = BoxGlyphs('─', '│', '┌', '┐', '└', '┘', '├', '┤')
ASCII_BOX = BoxGlyphs('-', '|', '+', '+', '+', '+', '+', '+')


@dataclass(frozen=True)
class StyleProfile:
    """Immutable rendering capabilities derived from the environment."""
    ansi_enabled: bool
    unicode_box_chars: bool
    bold: str = ""
    dim: str = ""
    reverse: str = ""
    reset: str = ""

    @property
    def glyphs(self) -> BoxGlyphs:
        return UNICODE_BOX if self.unicode_box_chars else ASCII_BOX

    def wrap(self, markup: str, text: str) -> str:
        """Surround text with markup, or return it untouched when unstyled."""
        if not markup:
            return text
        return f"{markup}{text}{self.reset}"


ANSI_STYLE = StyleProfile(
    ansi_enabled=True,
    unicode_box_chars=True,
    bold='\x1b[1m',
    dim='\x1b[2m',
    reverse='\x1b[7m',
    reset='\x1b[0m',
)

PLAIN_STYLE = StyleProfile(ansi_enabled=False, unicode_box_chars=False)

DUMB_TERMINALS = {"dumb", "unknown"}


def detect_style(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> StyleProfile:
    """
    Pick the style profile for the current environment.

    Falls back to plain ASCII when TERM is missing or dumb, when NO_COLOR is
    set, or on Windows consoles.
    """
    env = os.environ if environ is None else environ
    system = sys.platform if platform is None else platform
    term = env.get("TERM", "").strip().lower()
    if not term or term in DUMB_TERMINALS:
        return PLAIN_STYLE
    if "NO_COLOR" in env:
        return PLAIN_STYLE
    if system.startswith("win"):
        return PLAIN_STYLE
    return ANSI_STYLE
