"""Core TUI infrastructure - terminal modes, input decoding, text fitting."""

from uhf_tui.cli.core.terminal import (
    ANSI_STYLE,
    PLAIN_STYLE,
    StyleProfile,
    TerminalModeController,
    TerminalSize,
    TerminalSizeProbe,
    detect_style,
)
from uhf_tui.cli.core.input import InputDecoder, KeyEvent, Key, END_OF_INPUT

__all__ = [
    "ANSI_STYLE",
    "PLAIN_STYLE",
    "StyleProfile",
    "TerminalModeController",
    "TerminalSize",
    "TerminalSizeProbe",
    "detect_style",
    "InputDecoder",
    "KeyEvent",
    "Key",
    "END_OF_INPUT",
]
