"""Interactive console: menu engine, command shell and CLI."""

from uhf_tui.cli.console import ConsoleUi
from uhf_tui.cli.navigation import BACK, FORWARD, NavKind, NavResult, PageWindow

__all__ = ["ConsoleUi", "BACK", "FORWARD", "NavKind", "NavResult", "PageWindow"]
