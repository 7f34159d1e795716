"""
uhf-tui: terminal console for networked UHF RFID readers

Bordered menus redrawn in place, raw keystroke navigation, paged lists,
in-menu line editing and live status updates, with a plain line-prompt
fallback wherever raw terminal input is unavailable.

Quick Start:
    >>> from uhf_tui import ConsoleUi
    >>> ui = ConsoleUi()
    >>> result = ui.select_option("Main", ["Connect", "Scan", "Quit"])
    >>> result.resolve(ui.last_menu_index)

Features:
    - Arrow, vi-key and digit navigation with Back/Forward signals
    - Paged selection for long lists
    - Editable input row inside a live menu frame
    - Thread-safe status line for background producers
    - ANSI/Unicode or plain ASCII rendering
"""

__version__ = "0.1.0"

from uhf_tui.cli.console import ConsoleUi
from uhf_tui.cli.navigation import NavResult
from uhf_tui.config import Settings
from uhf_tui.core import ReaderInfo, Result, TagRead, TagStats

__all__ = [
    "__version__",
    "ConsoleUi",
    "NavResult",
    "Settings",
    "ReaderInfo",
    "Result",
    "TagRead",
    "TagStats",
]
