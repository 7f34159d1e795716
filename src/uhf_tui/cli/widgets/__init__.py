"""Reusable TUI widgets."""

from uhf_tui.cli.widgets.base import BoxWidget, Row, clamp_width
from uhf_tui.cli.widgets.menu_frame import MenuFrame, Hint
from uhf_tui.cli.widgets.message_box import MessageBox, PagedMessageBox
from uhf_tui.cli.widgets.status_bar import StatusLine, compose_status

__all__ = [
    "BoxWidget",
    "Row",
    "clamp_width",
    "MenuFrame",
    "Hint",
    "MessageBox",
    "PagedMessageBox",
    "StatusLine",
    "compose_status",
]
