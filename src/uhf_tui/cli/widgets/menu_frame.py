"""Menu frame - the bordered option list drawn by the navigation loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from uhf_tui.cli.core.ansi_text import split_row
from uhf_tui.cli.core.terminal import StyleProfile
from uhf_tui.cli.widgets.base import BoxWidget, Row, render_row
from uhf_tui.cli.widgets.status_bar import compose_status

# Rows below the input row: hint row and bottom border
INPUT_ROW_FROM_BOTTOM = 3
# Columns taken by the left border and its padding
ROW_TEXT_COLUMN = 3

OPTION_MARKER = "> "
OPTION_INDENT = "  "


class Hint(Enum):
    """Key binding hints, as (unicode, ascii) text."""
    SELECT = (
        "↑/↓ j/k move · Enter select · ← back · → forward · 1-9 jump",
        "Up/Down j/k move, Enter select, Left back, Right forward, 1-9 jump",
    )
    EDIT = (
        "Type a value · Enter accept · Esc cancel",
        "Type a value, Enter accept, Esc cancel",
    )
    CLOSE = (
        "Enter/Esc close",
        "Enter or Esc to close",
    )
    SCROLL = (
        "↑/↓ j/k scroll · Enter/Esc close",
        "Up/Down j/k scroll, Enter or Esc to close",
    )

    def text(self, style: StyleProfile) -> str:
        return self.value[0] if style.unicode_box_chars else self.value[1]


@dataclass(eq=False)
class MenuFrame(BoxWidget):
    """
    In-memory state of one rendered menu.

    Compared by identity: the renderer keeps the last frame it drew so the
    same frame can be restored after an overlay.
    """
    label: str
    options: list[str] = field(default_factory=list)
    selected_index: int = 0
    status_base: str = ""
    status_message: str = ""
    input_prompt: Optional[str] = None
    input_buffer: str = ""
    header_right: str = ""
    hint: Hint = Hint.SELECT
    # Geometry of the last render
    width: int = 0
    line_count: int = 0
    cursor_offset_from_bottom: int = 0

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError("a menu needs at least one option")
        self.selected_index = min(max(self.selected_index, 0), len(self.options) - 1)

    @property
    def status_text(self) -> str:
        return compose_status(self.status_base, self.status_message)

    @property
    def editing(self) -> bool:
        return self.input_prompt is not None

    @property
    def input_text(self) -> str:
        if self.input_prompt is None:
            return ""
        return self.input_prompt + self.input_buffer

    def measure(self, style: StyleProfile) -> int:
        title = len(self.label)
        if self.header_right:
            title += 1 + len(self.header_right)
        return max(
            title,
            len(self.hint.text(style)),
            len(self.status_text),
            len(self.input_prompt or ""),
            max(len(OPTION_INDENT) + len(option) for option in self.options),
        )

    def sections(self, width: int, style: StyleProfile) -> list[list[Row]]:
        return [
            [Row(split_row(self.label, self.header_right, width), "bold")],
            [self._option_row(i, option, style) for i, option in enumerate(self.options)],
            [
                Row(self.status_text, "dim"),
                self.input_row(),
                Row(self.hint.text(style), "dim"),
            ],
        ]

    def _option_row(self, index: int, option: str, style: StyleProfile) -> Row:
        if index != self.selected_index:
            return Row(OPTION_INDENT + option)
        if style.ansi_enabled:
            return Row(OPTION_INDENT + option, "reverse")
        return Row(OPTION_MARKER + option)

    def input_row(self) -> Row:
        return Row(self.input_text, keep_tail=True)

    def render_input_row(self, style: StyleProfile) -> str:
        return render_row(self.input_row(), self.width, style)

    def input_cursor_column(self) -> int:
        """1-based terminal column just after the typed text."""
        return ROW_TEXT_COLUMN + min(len(self.input_text), self.width)
