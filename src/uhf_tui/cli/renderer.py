"""In-place renderer for menu frames and the boxes drawn over them."""

from __future__ import annotations

from typing import Optional, Protocol, TextIO

from uhf_tui.cli.core.ansi_text import (
    CLEAR_BELOW,
    CLEAR_LINE,
    cursor_column,
    cursor_down,
    cursor_up,
)
from uhf_tui.cli.core.terminal import StyleProfile, detect_style
from uhf_tui.cli.widgets.base import BoxWidget, clamp_width
from uhf_tui.cli.widgets.menu_frame import INPUT_ROW_FROM_BOTTOM, MenuFrame


class ColumnSource(Protocol):
    def columns(self) -> int:
        ...


class MenuRenderer:
    """
    Draws bordered boxes and redraws them in place.

    The first render writes every row top to bottom. Later renders move the
    cursor back to the first row of what is on screen and overwrite it, each
    row prefixed with clear-line. When the new box is shorter or narrower,
    everything below the cursor is erased first so no stale rows remain.

    Not thread-safe on its own: callers serialize access with their output lock.
    """

    def __init__(
        self,
        out: TextIO,
        size_probe: ColumnSource,
        style: Optional[StyleProfile] = None,
    ) -> None:
        self._out = out
        self._size = size_probe
        self._style = style
        # Last menu frame drawn; kept while overlays are painted over it
        self.frame: Optional[MenuFrame] = None
        # Geometry of whatever is on screen now (frame or overlay)
        self._line_count = 0
        self._width = 0
        self._cursor_offset = 0

    @property
    def active(self) -> bool:
        return self.frame is not None

    @property
    def line_count(self) -> int:
        return self._line_count

    def style(self) -> StyleProfile:
        """Style for one render: the fixed profile, or a fresh environment check."""
        return self._style if self._style is not None else detect_style()

    def render(self, frame: MenuFrame, is_first_render: bool) -> None:
        style = self.style()
        frame.width = clamp_width(frame.measure(style), self._size.columns())
        lines = frame.render(frame.width, style)
        self._paint(lines, frame.width, is_first_render)
        frame.line_count = len(lines)
        frame.cursor_offset_from_bottom = 0
        self.frame = frame
        if frame.editing:
            self._park_in_input_row(frame)

    def render_overlay(self, box: BoxWidget) -> None:
        """Paint a box over the current frame, keeping the frame for restore."""
        style = self.style()
        width = clamp_width(box.measure(style), self._size.columns())
        self._paint(box.render(width, style), width, self._line_count == 0)

    def rewrite_input_row(self, frame: MenuFrame) -> None:
        """Redraw only the input row; the cursor must already be parked in it."""
        self._out.write(
            '\r' + CLEAR_LINE + frame.render_input_row(self.style())
            + cursor_column(frame.input_cursor_column())
        )
        self._out.flush()

    def forget(self) -> None:
        """Stop tracking the frame on screen; later output starts below it."""
        if self._cursor_offset:
            self._out.write(cursor_down(self._cursor_offset) + '\r')
            self._out.flush()
        self.frame = None
        self._line_count = 0
        self._width = 0
        self._cursor_offset = 0

    def _park_in_input_row(self, frame: MenuFrame) -> None:
        self._out.write(
            cursor_up(INPUT_ROW_FROM_BOTTOM) + cursor_column(frame.input_cursor_column())
        )
        self._out.flush()
        self._cursor_offset = INPUT_ROW_FROM_BOTTOM
        frame.cursor_offset_from_bottom = INPUT_ROW_FROM_BOTTOM

    def _paint(self, lines: list[str], width: int, is_first_render: bool) -> None:
        parts: list[str] = []
        if not is_first_render and self._line_count:
            parts.append(cursor_up(self._line_count - self._cursor_offset))
            parts.append('\r')
            if len(lines) < self._line_count or width < self._width:
                parts.append(CLEAR_BELOW)
        for line in lines:
            parts.append(CLEAR_LINE + line + '\n')
        self._out.write(''.join(parts))
        self._out.flush()
        self._line_count = len(lines)
        self._width = width
        self._cursor_offset = 0
