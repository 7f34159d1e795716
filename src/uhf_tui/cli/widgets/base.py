"""Bordered-box widget base and content width bounds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from uhf_tui.cli.core.ansi_text import fit, fit_tail
from uhf_tui.cli.core.terminal import StyleProfile

MIN_CONTENT_FLOOR = 50
MAX_CONTENT_FLOOR = 20
MIN_CONTENT_RATIO = 0.7
# Border plus one space of padding on each side
BOX_CHROME = 4


def content_bounds(columns: int) -> tuple[int, int]:
    """(min, max) content width for a terminal of the given width."""
    min_width = max(MIN_CONTENT_FLOOR, int(columns * MIN_CONTENT_RATIO))
    max_width = max(MAX_CONTENT_FLOOR, columns - BOX_CHROME)
    return min_width, max_width


def clamp_width(widest: int, columns: int) -> int:
    """Clamp a content width into the bounds; the upper bound wins if they cross."""
    min_width, max_width = content_bounds(columns)
    return min(max(widest, min_width), max_width)


@dataclass(frozen=True)
class Row:
    """One content row of a box."""
    text: str
    markup: str = ""  # StyleProfile attribute: "bold", "dim" or "reverse"
    keep_tail: bool = False  # Truncate from the left instead of the right


class BoxWidget(ABC):
    """A bordered box made of sections separated by horizontal rules."""

    @abstractmethod
    def measure(self, style: StyleProfile) -> int:
        """Natural content width before clamping."""
        pass

    @abstractmethod
    def sections(self, width: int, style: StyleProfile) -> list[list[Row]]:
        """Subclasses must provide their rows, grouped into sections."""
        pass

    def render(self, width: int, style: StyleProfile) -> list[str]:
        g = style.glyphs
        rule = g.horizontal * (width + 2)
        lines = [g.top_left + rule + g.top_right]
        for i, section in enumerate(self.sections(width, style)):
            if i:
                lines.append(g.tee_left + rule + g.tee_right)
            lines.extend(render_row(row, width, style) for row in section)
        lines.append(g.bottom_left + rule + g.bottom_right)
        return lines


def render_row(row: Row, width: int, style: StyleProfile) -> str:
    """Render a single bordered row at exactly width content columns."""
    body = fit_tail(row.text, width) if row.keep_tail else fit(row.text, width)
    markup = getattr(style, row.markup) if row.markup else ""
    bar = style.glyphs.vertical
    return f"{bar} {style.wrap(markup, body)} {bar}"
