"""Message box drawn over the current menu frame."""

from __future__ import annotations

from dataclasses import dataclass, field

from uhf_tui.cli.core.terminal import StyleProfile
from uhf_tui.cli.widgets.base import BoxWidget, Row
from uhf_tui.cli.widgets.menu_frame import Hint


@dataclass(eq=False)
class MessageBox(BoxWidget):
    """Title, a block of text lines and a key hint."""
    title: str
    lines: list[str] = field(default_factory=list)
    hint: Hint = Hint.CLOSE

    def measure(self, style: StyleProfile) -> int:
        return max(
            [len(self.title), len(self.hint.text(style))]
            + [len(line) for line in self.lines]
        )

    def sections(self, width: int, style: StyleProfile) -> list[list[Row]]:
        body = [Row(line) for line in self.lines] or [Row("")]
        return [
            [Row(self.title, "bold")],
            body,
            [Row(self.hint.text(style), "dim")],
        ]


@dataclass(eq=False)
class PagedMessageBox(MessageBox):
    """A message box showing a sliding window of a long text."""
    page_size: int = 12
    offset: int = 0
    hint: Hint = Hint.SCROLL

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        self.scroll(0)

    @property
    def max_offset(self) -> int:
        return max(0, len(self.lines) - self.page_size)

    def scroll(self, delta: int) -> None:
        self.offset = min(max(self.offset + delta, 0), self.max_offset)

    @property
    def visible(self) -> list[str]:
        return self.lines[self.offset:self.offset + self.page_size]

    @property
    def heading(self) -> str:
        if not self.lines:
            return self.title
        end = min(self.offset + self.page_size, len(self.lines))
        return f"{self.title} ({self.offset + 1}-{end}/{len(self.lines)})"

    def measure(self, style: StyleProfile) -> int:
        # Measure every line so the box keeps its width while scrolling
        return max(
            [len(self.heading), len(self.hint.text(style))]
            + [len(line) for line in self.lines]
        )

    def sections(self, width: int, style: StyleProfile) -> list[list[Row]]:
        body = [Row(line) for line in self.visible]
        # Pad short pages so the box height never changes while scrolling
        height = max(1, min(self.page_size, len(self.lines)))
        body.extend(Row("") for _ in range(height - len(body)))
        return [
            [Row(self.heading, "bold")],
            body,
            [Row(self.hint.text(style), "dim")],
        ]
