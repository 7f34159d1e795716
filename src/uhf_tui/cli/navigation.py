"""Navigation results and the sliding window used by paged menus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NavKind(Enum):
    SELECTED = "selected"
    BACK = "back"
    FORWARD = "forward"


@dataclass(frozen=True)
class NavResult:
    """
    Outcome of a menu interaction.

    ``Selected(index)`` carries the chosen option. ``Back`` asks the caller to
    leave the current menu; ``Forward`` asks it to repeat or advance, using
    the index rendered last (``ConsoleUi.last_menu_index``).
    """
    kind: NavKind
    index: Optional[int] = None

    @classmethod
    def selected(cls, index: int) -> NavResult:
        return cls(NavKind.SELECTED, index)

    @property
    def is_selected(self) -> bool:
        return self.kind is NavKind.SELECTED

    @property
    def is_back(self) -> bool:
        return self.kind is NavKind.BACK

    @property
    def is_forward(self) -> bool:
        return self.kind is NavKind.FORWARD

    def resolve(self, last_index: int) -> Optional[int]:
        """Index to act on: the selection, last_index for Forward, None for Back."""
        if self.kind is NavKind.SELECTED:
            return self.index
        if self.kind is NavKind.FORWARD:
            return last_index
        return None

    def __repr__(self) -> str:
        if self.kind is NavKind.SELECTED:
            return f"Selected({self.index})"
        return self.kind.name.capitalize()


BACK = NavResult(NavKind.BACK)
FORWARD = NavResult(NavKind.FORWARD)


class PageWindow:
    """
    Visible slice ``[start, start + page_size)`` of a long option list.

    ``follow()`` moves the window by the minimum amount needed to show an
    index, clamped to ``[0, max(0, total - page_size)]``.
    """

    def __init__(self, total: int, page_size: int) -> None:
        if total < 1:
            raise ValueError("a menu needs at least one option")
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.total = total
        self.page_size = page_size
        self.start = 0

    @property
    def end(self) -> int:
        return min(self.start + self.page_size, self.total)

    @property
    def visible_count(self) -> int:
        return self.end - self.start

    def follow(self, index: int) -> None:
        if index < self.start:
            self.start = index
        elif index >= self.start + self.page_size:
            self.start = index - self.page_size + 1
        self.start = min(max(self.start, 0), max(0, self.total - self.page_size))

    def label(self, base: str) -> str:
        return f"{base} ({self.start + 1}-{self.end}/{self.total})"
