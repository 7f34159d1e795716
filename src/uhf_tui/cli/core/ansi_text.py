"""ANSI text utilities - fitting text to a width and cursor control sequences."""

from __future__ import annotations

CLEAR_LINE = '\x1b[2K'
CLEAR_BELOW = '\x1b[J'


def fit(s: str, width: int) -> str:
    """Truncate if too long, pad if too short. Always returns exactly width chars."""
    if width <= 0:
        return ""
    if len(s) > width:
        return s[:width]
    return s + ' ' * (width - len(s))


def fit_tail(s: str, width: int) -> str:
    """Like fit(), but keeps the end of an over-long string visible."""
    if width <= 0:
        return ""
    if len(s) > width:
        return s[len(s) - width:]
    return s + ' ' * (width - len(s))


def split_row(left: str, right: str, width: int) -> str:
    """Left-aligned and right-aligned text on one row; right is dropped if it can't fit."""
    if right and len(left) + 1 + len(right) <= width:
        return left + ' ' * (width - len(left) - len(right)) + right
    return fit(left, width)


def cursor_up(rows: int) -> str:
    return f'\x1b[{rows}A' if rows > 0 else ''


def cursor_down(rows: int) -> str:
    return f'\x1b[{rows}B' if rows > 0 else ''


def cursor_column(col: int) -> str:
    """Move to 1-based column on the current row."""
    return f'\x1b[{max(1, col)}G'
