"""Status line shown at the bottom of every menu frame."""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = " | "


def compose_status(base: str, message: str) -> str:
    """Join the durable base status and the transient message."""
    if base and message:
        return f"{base}{SEPARATOR}{message}"
    return base or message


@dataclass
class StatusLine:
    """
    Durable base status plus a transient message.

    The base usually carries counters (tags seen, read rate); the message
    carries the outcome of the last action. The console owns the lock that
    serializes updates against rendering.
    """
    base: str = ""
    message: str = ""

    def set_base(self, text: str) -> None:
        self.base = text or ""

    def set_message(self, text: str) -> None:
        self.message = text or ""

    @property
    def text(self) -> str:
        return compose_status(self.base, self.message)
