"""Tag reads and the running statistics shown in the status line."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class TagRead:
    """One tag observation delivered by the reader."""
    ip_addr: str
    epc: str
    mem: str = ""
    rssi: int = 0
    antenna: int = 1

    def describe(self) -> str:
        return f"EPC={self.epc} RSSI={self.rssi} ANT={self.antenna}"


class TagStats:
    """
    Total tag count and reads per second.

    The rate is the number of reads seen during the last completed one
    second window. ``on_tag`` is called from the reader's callback thread.
    """

    WINDOW = 1.0

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._total = 0
        self._since_window = 0
        self._window_start = clock()
        self._last_report = float("-inf")
        self._rate = 0

    def on_tag(self) -> bool:
        """Count one read. True when the status line is due for a refresh."""
        with self._lock:
            self._total += 1
            self._since_window += 1
            now = self._clock()
            if now - self._window_start >= self.WINDOW:
                self._rate = self._since_window
                self._since_window = 0
                self._window_start = now
            if now - self._last_report >= self.WINDOW:
                self._last_report = now
                return True
            return False

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def rate(self) -> int:
        with self._lock:
            return self._rate

    def status_line(self) -> str:
        with self._lock:
            return f"Tags: {self._total} | Rate: {self._rate}/s"
