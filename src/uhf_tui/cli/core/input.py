"""Keyboard input decoding with event abstraction."""

from __future__ import annotations

import io
import logging
import os
import select
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class Key(Enum):
    """Named key constants."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    EOF = auto()


ARROWS = frozenset({Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT})


@dataclass(frozen=True)
class KeyEvent:
    """Represents a keyboard input event."""
    key: Optional[Key] = None  # Named key if recognized
    char: Optional[str] = None  # Character if printable
    raw: bytes = b""  # Bytes consumed for this event

    @property
    def is_char(self) -> bool:
        """Check if this is a printable character."""
        return self.char is not None and self.key is None


END_OF_INPUT = KeyEvent(key=Key.EOF)

ESC = 0x1B


class InputDecoder:
    """
    Blocking keystroke reader for raw-mode menus.

    Reads one byte at a time, from the given binary stream or straight from
    the stdin file descriptor with os.read() so Python's buffering never
    swallows the tail of an escape sequence.
    """

    # Final byte of ESC [ <final>
    SEQUENCES: dict[int, Key] = {
        ord('A'): Key.UP,
        ord('B'): Key.DOWN,
        ord('C'): Key.RIGHT,
        ord('D'): Key.LEFT,
    }

    SIMPLE_KEYS: dict[int, Key] = {
        ord('\r'): Key.ENTER,
        ord('\n'): Key.ENTER,
        0x7F: Key.BACKSPACE,
        0x08: Key.BACKSPACE,
    }

    # How long a lone ESC waits for the rest of a sequence on a real tty
    ESCAPE_TIMEOUT = 0.1

    def __init__(self, stream: Optional[BinaryIO] = None) -> None:
        self._stream = stream
        self._fd: Optional[int] = None
        self._pushback: Optional[int] = None
        self.at_eof = False

    def _stdin_fd(self) -> int:
        if self._fd is None:
            self._fd = sys.stdin.fileno()
        return self._fd

    def read_byte(self) -> Optional[int]:
        """Read one byte, blocking. Returns None at end of input."""
        if self._pushback is not None:
            b, self._pushback = self._pushback, None
            return b
        try:
            if self._stream is not None:
                data = self._stream.read(1)
            else:
                data = os.read(self._stdin_fd(), 1)
        except (OSError, ValueError) as exc:
            logger.debug("input read failed, treating as end of input: %s", exc)
            self.at_eof = True
            return None
        if not data:
            self.at_eof = True
            return None
        return data[0]

    def next_event(self) -> KeyEvent:
        """Read and decode the next logical key."""
        while True:
            b = self.read_byte()
            if b is None:
                return END_OF_INPUT
            if b in self.SIMPLE_KEYS:
                return KeyEvent(key=self.SIMPLE_KEYS[b], raw=bytes([b]))
            if b == ESC:
                event = self._parse_escape_sequence()
                if event is not None:
                    return event
                continue
            if b >= 0x80:
                event = self._decode_multibyte(b)
                if event is not None:
                    return event
                continue
            if b >= 0x20:
                return KeyEvent(char=chr(b), raw=bytes([b]))
            # Unknown control byte - skip it

    def _parse_escape_sequence(self) -> Optional[KeyEvent]:
        """Decode the bytes after ESC. None means the sequence was discarded."""
        if not self._has_pending(self.ESCAPE_TIMEOUT):
            return KeyEvent(key=Key.ESCAPE, raw=b'\x1b')

        b = self.read_byte()
        if b is None:
            return KeyEvent(key=Key.ESCAPE, raw=b'\x1b')
        if b != ord('['):
            return KeyEvent(key=Key.ESCAPE, raw=bytes([ESC, b]))

        final = self.read_byte()
        if final is None:
            return END_OF_INPUT
        key = self.SEQUENCES.get(final)
        if key is None:
            return None
        return KeyEvent(key=key, raw=bytes([ESC, ord('['), final]))

    def _decode_multibyte(self, lead: int) -> Optional[KeyEvent]:
        """Assemble a UTF-8 encoded character starting with lead."""
        if 0xC0 <= lead <= 0xDF:
            extra = 1
        elif 0xE0 <= lead <= 0xEF:
            extra = 2
        elif 0xF0 <= lead <= 0xF7:
            extra = 3
        else:
            return None
        data = bytearray([lead])
        for _ in range(extra):
            b = self.read_byte()
            if b is None:
                return None
            if not 0x80 <= b <= 0xBF:
                # Not a continuation byte: drop the broken lead, decode b next
                self._pushback = b
                return None
            data.append(b)
        char = data.decode('utf-8', errors='replace')
        return KeyEvent(char=char[0], raw=bytes(data))

    def _has_pending(self, timeout: float) -> bool:
        """Check if more input is available within timeout."""
        if self._pushback is not None:
            return True
        if self._stream is not None:
            try:
                fd = self._stream.fileno()
            except (OSError, ValueError, io.UnsupportedOperation):
                # In-memory streams always have their next byte ready
                return True
        else:
            fd = self._stdin_fd()
        try:
            ready, _, _ = select.select([fd], [], [], timeout)
            return bool(ready)
        except (ValueError, OSError):
            return True

    def read_line(self) -> Optional[str]:
        """Read one cooked line. Returns None at end of input with nothing read."""
        buf = bytearray()
        while True:
            b = self.read_byte()
            if b is None:
                if not buf:
                    return None
                break
            if b == ord('\n'):
                break
            buf.append(b)
        return buf.decode('utf-8', errors='replace').rstrip('\r')
