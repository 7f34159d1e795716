"""Result - outcome of a reader operation."""

from dataclasses import dataclass

# Codes reported by the reader client itself, not by the device
ALREADY_CONNECTED = 0x35
NOT_CONNECTED = 0x36
FAILED = -1


@dataclass(frozen=True, slots=True)
class Result:
    """
    Success flag plus the device return code.

    The console shows ``code`` when an operation fails.
    """
    ok: bool
    code: int = 0

    @classmethod
    def success(cls) -> "Result":
        return cls(True, 0)

    @classmethod
    def fail(cls, code: int) -> "Result":
        return cls(False, code)
