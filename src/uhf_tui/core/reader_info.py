"""ReaderInfo - firmware and RF settings reported by a reader."""

from dataclasses import dataclass

from uhf_tui.core.result import Result


@dataclass(frozen=True, slots=True)
class ReaderInfo:
    result: Result
    version_major: int = 0
    version_minor: int = 0
    power: int = 0
    band: int = 0
    min_freq: int = 0
    max_freq: int = 0
    beep: int = 0
    antenna: int = 0

    @property
    def version(self) -> str:
        return f"{self.version_major}.{self.version_minor}"

    def describe(self) -> list[str]:
        """Human-readable lines for a message box."""
        return [
            f"Version: {self.version}",
            f"Power:   {self.power} dBm",
            f"Band:    {self.band}",
            f"Freq:    {self.min_freq}-{self.max_freq}",
            f"Beep:    {'on' if self.beep else 'off'}",
            f"Antenna: {self.antenna}",
        ]


@dataclass(frozen=True, slots=True)
class AntennaPower:
    """Output power of each antenna port, in dBm."""
    result: Result
    powers: tuple[int, ...] = ()

    def describe(self) -> list[str]:
        return [f"Ant {n}: {dbm} dBm" for n, dbm in enumerate(self.powers, start=1)]
