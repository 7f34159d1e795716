"""Read profiles and frequency regions offered by the settings menus."""

from __future__ import annotations

import math
from dataclasses import dataclass

MIN_PROFILE_POWER = 5
MAX_PROFILE_POWER = 33


@dataclass(frozen=True)
class ReadProfile:
    """Measured distance/power pairs; powers in between are interpolated."""
    name: str
    distances: tuple[float, ...]
    powers: tuple[int, ...]

    @property
    def default_distance_index(self) -> int:
        return min(len(self.distances) - 1, len(self.distances) // 2)

    def clamp_distance(self, meters: float) -> float:
        return min(max(meters, self.distances[0]), self.distances[-1])

    def estimate_power(self, meters: float) -> int:
        """Suggested power in dBm for a tag ``meters`` away."""
        d, p = self.distances, self.powers
        if meters <= d[0]:
            return p[0]
        if meters >= d[-1]:
            return p[-1]
        for i in range(1, len(d)):
            if meters <= d[i]:
                t = (meters - d[i - 1]) / (d[i] - d[i - 1])
                power = math.floor(p[i - 1] + t * (p[i] - p[i - 1]) + 0.5)
                return min(max(power, MIN_PROFILE_POWER), MAX_PROFILE_POWER)
        return p[-1]


PROFILES = (
    ReadProfile("Short range", (0.5, 1, 2, 3, 5, 7, 10), (8, 10, 12, 14, 16, 18, 20)),
    ReadProfile("Balanced", (1, 2, 3, 5, 7, 10, 12, 15), (10, 12, 14, 17, 19, 22, 24, 26)),
    ReadProfile("Long range", (2, 3, 5, 7, 10, 15, 20, 25, 30), (14, 16, 19, 22, 26, 29, 31, 32, 33)),
)
DEFAULT_PROFILE = 1


def format_distance(meters: float) -> str:
    if abs(meters - round(meters)) < 0.01:
        return f"{round(meters)} m"
    return f"{meters} m"


def format_mhz(mhz: float) -> str:
    """Three decimals with trailing zeros dropped: 902.750 -> 902.75, 840.000 -> 840."""
    return f"{mhz:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Region:
    name: str
    band: int
    start_mhz: float
    step_mhz: float
    channels: int

    def channel_labels(self) -> list[str]:
        return [
            f"{i}: {format_mhz(self.start_mhz + i * self.step_mhz)} MHz"
            for i in range(self.channels)
        ]


REGIONS = (
    Region("Chinese band1", 8, 840.125, 0.25, 20),
    Region("US band", 2, 902.75, 0.5, 50),
    Region("Korean band", 3, 917.1, 0.2, 32),
    Region("EU band", 4, 865.1, 0.2, 15),
    Region("Chinese band2", 1, 920.125, 0.25, 20),
    Region("US band3", 12, 902.0, 0.5, 53),
    Region("ALL band", 0, 840.0, 2.0, 61),
)


@dataclass(frozen=True)
class RegionSelection:
    """Band plus channel indices, in the order the region command takes them."""
    band: int
    max_freq: int
    min_freq: int
