"""InventoryParams - how the reader runs an inventory round."""

from dataclasses import dataclass

from uhf_tui.core.result import Result

BROADCAST_ADDRESS = 255
# Antenna ports are numbered from 0x80 on the wire
ANTENNA_BASE = 0x80


def normalize_antenna(antenna: int, count: int) -> int:
    """Map 1..N or 0..N-1 to the 0x80-based port number; other values pass through."""
    n = count if count > 0 else 4
    if ANTENNA_BASE <= antenna < ANTENNA_BASE + n:
        return antenna
    if 1 <= antenna <= n:
        return ANTENNA_BASE + antenna - 1
    if 0 <= antenna < n:
        return ANTENNA_BASE + antenna
    return antenna


@dataclass(frozen=True, slots=True)
class InventoryParams:
    result: Result
    address: int = BROADCAST_ADDRESS
    tid_ptr: int = 0
    tid_len: int = 6
    session: int = 0
    q_value: int = 4
    scan_time: int = 10
    antenna: int = ANTENNA_BASE
    read_type: int = 0
    read_mem: int = 1
    read_ptr: int = 0
    read_length: int = 6
    password: str = "00000000"

    def describe(self) -> list[str]:
        return [
            f"address={self.address} session={self.session} q={self.q_value} "
            f"scanTime={self.scan_time} antenna={self.antenna}",
            f"readType={self.read_type} readMem={self.read_mem} "
            f"readPtr={self.read_ptr} readLen={self.read_length}",
            f"tidPtr={self.tid_ptr} tidLen={self.tid_len} password={self.password}",
        ]
