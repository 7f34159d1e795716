"""Reader client contract and an in-memory simulated reader."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import replace
from typing import Callable, Optional, Protocol, Sequence

from uhf_tui.core import (
    FAILED,
    NOT_CONNECTED,
    ALREADY_CONNECTED,
    AntennaPower,
    InventoryParams,
    ReaderInfo,
    Result,
    TagRead,
)

logger = logging.getLogger(__name__)

TagCallback = Callable[[TagRead], None]

DEFAULT_PORT = 27011
DEFAULT_READER_TYPE = 4
MAX_POWER_DBM = 33

# Memory banks
MEM_PASSWORD = 0
MEM_EPC = 1
MEM_TID = 2
MEM_USER = 3
MEM_BANKS = ("Password", "EPC", "TID", "User")


class ReaderClient(Protocol):
    """Operations the console needs from a reader. Failures carry a code."""

    @property
    def is_connected(self) -> bool:
        ...

    @property
    def antenna_count(self) -> int:
        ...

    def connect(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        reader_type: int = DEFAULT_READER_TYPE,
        log: int = 0,
        on_tag: Optional[TagCallback] = None,
    ) -> Result:
        ...

    def disconnect(self) -> Result:
        ...

    def start_inventory(self) -> Result:
        ...

    def stop_inventory(self) -> Result:
        ...

    def get_info(self) -> ReaderInfo:
        ...

    def set_power(self, dbm: int) -> Result:
        ...

    def get_antenna_power(self) -> AntennaPower:
        ...

    def set_antenna_power(self, powers: Sequence[int]) -> Result:
        ...

    def set_region(self, band: int, max_freq: int, min_freq: int) -> Result:
        ...

    def set_beep(self, value: int) -> Result:
        ...

    def get_inventory_params(self) -> InventoryParams:
        ...

    def set_inventory_params(self, params: InventoryParams) -> Result:
        ...

    def read_data(self, epc: str, mem: int, word_ptr: int, num: int, password: str) -> Optional[str]:
        ...

    def write_data(self, epc: str, mem: int, word_ptr: int, password: str, data: str) -> Result:
        ...


def _words(hex_text: str) -> list[str]:
    return [hex_text[i:i + 4] for i in range(0, len(hex_text), 4)]


class SimulatedReader:
    """
    A reader that lives in memory.

    Inventory runs on a daemon thread that reports a random tag from a fixed
    population every ``interval`` seconds through the ``on_tag`` callback
    given to ``connect()``. Tag memory is a dict of 16-bit words per bank; the EPC bank
    starts with the CRC and PC words.
    """

    DEFAULT_TAGS = (
        "E2801170000002140B4F8C21",
        "E2801170000002140B4F8C22",
        "E2801170000002140B4F8C23",
        "300833B2DDD9014000000001",
    )

    def __init__(
        self,
        tags: Sequence[str] = DEFAULT_TAGS,
        interval: float = 0.25,
        connect_code: int = 0,
        seed: Optional[int] = None,
    ) -> None:
        self.interval = interval
        self.connect_code = connect_code
        self._random = random.Random(seed)
        self._lock = threading.Lock()
        self._connected = False
        self._host = ""
        self._port = 0
        self._antennas = 4
        self._power = 30
        self._antenna_power = [self._power] * self._antennas
        self._band, self._min_freq, self._max_freq = 2, 0, 49
        self._beep = 1
        self._inventory = InventoryParams(Result.success())
        self._on_tag: TagCallback = lambda tag: None
        self._stop = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._memory: dict[str, dict[int, list[str]]] = {}
        for n, epc in enumerate(tags):
            self._memory[epc.upper()] = {
                MEM_PASSWORD: ["0000"] * 4,
                MEM_EPC: ["0000", "3000"] + _words(epc.upper()),
                MEM_TID: _words(f"E280117020000{n:03X}00000000"),
                MEM_USER: ["0000"] * 8,
            }

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def antenna_count(self) -> int:
        return self._antennas

    @property
    def inventory_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def connect(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        reader_type: int = DEFAULT_READER_TYPE,
        log: int = 0,
        on_tag: Optional[TagCallback] = None,
    ) -> Result:
        with self._lock:
            if self._connected:
                return Result.fail(ALREADY_CONNECTED)
            if self.connect_code:
                logger.debug("simulated connect to %s:%s refused (%s)", host, port, self.connect_code)
                return Result.fail(self.connect_code)
            self._connected = True
            self._host, self._port = host, port
            self._antennas = 16 if reader_type == 16 else 4
            self._antenna_power = [self._power] * self._antennas
            self._on_tag = on_tag if on_tag is not None else (lambda tag: None)
        logger.info("connected to simulated reader %s:%s", host, port)
        return Result.success()

    def disconnect(self) -> Result:
        if not self._connected:
            return Result.success()
        self.stop_inventory()
        with self._lock:
            self._connected = False
        logger.info("disconnected from %s:%s", self._host, self._port)
        return Result.success()

    def start_inventory(self) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if self.inventory_running:
            return Result.success()
        self._stop.clear()
        self._worker = threading.Thread(target=self._produce, name="simulated-inventory", daemon=True)
        self._worker.start()
        return Result.success()

    def stop_inventory(self) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        self._stop.set()
        worker, self._worker = self._worker, None
        if worker is not None and worker is not threading.current_thread():
            worker.join()
        return Result.success()

    def _produce(self) -> None:
        epcs = list(self._memory)
        while not self._stop.wait(self.interval):
            tag = TagRead(
                ip_addr=self._host,
                epc=self._random.choice(epcs),
                mem="EPC",
                rssi=self._random.randint(-75, -35),
                antenna=self._random.randint(1, self._antennas),
            )
            try:
                self._on_tag(tag)
            except Exception:
                logger.exception("tag callback failed")

    def get_info(self) -> ReaderInfo:
        if not self._connected:
            return ReaderInfo(Result.fail(NOT_CONNECTED))
        return ReaderInfo(
            Result.success(),
            version_major=2,
            version_minor=7,
            power=self._power,
            band=self._band,
            min_freq=self._min_freq,
            max_freq=self._max_freq,
            beep=self._beep,
            antenna=self._antennas,
        )

    def set_power(self, dbm: int) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if not 0 <= dbm <= MAX_POWER_DBM:
            return Result.fail(FAILED)
        self._power = dbm
        self._antenna_power = [dbm] * self._antennas
        return Result.success()

    def get_antenna_power(self) -> AntennaPower:
        if not self._connected:
            return AntennaPower(Result.fail(NOT_CONNECTED))
        return AntennaPower(Result.success(), tuple(self._antenna_power))

    def set_antenna_power(self, powers: Sequence[int]) -> Result:
        """One value per antenna port."""
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if len(powers) != self._antennas or any(not 0 <= p <= MAX_POWER_DBM for p in powers):
            return Result.fail(FAILED)
        self._antenna_power = list(powers)
        return Result.success()

    def set_region(self, band: int, max_freq: int, min_freq: int) -> Result:
        """Band number plus the highest and lowest channel index in it."""
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if band < 0 or min_freq < 0 or max_freq < min_freq:
            return Result.fail(FAILED)
        self._band, self._min_freq, self._max_freq = band, min_freq, max_freq
        return Result.success()

    def set_beep(self, value: int) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if value not in (0, 1):
            return Result.fail(FAILED)
        self._beep = value
        return Result.success()

    def get_inventory_params(self) -> InventoryParams:
        if not self._connected:
            return InventoryParams(Result.fail(NOT_CONNECTED))
        return self._inventory

    def set_inventory_params(self, params: InventoryParams) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        if not (0 <= params.address <= 255 and 0 <= params.session <= 3 and 0 <= params.q_value <= 15):
            return Result.fail(FAILED)
        self._inventory = replace(params, result=Result.success())
        return Result.success()

    def read_data(self, epc: str, mem: int, word_ptr: int, num: int, password: str) -> Optional[str]:
        """Hex words read from a bank, or None when the read fails."""
        if not self._connected:
            return None
        bank = self._memory.get(epc.strip().upper(), {}).get(mem)
        if bank is None or word_ptr < 0 or num < 1 or word_ptr + num > len(bank):
            return None
        return "".join(bank[word_ptr:word_ptr + num])

    def write_data(self, epc: str, mem: int, word_ptr: int, password: str, data: str) -> Result:
        if not self._connected:
            return Result.fail(NOT_CONNECTED)
        data = data.strip().upper()
        bank = self._memory.get(epc.strip().upper(), {}).get(mem)
        if bank is None or word_ptr < 0 or not data or len(data) % 4:
            return Result.fail(FAILED)
        try:
            int(data, 16)
        except ValueError:
            return Result.fail(FAILED)
        words = _words(data)
        if word_ptr + len(words) > len(bank):
            return Result.fail(FAILED)
        with self._lock:
            bank[word_ptr:word_ptr + len(words)] = words
        return Result.success()
