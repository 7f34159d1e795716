"""
Find a reader on the local /24 subnets by probing TCP ports.

Each (prefix, port) pair is scanned as one batch of 254 hosts on a thread
pool; the first host that accepts a connection wins and the rest of the
batch is cancelled.
"""

from __future__ import annotations

import logging
import re
import socket
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, Iterable, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)

PORT_LIMIT = 1000
WIDE_PORT_LIMIT = 1200
HOSTS = range(1, 255)

DEFAULT_PORTS = (
    27011, 2022, 2000, 4001, 4002, 5000, 5001, 6000, 7000, 8000, 9000, 10000,
    12000, 15000, 16000, 20000, 21000, 22000, 23000, 24000, 25000, 26000,
    28000, 29000, 30000, 40000, 50000, 60000,
)
WIDE_RANGES = (
    (2000, 2100),
    (27000, 27150),
    (5000, 5100),
    (10000, 10100),
    (15000, 15100),
    (20000, 20100),
    (25000, 25100),
    (30000, 30100),
)

Probe = Callable[[str, int, float], bool]


class HostPort(NamedTuple):
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}@{self.port}"


def _dedup_sort(ports: Iterable[int], limit: int) -> list[int]:
    unique = sorted(set(ports))
    if len(unique) > limit:
        logger.debug("port list too large (%d), using first %d", len(unique), limit)
    return unique[:limit]


def _valid(port: int) -> bool:
    return 0 < port <= 65535


def default_ports() -> list[int]:
    return _dedup_sort(DEFAULT_PORTS, PORT_LIMIT)


def wide_ports() -> list[int]:
    ports = list(DEFAULT_PORTS)
    for start, end in WIDE_RANGES:
        ports.extend(range(start, end + 1))
    return _dedup_sort(ports, WIDE_PORT_LIMIT)


def parse_ports(text: Optional[str]) -> list[int]:
    """
    Parse a port list such as ``"27011, 2000-2010"``.

    ``auto`` (or blank) selects the default ports and ``auto+``/``wide`` the
    wide set. Ranges may be reversed; invalid parts are skipped. A list
    that yields no valid port falls back to the defaults.
    """
    if text is None:
        return default_ports()
    t = text.strip().lower()
    if not t or t == "auto":
        return default_ports()
    if t in ("auto+", "wide"):
        return wide_ports()

    ports: list[int] = []
    for part in re.split(r"[,;\s]+", t):
        if not part:
            continue
        start_text, dash, end_text = part.partition("-")
        try:
            if dash and start_text:
                start, end = int(start_text), int(end_text)
                if start > end:
                    start, end = end, start
                ports.extend(p for p in range(start, end + 1) if _valid(p))
            else:
                port = int(part)
                if _valid(port):
                    ports.append(port)
        except ValueError:
            continue
    if not ports:
        return default_ports()
    return _dedup_sort(ports, PORT_LIMIT)


def is_port_open(host: str, port: int, timeout: float) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def detect_prefixes() -> list[str]:
    """
    Three-octet prefixes of this host's IPv4 addresses, loopback excluded.

    Uses the addresses the host name resolves to plus the source address
    of the default route.
    """
    addresses: list[str] = []
    try:
        addresses.extend(socket.gethostbyname_ex(socket.gethostname())[2])
    except OSError as e:
        logger.debug("host name lookup failed: %s", e)
    try:
        # UDP connect sends nothing; it only selects a route
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("192.0.2.1", 9))
            addresses.append(s.getsockname()[0])
    except OSError as e:
        logger.debug("no default route: %s", e)

    prefixes: list[str] = []
    for address in addresses:
        parts = address.split(".")
        if len(parts) != 4 or parts[0] == "127":
            continue
        prefix = ".".join(parts[:3])
        if prefix not in prefixes:
            prefixes.append(prefix)
    return prefixes


def _scan_prefix(
    prefix: str,
    port: int,
    timeout: float,
    workers: int,
    probe: Probe,
) -> Optional[HostPort]:
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discovery")
    try:
        pending = {
            pool.submit(probe, f"{prefix}.{n}", port, timeout): HostPort(f"{prefix}.{n}", port)
            for n in HOSTS
        }
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                target = pending.pop(future)
                if future.exception() is None and future.result():
                    return target
        return None
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def find_target(
    prefixes: Sequence[str],
    ports: Optional[Sequence[int]] = None,
    timeout: float = 0.2,
    workers: int = 64,
    probe: Optional[Probe] = None,
) -> Optional[HostPort]:
    """
    Return the first host that answers on any port, trying prefixes and
    ports in the order given. None when nothing answers.
    """
    if not prefixes:
        return None
    ports = list(ports) if ports else default_ports()
    probe = probe if probe is not None else is_port_open
    for prefix in prefixes:
        for port in ports:
            logger.debug("scanning %s.0/24 on port %d", prefix, port)
            found = _scan_prefix(prefix, port, timeout, workers, probe)
            if found is not None:
                logger.info("found reader at %s", found)
                return found
    return None
