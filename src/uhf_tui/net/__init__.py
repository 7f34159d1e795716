"""Local network discovery of readers."""

from uhf_tui.net.discovery import (
    HostPort,
    default_ports,
    detect_prefixes,
    find_target,
    is_port_open,
    parse_ports,
    wide_ports,
)

__all__ = [
    "HostPort",
    "default_ports",
    "detect_prefixes",
    "find_target",
    "is_port_open",
    "parse_ports",
    "wide_ports",
]
