"""Core data structures shared by the reader client and the console."""

from uhf_tui.core.result import Result, ALREADY_CONNECTED, NOT_CONNECTED, FAILED
from uhf_tui.core.reader_info import AntennaPower, ReaderInfo
from uhf_tui.core.inventory_params import InventoryParams, normalize_antenna
from uhf_tui.core.tag import TagRead, TagStats

__all__ = [
    "Result",
    "ALREADY_CONNECTED",
    "NOT_CONNECTED",
    "FAILED",
    "AntennaPower",
    "ReaderInfo",
    "InventoryParams",
    "normalize_antenna",
    "TagRead",
    "TagStats",
]
