"""The menu tree walked by the interactive console."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from uhf_tui.cli.commands import connect_reader, parse_int, report_inventory_params_result
from uhf_tui.cli.presets import (
    DEFAULT_PROFILE,
    PROFILES,
    REGIONS,
    ReadProfile,
    RegionSelection,
    format_distance,
)
from uhf_tui.cli.shell import CommandContext, CommandRegistry, ShellExit, run_shell
from uhf_tui.config import load_last_connection
from uhf_tui.core import InventoryParams, normalize_antenna
from uhf_tui.core.inventory_params import ANTENNA_BASE, BROADCAST_ADDRESS
from uhf_tui.net.discovery import detect_prefixes, find_target, is_port_open
from uhf_tui.sdk.reader import DEFAULT_PORT, MAX_POWER_DBM, MEM_BANKS, MEM_EPC

logger = logging.getLogger(__name__)

MAIN_OPTIONS = ("Connection", "Scan", "Inventory", "Tag Ops", "Settings", "Quit")
QUIT_INDEX = MAIN_OPTIONS.index("Quit")
AUTO_PORTS = (27011, 2022)
AUTO_TIMEOUT = 0.12
LAST_CONNECTION_TIMEOUT = 0.15
READER_TYPES = ("4", "16")
DEFAULT_ANTENNA_POWER = 30
README_CANDIDATES = (Path("README.md"), Path("..") / "README.md")


def read_readme_lines(candidates: Sequence[Path] = README_CANDIDATES) -> list[str]:
    for path in candidates:
        try:
            return path.read_text(encoding="utf-8").splitlines()
        except OSError:
            continue
    return []


class MenuApp:
    """
    Main menu and its submenus.

    Every submenu loops until Back (the Left key or its "Back" entry).
    Forward repeats the option highlighted last; on the main menu it
    re-enters the submenu visited last.
    """

    def __init__(
        self,
        ctx: CommandContext,
        registry: CommandRegistry,
        auto_connect: bool = True,
    ) -> None:
        self.ctx = ctx
        self.ui = ctx.ui
        self.registry = registry
        self.auto_connect = auto_connect
        self._forward_target: Optional[int] = None
        self._quit = False

    def run(self) -> None:
        submenus = (
            self.menu_connection,
            self.menu_scan,
            self.menu_inventory,
            self.menu_tag_ops,
            self.menu_settings,
        )
        if self.auto_connect and not self.ctx.reader.is_connected:
            self.attempt_auto_connect()
        try:
            while not self._quit and not self.ui.input_closed:
                self.ctx.refresh_status()
                state = "connected" if self.ctx.reader.is_connected else "disconnected"
                nav = self.ui.select_option(f"Main [{state}]", MAIN_OPTIONS, 0)
                if self.ui.input_closed:
                    break
                if nav.is_back:
                    continue
                if nav.is_forward and self._forward_target is not None:
                    choice = self._forward_target
                else:
                    choice = nav.resolve(self.ui.last_menu_index)
                if choice == QUIT_INDEX:
                    break
                submenus[choice]()
                self._forward_target = choice
        finally:
            self.ui.exit_menu_mode()
            self.ctx.reader.disconnect()

    def _choose(self, label: str, options: Sequence[str], default: int = 0) -> Optional[int]:
        """Show a submenu; None means leave it."""
        self.ctx.refresh_status()
        choice = self.ui.select_option(label, options, default).resolve(self.ui.last_menu_index)
        if self.ui.input_closed or choice is None or choice == len(options) - 1:
            return None
        return choice

    def _pick(self, label: str, options: Sequence[str], default: int = 0) -> Optional[int]:
        """One-shot selection; None on Back or end of input."""
        choice = self.ui.select_option(label, options, default).resolve(self.ui.last_menu_index)
        return None if self.ui.input_closed else choice

    def _pick_paged(self, label: str, items: Sequence[str], default: int = 0) -> Optional[int]:
        nav = self.ui.select_option_paged(label, items, default, self.ctx.settings.page_size)
        choice = nav.resolve(self.ui.last_menu_index)
        return None if self.ui.input_closed else choice

    def _pick_power(self, label: str, default: int) -> Optional[int]:
        items = [f"{dbm} dBm" for dbm in range(MAX_POWER_DBM + 1)]
        return self._pick_paged(label, items, min(max(default, 0), MAX_POWER_DBM))

    def _ask_int(self, label: str, default: int) -> int:
        line = self.ui.read_line_in_menu(f"{label} [{default}]: ")
        return parse_int(line, default) if line.strip() else default

    def _run(self, *tokens: str) -> None:
        self.registry.execute(list(tokens), self.ctx)

    # Submenus

    def menu_connection(self) -> None:
        options = ("Connect", "Disconnect", "Back")
        while True:
            choice = self._choose("Connection", options)
            if choice is None:
                return
            if choice == 1:
                self._run("disconnect")
                continue
            host = self.ui.read_line_in_menu_or_back("IP address: ")
            if host is None:
                return
            if not host.strip():
                self.ui.set_status_message("IP is required.")
                continue
            port = self._ask_int("Port", DEFAULT_PORT)
            nav = self.ui.select_option("ReaderType", READER_TYPES, 0)
            if nav.is_back:
                return
            reader_type = READER_TYPES[nav.resolve(self.ui.last_menu_index)]
            self._run("connect", host.strip(), str(port), reader_type)

    def menu_scan(self) -> None:
        options = ("Start (auto)", "Stop", "Auto-connect", "Back")
        while True:
            choice = self._choose("Scan", options)
            if choice is None:
                return
            if choice == 0:
                if not self.ctx.reader.is_connected:
                    self.attempt_auto_connect()
                if not self.ctx.reader.is_connected:
                    self.ui.set_status_message("No reader connected.")
                    continue
                self._run("inv", "start")
            elif choice == 1:
                self._run("inv", "stop")
            else:
                self.attempt_auto_connect()

    def menu_inventory(self) -> None:
        options = (
            "Start", "Stop", "Once (timed)", "Params (view)", "Params (set)", "Tag output", "Back"
        )
        while True:
            choice = self._choose("Inventory", options)
            if choice is None:
                return
            if choice == 0:
                self._run("inv", "start")
            elif choice == 1:
                self._run("inv", "stop")
            elif choice == 2:
                self._run("inv-once", str(self._ask_int("Duration ms", 1000)))
            elif choice in (3, 4):
                self.inventory_params(edit=choice == 4)
            else:
                shown = self._pick("Tag output", ("Counts only", "Show tag lines"), int(self.ctx.show_tags))
                if shown is not None:
                    self._run("tags", "on" if shown else "off")

    def menu_tag_ops(self) -> None:
        options = ("Read", "Write", "Back")
        while True:
            choice = self._choose("Tag Ops", options)
            if choice is None:
                return
            if not self.ctx.reader.is_connected:
                self.ui.set_status_message("Not connected.")
                continue
            epc = self.ui.read_line_in_menu_or_back("EPC: ")
            if epc is None:
                continue
            nav = self.ui.select_option("Memory bank", MEM_BANKS, MEM_EPC)
            if nav.is_back:
                continue
            mem = nav.resolve(self.ui.last_menu_index)
            word_ptr = self._ask_int("WordPtr", 0)
            if choice == 0:
                num = self._ask_int("Num", 1)
                data = self.ctx.reader.read_data(epc.strip(), mem, word_ptr, num, "00000000")
                if data is None:
                    self.ui.set_status_message("Read failed.")
                else:
                    self.ui.show_lines(f"{MEM_BANKS[mem]} @ {word_ptr}", [data])
                continue
            data = self.ui.read_line_in_menu_or_back("Data (hex words): ")
            if data is None:
                continue
            if not self.ui.confirm(f"Write {MEM_BANKS[mem]} of {epc.strip()}?"):
                self.ui.set_status_message("Write cancelled.")
                continue
            self._run("write", epc.strip(), str(mem), str(word_ptr), data.strip())

    def menu_settings(self) -> None:
        options = (
            "Power",
            "Read profile",
            "Per-antenna power",
            "Region",
            "Beep",
            "Reader info",
            "Command shell",
            "About",
            "Back",
        )
        while True:
            choice = self._choose("Settings", options)
            if choice is None:
                return
            if choice == 0:
                self.select_power()
            elif choice == 1:
                self.menu_read_profile()
            elif choice == 2:
                self.menu_antenna_power()
            elif choice == 3:
                region = self.select_region()
                if region is not None:
                    self._run("region", str(region.band), str(region.max_freq), str(region.min_freq))
            elif choice == 4:
                beep = self._pick("Beep", ("On (1)", "Off (0)"), 0)
                if beep is not None:
                    self._run("beep", "1" if beep == 0 else "0")
            elif choice == 5:
                info = self.ctx.reader.get_info()
                if info.result.ok:
                    self.ui.show_lines("Reader info", info.describe())
                else:
                    self.ui.set_status_message(f"Get info failed: {info.result.code}")
            elif choice == 6:
                if run_shell(self.ctx, self.registry) is ShellExit.QUIT:
                    self._quit = True
                    return
            else:
                self.show_about()

    def select_power(self) -> None:
        info = self.ctx.reader.get_info()
        power = self._pick_power("Power", info.power if info.result.ok else 0)
        if power is not None:
            self._run("power", str(power))

    def menu_read_profile(self) -> None:
        """Pick a profile and a distance, then apply the power estimated for them."""
        names = [profile.name for profile in PROFILES] + ["Back"]
        choice = self._choose("Read profile", names, DEFAULT_PROFILE)
        if choice is None:
            return
        profile = PROFILES[choice]
        meters = self.select_distance(profile)
        if meters is None:
            return
        power = profile.estimate_power(meters)
        distance = format_distance(meters)
        if not self.ctx.reader.is_connected:
            self.ui.set_status_message(f"Not connected. Suggested power: {power} dBm ({distance})")
            return
        result = self.ctx.reader.set_power(power)
        if result.ok:
            self.ui.set_status_message(f"Read profile set: {profile.name} ({distance} -> {power} dBm)")
        else:
            self.ui.set_status_message(f"Set power failed: {result.code}")

    def select_distance(self, profile: ReadProfile) -> Optional[float]:
        default = profile.default_distance_index
        fallback = float(profile.distances[default])
        options = [format_distance(d) for d in profile.distances] + ["Custom", "Back"]
        choice = self._choose("Distance (m)", options, default)
        if choice is None:
            return None
        if choice < len(profile.distances):
            return float(profile.distances[choice])
        line = self.ui.read_line_in_menu_or_back(f"Distance (m) [{format_distance(fallback)}]: ")
        if line is None:
            return None
        try:
            meters = float(line) if line.strip() else fallback
        except ValueError:
            meters = fallback
        return profile.clamp_distance(meters)

    def menu_antenna_power(self) -> None:
        options = ("Set all", "Set per-antenna", "Get", "Back")
        while True:
            choice = self._choose("Per-antenna power", options)
            if choice is None:
                return
            reader = self.ctx.reader
            if not reader.is_connected:
                self.ui.set_status_message("Not connected.")
                continue
            current = reader.get_antenna_power()
            if choice == 2:
                if current.result.ok:
                    self.ui.show_lines("Per-antenna power", current.describe())
                else:
                    self.ui.set_status_message(f"Get antenna power failed: {current.result.code}")
                continue
            if choice == 0:
                power = self._pick_power("Set all power", DEFAULT_ANTENNA_POWER)
                powers = None if power is None else [power] * reader.antenna_count
            else:
                start = list(current.powers) if current.result.ok else []
                powers = self.ask_antenna_powers(start or [DEFAULT_ANTENNA_POWER] * reader.antenna_count)
            if powers is not None:
                self._run("antpower", "set", *(str(p) for p in powers))

    def ask_antenna_powers(self, powers: list[int]) -> Optional[list[int]]:
        """Step through the antennas; None when one of them is backed out of."""
        chosen = []
        for n, current in enumerate(powers, start=1):
            power = self._pick_power(f"Ant {n} power", current)
            if power is None:
                return None
            chosen.append(power)
        return chosen

    def select_region(self) -> Optional[RegionSelection]:
        """A preset band with its min and max channel, or raw numbers under Custom."""
        labels = [region.name for region in REGIONS] + ["Custom"]
        choice = self._pick("Region", labels, 0)
        if choice is None:
            return None
        if choice == len(REGIONS):
            band = self._ask_int("Band", 0)
            max_freq = self._ask_int("MaxFreq", 0)
            min_freq = self._ask_int("MinFreq", 0)
            return RegionSelection(band, max_freq, min_freq)
        region = REGIONS[choice]
        items = region.channel_labels()
        min_idx = self._pick_paged("MinFreq", items, 0)
        if min_idx is None:
            return None
        max_sel = self._pick_paged("MaxFreq", [f"Same as Min ({min_idx})"] + items, min_idx + 1)
        if max_sel is None:
            return None
        max_idx = min_idx if max_sel <= 0 else max_sel - 1
        return RegionSelection(region.band, max_idx, min_idx)

    def inventory_params(self, edit: bool) -> None:
        reader = self.ctx.reader
        if not reader.is_connected:
            self.ui.set_status_message("Not connected.")
            return
        current = reader.get_inventory_params()
        if not current.result.ok:
            self.ui.set_status_message(f"Get inventory params failed: {current.result.code}")
            return
        if not edit:
            self.ui.show_lines("Inventory params", current.describe())
            return
        params = self.ask_inventory_params(current)
        if params is None:
            return
        report_inventory_params_result(self.ctx, reader.set_inventory_params(params))

    def ask_inventory_params(self, current: InventoryParams) -> Optional[InventoryParams]:
        default = 0 if current.address == BROADCAST_ADDRESS else 1
        choice = self._pick("Address", ("Broadcast (255)", "Custom"), default)
        if choice is None:
            return None
        if choice == 0:
            address = BROADCAST_ADDRESS
        else:
            address = self._ask_int("Address (0-255)", current.address)
        session = self._ask_int("Session", current.session)
        q_value = self._ask_int("QValue", current.q_value)
        scan_time = self._ask_int("ScanTime", current.scan_time)
        antenna = self.select_inventory_antenna(current.antenna)
        read_type = self._ask_int("ReadType", current.read_type)
        read_mem = self._ask_int("ReadMem", current.read_mem)
        read_ptr = self._ask_int("ReadPtr", current.read_ptr)
        read_length = self._ask_int("ReadLength", current.read_length)
        tid_ptr = self._ask_int("TID Ptr", current.tid_ptr)
        tid_len = self._ask_int("TID Len", current.tid_len)
        password = self.ui.read_line_in_menu(f"Password [{current.password}]: ").strip()
        return replace(
            current,
            address=address,
            session=session,
            q_value=q_value,
            scan_time=scan_time,
            antenna=antenna,
            read_type=read_type,
            read_mem=read_mem,
            read_ptr=read_ptr,
            read_length=read_length,
            tid_ptr=tid_ptr,
            tid_len=tid_len,
            password=password or current.password,
        )

    def select_inventory_antenna(self, current: int) -> int:
        count = self.ctx.reader.antenna_count
        normalized = normalize_antenna(current, count)
        default = normalized - ANTENNA_BASE if ANTENNA_BASE <= normalized < ANTENNA_BASE + count else 0
        items = [f"Ant {n + 1} ({ANTENNA_BASE + n})" for n in range(count)] + ["Custom (raw)"]
        choice = self._pick("Inventory antenna", items, default)
        if choice is None:
            return current
        if choice < count:
            return ANTENNA_BASE + choice
        return normalize_antenna(self._ask_int("Antenna (raw)", current), count)

    def show_about(self) -> None:
        lines = read_readme_lines()
        if not lines:
            self.ui.show_lines("About", [
                "README.md not found.",
                "Expected in current folder or parent.",
            ])
            return
        self.ui.view_lines_paged("About (README)", lines, self.ctx.settings.page_size)

    # Auto-connect

    def attempt_auto_connect(self) -> None:
        """Try the remembered endpoint, then scan local subnets on the usual ports."""
        last = load_last_connection(self.ctx.settings)
        reader_type, log = 4, 0
        if last is not None:
            reader_type, log = last.reader_type, last.log
            if is_port_open(last.host, last.port, LAST_CONNECTION_TIMEOUT):
                result = connect_reader(self.ctx, last.host, last.port, reader_type, log)
                if result.ok:
                    self.ui.set_status_message(f"Auto-connect: {last.host}@{last.port}")
                    return

        prefixes = detect_prefixes()
        if not prefixes:
            self.ui.set_status_message("Auto-connect: no LAN prefixes found.")
            return
        found = self.ui.run_with_spinner(
            "Auto-connecting",
            lambda: find_target(prefixes, AUTO_PORTS, AUTO_TIMEOUT),
        )
        if found is None:
            self.ui.set_status_message("Auto-connect: no reader found.")
            return
        result = connect_reader(self.ctx, found.host, found.port, reader_type, log)
        if result.ok:
            self.ui.set_status_message(f"Auto-connect: {found}")
        else:
            self.ui.set_status_message(f"Auto-connect failed: {result.code}")
