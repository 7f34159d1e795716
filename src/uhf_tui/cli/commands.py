"""Reader commands shared by the shell and the menus."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

from uhf_tui.cli.shell import CommandContext, CommandRegistry
from uhf_tui.config import LastConnection, remember_connection
from uhf_tui.core import Result, normalize_antenna
from uhf_tui.net.discovery import detect_prefixes, find_target, parse_ports
from uhf_tui.sdk.reader import DEFAULT_PORT, DEFAULT_READER_TYPE, MAX_POWER_DBM, MEM_BANKS

logger = logging.getLogger(__name__)

SCAN_TIMEOUT = 0.2
ONCE_DEFAULT_MS = 1000
ONCE_MIN_MS = 50
INV_PARAM_USAGE = (
    "Usage: inv-param get | set <session> <q> <scanTime> <readType> <readMem> "
    "<readPtr> <readLen> <tidPtr> <tidLen> <antenna> <password> [address]"
)


def parse_int(text: Optional[str], default: int) -> int:
    if text is None:
        return default
    try:
        return int(text.strip())
    except ValueError:
        return default


def _arg(args: list[str], index: int) -> Optional[str]:
    return args[index] if len(args) > index else None


def connect_reader(
    ctx: CommandContext,
    host: str,
    port: int = DEFAULT_PORT,
    reader_type: int = DEFAULT_READER_TYPE,
    log: int = 0,
) -> Result:
    """Connect with the context's tag handler and remember the endpoint on success."""
    result = ctx.reader.connect(host, port, reader_type, log, on_tag=ctx.handle_tag)
    if result.ok:
        remember_connection(ctx.settings, LastConnection(host, port, reader_type, log))
    return result


def cmd_connect(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 2:
        ctx.report("Usage: connect <ip> [port] [readerType] [log]")
        return
    if ctx.reader.is_connected:
        ctx.report("Already connected. Use 'disconnect' first.")
        return
    host = args[1]
    port = parse_int(_arg(args, 2), DEFAULT_PORT)
    reader_type = parse_int(_arg(args, 3), DEFAULT_READER_TYPE)
    log = parse_int(_arg(args, 4), 0)
    result = connect_reader(ctx, host, port, reader_type, log)
    if result.ok:
        ctx.report(f"Connected: {host}@{port} (readerType={reader_type})")
    else:
        ctx.report(f"Connect failed: {result.code}")


def cmd_disconnect(args: list[str], ctx: CommandContext) -> None:
    result = ctx.reader.disconnect()
    ctx.report("Disconnected." if result.ok else f"Disconnect failed: {result.code}")


def cmd_scan(args: list[str], ctx: CommandContext) -> None:
    if ctx.reader.is_connected:
        ctx.report("Already connected. Use 'disconnect' first.")
        return
    ports = parse_ports(_arg(args, 1))
    reader_type = parse_int(_arg(args, 2), DEFAULT_READER_TYPE)
    log = parse_int(_arg(args, 3), 0)
    prefix = (_arg(args, 4) or "").strip()
    prefixes = [prefix] if prefix else detect_prefixes()
    if not prefixes:
        ctx.report("No LAN prefixes found. Provide prefix like 192.168.1")
        return
    found = ctx.ui.run_with_spinner(
        f"Scanning {len(prefixes)} subnet(s) on {len(ports)} port(s)",
        lambda: find_target(prefixes, ports, SCAN_TIMEOUT),
    )
    if found is None:
        ctx.report("No reader found.")
        return
    result = connect_reader(ctx, found.host, found.port, reader_type, log)
    ctx.report(f"Connected: {found}" if result.ok else f"Connect failed: {result.code}")


def cmd_info(args: list[str], ctx: CommandContext) -> None:
    info = ctx.reader.get_info()
    if not info.result.ok:
        ctx.report(f"Get info failed: {info.result.code}")
        return
    ctx.report(
        f"Version={info.version} Power={info.power} Band={info.band} "
        f"MinFre={info.min_freq} MaxFre={info.max_freq} Beep={info.beep} Ant={info.antenna}"
    )


def cmd_power(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 2:
        ctx.report(f"Usage: power <0-{MAX_POWER_DBM}>")
        return
    power = parse_int(args[1], -1)
    if not 0 <= power <= MAX_POWER_DBM:
        ctx.report("Invalid power.")
        return
    result = ctx.reader.set_power(power)
    ctx.report(f"Power set: {power}" if result.ok else f"Set power failed: {result.code}")


def cmd_antenna_power(args: list[str], ctx: CommandContext) -> None:
    action = (_arg(args, 1) or "get").lower()
    if action == "get":
        info = ctx.reader.get_antenna_power()
        if info.result.ok:
            ctx.report(" | ".join(info.describe()))
        else:
            ctx.report(f"Get antenna power failed: {info.result.code}")
        return
    values = [parse_int(text, -1) for text in args[2:]]
    if action != "set" or not values:
        ctx.report("Usage: antpower get | set <dbm> [dbm ...]")
        return
    if any(not 0 <= dbm <= MAX_POWER_DBM for dbm in values):
        ctx.report("Invalid power.")
        return
    if len(values) == 1:
        values = values * ctx.reader.antenna_count
    result = ctx.reader.set_antenna_power(values)
    ctx.report("Per-antenna power set." if result.ok else f"Set antenna power failed: {result.code}")


def cmd_region(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 4:
        ctx.report("Usage: region <band> <maxFreq> <minFreq>")
        return
    band, max_freq, min_freq = (parse_int(text, -1) for text in args[1:4])
    if min(band, max_freq, min_freq) < 0:
        ctx.report("Invalid region parameters.")
        return
    result = ctx.reader.set_region(band, max_freq, min_freq)
    ctx.report("Region set." if result.ok else f"Set region failed: {result.code}")


def cmd_beep(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 2:
        ctx.report("Usage: beep <0|1>")
        return
    value = parse_int(args[1], -1)
    if value not in (0, 1):
        ctx.report("Invalid beep value.")
        return
    result = ctx.reader.set_beep(value)
    ctx.report(f"Beep set: {value}" if result.ok else f"Set beep failed: {result.code}")


def cmd_inventory(args: list[str], ctx: CommandContext) -> None:
    action = (_arg(args, 1) or "").lower()
    if action == "start":
        result = ctx.reader.start_inventory()
        ctx.report("Inventory started." if result.ok else f"Start failed: {result.code}")
    elif action == "stop":
        result = ctx.reader.stop_inventory()
        ctx.report("Inventory stopped." if result.ok else f"Stop failed: {result.code}")
    else:
        ctx.report("Usage: inv start|stop")


def cmd_inventory_once(args: list[str], ctx: CommandContext) -> None:
    if not ctx.reader.is_connected:
        ctx.report("Not connected.")
        return
    ms = max(ONCE_MIN_MS, parse_int(_arg(args, 1), ONCE_DEFAULT_MS))
    result = ctx.reader.start_inventory()
    if not result.ok:
        ctx.report(f"Start failed: {result.code}")
        return
    ctx.ui.run_with_spinner(f"Scanning for {ms} ms", lambda: time.sleep(ms / 1000))
    result = ctx.reader.stop_inventory()
    ctx.report("Scan stopped." if result.ok else f"Stop failed: {result.code}")


def cmd_inventory_params(args: list[str], ctx: CommandContext) -> None:
    action = (_arg(args, 1) or "").lower()
    if action not in ("get", "set"):
        ctx.report(INV_PARAM_USAGE)
        return
    if not ctx.reader.is_connected:
        ctx.report("Not connected.")
        return
    current = ctx.reader.get_inventory_params()
    if not current.result.ok:
        ctx.report(f"Get inventory params failed: {current.result.code}")
        return
    if action == "get":
        for line in current.describe():
            ctx.report(line)
        return
    if len(args) < 13:
        ctx.report(INV_PARAM_USAGE)
        return
    params = replace(
        current,
        session=parse_int(args[2], current.session),
        q_value=parse_int(args[3], current.q_value),
        scan_time=parse_int(args[4], current.scan_time),
        read_type=parse_int(args[5], current.read_type),
        read_mem=parse_int(args[6], current.read_mem),
        read_ptr=parse_int(args[7], current.read_ptr),
        read_length=parse_int(args[8], current.read_length),
        tid_ptr=parse_int(args[9], current.tid_ptr),
        tid_len=parse_int(args[10], current.tid_len),
        antenna=normalize_antenna(parse_int(args[11], current.antenna), ctx.reader.antenna_count),
        password=args[12],
        address=parse_int(_arg(args, 13), current.address),
    )
    report_inventory_params_result(ctx, ctx.reader.set_inventory_params(params))


def report_inventory_params_result(ctx: CommandContext, result: Result) -> None:
    ctx.report(
        "Inventory params updated." if result.ok
        else f"Set inventory params failed: {result.code}"
    )


def cmd_tags(args: list[str], ctx: CommandContext) -> None:
    action = (_arg(args, 1) or "").lower()
    if action in ("on", "1"):
        ctx.show_tags = True
    elif action in ("off", "0"):
        ctx.show_tags = False
    ctx.report(f"Tag lines: {'on' if ctx.show_tags else 'off'} | {ctx.stats.status_line()}")


def cmd_read(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 5:
        ctx.report("Usage: read <epc> <mem> <wordPtr> <num> [password]")
        return
    mem = parse_int(args[2], -1)
    if not 0 <= mem < len(MEM_BANKS):
        ctx.report("Invalid memory bank.")
        return
    data = ctx.reader.read_data(
        args[1], mem, parse_int(args[3], 0), parse_int(args[4], 1), _arg(args, 5) or "00000000"
    )
    ctx.report(f"{MEM_BANKS[mem]}: {data}" if data is not None else "Read failed.")


def cmd_write(args: list[str], ctx: CommandContext) -> None:
    if len(args) < 5:
        ctx.report("Usage: write <epc> <mem> <wordPtr> <data> [password]")
        return
    mem = parse_int(args[2], -1)
    if not 0 <= mem < len(MEM_BANKS):
        ctx.report("Invalid memory bank.")
        return
    result = ctx.reader.write_data(
        args[1], mem, parse_int(args[3], 0), _arg(args, 5) or "00000000", args[4]
    )
    ctx.report("Write OK." if result.ok else f"Write failed: {result.code}")


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    registry.register("connect", "connect <ip> [port] [readerType] [log]", cmd_connect)
    registry.register("disconnect", "disconnect", cmd_disconnect, "disc")
    registry.register("scan", "scan [ports|auto|auto+] [readerType] [log] [prefix]", cmd_scan)
    registry.register("info", "info", cmd_info)
    registry.register("power", f"power <0-{MAX_POWER_DBM}>", cmd_power)
    registry.register("antpower", "antpower get | set <dbm> [dbm ...]", cmd_antenna_power)
    registry.register("region", "region <band> <maxFreq> <minFreq>", cmd_region)
    registry.register("beep", "beep <0|1>", cmd_beep)
    registry.register("inv", "inv start|stop", cmd_inventory, "inventory")
    registry.register("inv-once", "inv-once [ms]", cmd_inventory_once, "once")
    registry.register(
        "inv-param", INV_PARAM_USAGE.removeprefix("Usage: "), cmd_inventory_params, "invp"
    )
    registry.register("tags", "tags [on|off]", cmd_tags)
    registry.register("read", "read <epc> <mem> <wordPtr> <num> [password]", cmd_read)
    registry.register("write", "write <epc> <mem> <wordPtr> <data> [password]", cmd_write)
    return registry
