"""Typer CLI application."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from uhf_tui.config import Settings, configure_logging


def _settings(
    page_size: Optional[int],
    log_file: Optional[Path],
    log_level: Optional[str],
) -> Settings:
    settings = Settings.from_env()
    if page_size is not None:
        settings.page_size = max(1, page_size)
    if log_file is not None:
        settings.log_file = log_file
    if log_level is not None:
        settings.log_level = log_level.upper()
    configure_logging(settings)
    return settings


def _session(settings: Settings, host: Optional[str], port: int):
    """Console, simulated reader and command set for an interactive session."""
    from uhf_tui.cli.commands import build_registry, connect_reader
    from uhf_tui.cli.console import ConsoleUi
    from uhf_tui.cli.shell import CommandContext
    from uhf_tui.sdk.push import RecordingPushClient
    from uhf_tui.sdk.reader import SimulatedReader

    ctx = CommandContext(
        reader=SimulatedReader(),
        ui=ConsoleUi(),
        settings=settings,
        push=RecordingPushClient(),
    )
    if host:
        result = connect_reader(ctx, host, port)
        ctx.ui.set_status_message(
            f"Connected: {host}@{port}" if result.ok else f"Connect failed: {result.code}"
        )
    return ctx, build_registry()


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="uhf-tui",
        help="Terminal console for networked UHF RFID readers.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console()

    PageSize = Annotated[Optional[int], typer.Option("--page-size", help="Rows per page in long lists")]
    LogFile = Annotated[Optional[Path], typer.Option("--log-file", help="Write logs to this file")]
    LogLevel = Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")]
    Host = Annotated[Optional[str], typer.Option("--host", "-H", help="Connect to this reader first")]
    Port = Annotated[int, typer.Option("--port", "-p", help="Reader port")]

    @app.command()
    def menu(
        host: Host = None,
        port: Port = 27011,
        auto: Annotated[bool, typer.Option("--auto/--no-auto", help="Search the LAN for a reader on start")] = True,
        page_size: PageSize = None,
        log_file: LogFile = None,
        log_level: LogLevel = None,
    ) -> None:
        """Run the interactive menu."""
        from uhf_tui.cli.menus import MenuApp

        settings = _settings(page_size, log_file, log_level)
        ctx, registry = _session(settings, host, port)
        try:
            MenuApp(ctx, registry, auto_connect=auto and not host).run()
        except KeyboardInterrupt:
            ctx.ui.exit_menu_mode()
            ctx.reader.disconnect()
            raise typer.Exit(130)

    @app.command()
    def shell(
        host: Host = None,
        port: Port = 27011,
        log_file: LogFile = None,
        log_level: LogLevel = None,
    ) -> None:
        """Run the command shell without menus."""
        from uhf_tui.cli.shell import run_shell

        settings = _settings(None, log_file, log_level)
        ctx, registry = _session(settings, host, port)
        try:
            run_shell(ctx, registry)
        except KeyboardInterrupt:
            raise typer.Exit(130)
        finally:
            ctx.reader.disconnect()

    @app.command()
    def scan(
        ports: Annotated[str, typer.Option("--ports", help="Ports: list, ranges, auto or auto+")] = "auto",
        prefix: Annotated[Optional[str], typer.Option("--prefix", help="Subnet prefix such as 192.168.1")] = None,
        timeout: Annotated[float, typer.Option("--timeout", help="Connect timeout in seconds")] = 0.2,
        log_file: LogFile = None,
        log_level: LogLevel = None,
    ) -> None:
        """Search local subnets for a reader."""
        from uhf_tui.net.discovery import detect_prefixes, find_target, parse_ports

        _settings(None, log_file, log_level)
        prefixes = [prefix] if prefix else detect_prefixes()
        if not prefixes:
            console.print("[red]No LAN prefixes found. Use --prefix, e.g. 192.168.1[/]")
            raise typer.Exit(1)
        port_list = parse_ports(ports)

        table = Table(title="Scan plan")
        table.add_column("Subnet", style="cyan")
        table.add_column("Ports")
        for p in prefixes:
            shown = ", ".join(str(n) for n in port_list[:8])
            more = f" (+{len(port_list) - 8} more)" if len(port_list) > 8 else ""
            table.add_row(f"{p}.0/24", shown + more)
        console.print(table)

        with console.status("Scanning..."):
            found = find_target(prefixes, port_list, timeout)
        if found is None:
            console.print("[yellow]No reader found.[/]")
            raise typer.Exit(1)
        console.print(f"[green]Reader found at[/] [bold]{found}[/]")

    @app.command()
    def keys() -> None:
        """Show decoded key events; press q or Ctrl-D to stop."""
        from uhf_tui.cli.core.input import InputDecoder, Key
        from uhf_tui.cli.core.terminal import TerminalModeController

        terminal = TerminalModeController()
        decoder = InputDecoder()
        with terminal.raw() as ok:
            if not ok:
                console.print("[red]Raw keyboard input is not available on this terminal.[/]")
                raise typer.Exit(1)
            console.print("[dim]Press keys; q or Ctrl-D quits.[/]")
            while True:
                event = decoder.next_event()
                if event.key is Key.EOF or event.char in ("q", "Q"):
                    break
                name = event.key.name if event.key is not None else repr(event.char)
                console.print(f"{name:<10} [dim]{event.raw!r}[/]")

    return app
