"""Line-oriented command shell: tokenizer, command registry and the read loop."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from uhf_tui.config import Settings
from uhf_tui.core import TagRead, TagStats
from uhf_tui.sdk.push import PushClient, push_status
from uhf_tui.sdk.reader import ReaderClient

if TYPE_CHECKING:
    from uhf_tui.cli.console import ConsoleUi

logger = logging.getLogger(__name__)

BACK_WORDS = frozenset({"menu", "back"})
QUIT_WORDS = frozenset({"quit", "exit", "q"})
HELP_WORDS = frozenset({"help", "?"})


class ShellExit(Enum):
    BACK = "back"
    QUIT = "quit"


def tokenize(line: Optional[str]) -> list[str]:
    """
    Split on whitespace; double quotes group words and are dropped.

    An unterminated quote runs to the end of the line.
    """
    tokens: list[str] = []
    if line is None:
        return tokens
    current: list[str] = []
    quoted = False
    for ch in line:
        if ch == '"':
            quoted = not quoted
            continue
        if not quoted and ch.isspace():
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


@dataclass
class CommandContext:
    """What a command handler can reach: reader, console, push client, stats."""
    reader: ReaderClient
    ui: "ConsoleUi"
    settings: Settings = field(default_factory=Settings)
    push: Optional[PushClient] = None
    stats: TagStats = field(default_factory=TagStats)
    show_tags: bool = False

    def report(self, text: str) -> None:
        """Tell the user something: in the status line over a menu, else a line."""
        if self.ui.menu_active:
            self.ui.set_status_message(text)
        else:
            self.ui.println(text)

    def handle_tag(self, tag: TagRead) -> None:
        """Reader callback; runs on the reader's thread."""
        if self.stats.on_tag():
            self.ui.set_status_base(self.stats.status_line())
        if self.show_tags:
            self.ui.print_event(tag.describe())
        if self.push is not None:
            self.push.enqueue(tag)

    def refresh_status(self) -> None:
        """Reader and push state in the header, tag counts in the status line."""
        reader_state = "Reader: connected" if self.reader.is_connected else "Reader: disconnected"
        push_state = push_status(self.push, time.time())
        self.ui.set_header_right(f"{reader_state} | {push_state}" if push_state else reader_state)
        self.ui.set_status_base(self.stats.status_line())


CommandHandler = Callable[[list[str], CommandContext], None]


@dataclass(frozen=True)
class CommandDef:
    name: str
    help: str
    handler: CommandHandler


class CommandRegistry:
    """Commands by name and alias, kept in registration order."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandDef] = {}

    def register(self, name: str, help: str, handler: CommandHandler, *aliases: str) -> None:
        definition = CommandDef(name, help, handler)
        self._commands[name] = definition
        for alias in aliases:
            if alias and alias.strip():
                self._commands[alias] = definition

    def execute(self, tokens: list[str], ctx: CommandContext) -> bool:
        """Run the command named by tokens[0]. False if no such command."""
        if not tokens:
            return True
        definition = self._commands.get(tokens[0].lower())
        if definition is None:
            return False
        logger.debug("running command %s", tokens)
        definition.handler(tokens, ctx)
        return True

    def list_unique(self) -> list[CommandDef]:
        unique: dict[str, CommandDef] = {}
        for definition in self._commands.values():
            unique.setdefault(definition.name, definition)
        return list(unique.values())

    def help_lines(self) -> list[str]:
        lines = [f"  {d.help}" for d in self.list_unique()]
        lines.append("  menu | back     Return to the menu")
        lines.append("  quit | exit | q Quit")
        return lines


def run_shell(ctx: CommandContext, registry: CommandRegistry) -> ShellExit:
    """Prompt, read and dispatch commands until the user leaves."""
    ui = ctx.ui
    ui.exit_menu_mode()
    ui.println("Command shell. Type 'menu' to return.")
    while True:
        ui.prompt()
        line = ui.read_line()
        if line is None:
            return ShellExit.BACK
        tokens = tokenize(line)
        if not tokens:
            continue
        command = tokens[0].lower()
        if command in BACK_WORDS:
            return ShellExit.BACK
        if command in QUIT_WORDS:
            return ShellExit.QUIT
        if command in HELP_WORDS:
            ui.println("Commands:")
            for help_line in registry.help_lines():
                ui.println(help_line)
            continue
        if not registry.execute(tokens, ctx):
            ui.println("Unknown command. Type 'help'.")
