"""Local command parsing, registry and dispatch for the REPL.

This module provides:
- LocalCommand: a parsed `:command args...` line
- CommandContext: all shared state needed by command handlers
- CommandResult: result of command execution with control flow signals
- Command registry with handler functions

Local commands are interpreted by the console and never sent to the server.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from nebula_console.cli.repl.display import print_console_resp, print_help
from nebula_console.core.errors import ConsoleError, ExportError, ParamError

if TYPE_CHECKING:
    from nebula_console.cli.repl.readers import LineReader
    from nebula_console.cli.repl.state import REPLState
    from nebula_console.core.connection import ConsoleSession
    from nebula_console.printer import DataSetPrinter, PlanDescPrinter

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Error: this local command not exists!"


@dataclass
class LocalCommand:
    """A line addressed to the console itself."""

    name: str
    args: list[str]
    # Text after the command name, case and spacing kept
    raw: str = ""


def parse_local_command(line: str) -> LocalCommand | None:
    """Recognize a local command.

    Returns:
        LocalCommand, or None when the line is a statement for the server.
    """
    plain = line.strip()
    if plain.lower() in ("exit", "quit"):
        return LocalCommand(name="quit", args=[])
    if not plain.startswith(":"):
        return None

    if plain.endswith(";"):
        plain = plain[:-1]
    body = plain[1:].strip()
    if not body:
        return LocalCommand(name="", args=[])

    parts = body.split(maxsplit=1)
    raw = parts[1] if len(parts) > 1 else ""
    return LocalCommand(name=parts[0].lower(), args=raw.split(), raw=raw)


class CommandAction(Enum):
    """Control flow actions from command handlers."""

    CONTINUE = auto()  # Continue REPL loop
    BREAK = auto()  # Exit REPL loop


@dataclass
class CommandContext:
    """All state needed by command handlers.

    A `:play` replay runs with a copy whose reader is the dataset's reader.
    """

    session: ConsoleSession
    state: REPLState
    reader: LineReader
    data_set_printer: DataSetPrinter
    plan_printer: PlanDescPrinter


@dataclass
class CommandResult:
    """Result from a command handler."""

    action: CommandAction = CommandAction.CONTINUE
    message: str | None = None  # Optional message to display


# Type alias for command handlers
CommandHandler = Callable[[CommandContext, LocalCommand], CommandResult]


def _parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError as e:
        print_console_resp(f"Error: invalid integer, {e}")
        return None


# =============================================================================
# Command Handlers
# =============================================================================


def cmd_quit(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Leave the console."""
    return CommandResult(action=CommandAction.BREAK)


def cmd_sleep(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Pause reading for N seconds."""
    if not command.args:
        return CommandResult(message="Usage: :sleep <seconds>")
    seconds = _parse_int(command.args[0])
    if seconds is not None and seconds > 0:
        time.sleep(seconds)
    return CommandResult()


def cmd_repeat(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Run the next statement N times."""
    if not command.args:
        return CommandResult(message="Usage: :repeat <n>")
    repeats = _parse_int(command.args[0])
    if repeats is None:
        return CommandResult()
    if repeats < 1:
        print_console_resp("Error: invalid integer, repeats should be greater than 0")
        return CommandResult()
    ctx.state.repeats = repeats
    return CommandResult()


def cmd_play(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Replay a dataset script."""
    if not command.args:
        return CommandResult(message="Usage: :play <dataset>")

    # Lazy import to avoid circular deps
    from nebula_console.cli.repl.core import play_dataset

    name = command.args[0]
    try:
        space = play_dataset(ctx, name)
    except ConsoleError as e:
        logger.info("dataset %s failed: %s", name, e)
        print_console_resp(f"Error: load dataset failed, {e}")
        return CommandResult()

    print_console_resp("Load dataset succeeded!")
    ctx.reader.status.set_space(space)
    return CommandResult()


def cmd_set(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Enable CSV or DOT export."""
    if len(command.args) < 2 or command.args[0].lower() not in ("csv", "dot"):
        return CommandResult(message="Usage: :set csv <file> | :set dot <file>")

    target, path = command.args[0].lower(), command.args[1]
    try:
        if target == "csv":
            ctx.data_set_printer.set_out_csv(path)
        else:
            ctx.plan_printer.set_out_dot(path)
    except ExportError as e:
        print(f"Error: {e}")
    return CommandResult()


def cmd_unset(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Disable CSV or DOT export."""
    target = command.args[0].lower() if command.args else ""
    if target == "csv":
        ctx.data_set_printer.unset_out_csv()
    elif target == "dot":
        ctx.plan_printer.unset_out_dot()
    else:
        return CommandResult(message="Usage: :unset csv | :unset dot")
    return CommandResult()


def cmd_param(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Define or remove a query parameter."""
    if "=>" not in command.raw:
        return CommandResult(message="Usage: :param <name> => <value>")
    try:
        name = ctx.state.params.define(command.raw)
    except ParamError as e:
        print(f"Error: {e}")
        return CommandResult()
    logger.debug("parameter %s updated", name)
    return CommandResult()


def cmd_params(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Show defined parameters."""
    name = command.args[0] if command.args else None
    try:
        text = ctx.state.params.format(name)
    except ParamError as e:
        print(f"Error: {e}")
        return CommandResult()
    if text:
        print(text)
    return CommandResult()


def cmd_help(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Show help."""
    print_help()
    return CommandResult()


# =============================================================================
# Command Registry
# =============================================================================

# Map command names to handler functions
COMMANDS: dict[str, CommandHandler] = {
    "quit": cmd_quit,
    "exit": cmd_quit,  # Alias
    "sleep": cmd_sleep,
    "repeat": cmd_repeat,
    "play": cmd_play,
    "set": cmd_set,
    "unset": cmd_unset,
    "param": cmd_param,
    "params": cmd_params,
    "help": cmd_help,
}


def dispatch_command(ctx: CommandContext, command: LocalCommand) -> CommandResult:
    """Dispatch a local command to its handler.

    Args:
        ctx: Command context
        command: Parsed local command

    Returns:
        CommandResult; unknown commands print an error and continue.
    """
    handler = COMMANDS.get(command.name)
    if handler is None:
        print_console_resp(UNKNOWN_COMMAND)
        return CommandResult()
    return handler(ctx, command)
