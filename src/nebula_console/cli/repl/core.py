"""Core REPL loop and statement execution."""

from __future__ import annotations

import io
import logging
import time
from dataclasses import replace
from typing import TextIO

from rich.console import Console

from nebula_console.cli.repl.datasets import open_dataset
from nebula_console.cli.repl.display import (
    print_bye,
    print_result,
    print_welcome,
    succeeded,
    timestamp,
)
from nebula_console.cli.repl.readers import InteractiveReader, LineReader, ScriptReader
from nebula_console.cli.repl.registry import (
    CommandAction,
    CommandContext,
    dispatch_command,
    parse_local_command,
)
from nebula_console.cli.repl.state import REPLState
from nebula_console.core.config import ConsoleConfig, default_history_file
from nebula_console.core.connection import connect
from nebula_console.core.errors import ConfigError, ConsoleError, ExportError
from nebula_console.printer import DataSetPrinter, PlanDescPrinter

logger = logging.getLogger(__name__)


def error_message(statement: str, code: int, message: str) -> str:
    return f"an error occurred when executing: {statement}, [ERROR ({code})]: {message}"


def execute_statement(ctx: CommandContext, reader: LineReader, statement: str) -> bool:
    """Send one statement `repeats` times and print the results.

    Returns:
        False when a replay must stop because of an error, True otherwise.
    """
    status = reader.status
    repeats = ctx.state.repeats
    ctx.state.repeats = 1
    params = ctx.state.params.driver_values()

    server_total = 0
    client_total = 0
    for _ in range(repeats):
        start = time.perf_counter_ns()
        try:
            result = ctx.session.execute(statement, params)
        except Exception as e:
            logger.warning("execute failed: %s", e)
            print(f"Error: {e}")
            print()
            status.last_error = f"an error occurred when executing: {statement}, {e}"
            if status.playing_data:
                return False
            continue
        elapsed_us = (time.perf_counter_ns() - start) // 1000

        if succeeded(result):
            status.last_error = None
        else:
            status.last_error = error_message(statement, result.error_code(), result.error_msg())
            if status.playing_data:
                return False

        server_total += result.latency()
        if reader.output:
            try:
                print_result(result, elapsed_us, ctx.data_set_printer, ctx.plan_printer)
            except ExportError as e:
                print(f"Error: {e}")
            client_total += elapsed_us
            print(timestamp())
            print()
        status.set_space(result.space_name())

    if repeats > 1:
        print(
            f"Executed {repeats} times, (total time spent {server_total}/{client_total} us), "
            f"(average time spent {server_total // repeats}/{client_total // repeats} us)"
        )
        print()
    return True


def run_loop(ctx: CommandContext, reader: LineReader) -> None:
    """Read and run statements until end of input, `:quit`, or a replay error."""
    if ctx.reader is not reader:
        ctx = replace(ctx, reader=reader)

    while True:
        line = reader.read_line()
        if line is None:
            if reader.output:
                print()
            return
        if not line.strip():
            continue

        command = parse_local_command(line)
        if command is not None:
            result = dispatch_command(ctx, command)
            if result.message:
                print(result.message)
            if result.action == CommandAction.BREAK:
                return
            continue

        if not execute_statement(ctx, reader, line):
            return


def play_dataset(ctx: CommandContext, name: str) -> str:
    """Replay a dataset script through the current session.

    Returns:
        The space the replay ended in.

    Raises:
        DatasetNotFoundError: If the dataset does not exist.
        ConsoleError: If a statement of the dataset fails.
    """
    stream = open_dataset(name)
    reader = ScriptReader(stream, ctx.reader.status.user, output=False)
    reader.status.playing_data = True
    print(f"Start loading dataset {name}...")
    try:
        run_loop(ctx, reader)
    finally:
        reader.close()

    if reader.status.last_error:
        raise ConsoleError(reader.status.last_error)
    return reader.status.space


def _open_script(config: ConsoleConfig) -> TextIO | None:
    if config.eval_script:
        return io.StringIO(config.eval_script)
    if config.file:
        try:
            return open(config.file, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Open file {config.file} failed, {e}") from e
    return None


def run_console(config: ConsoleConfig, console: Console | None = None) -> None:
    """Connect, run the REPL or the script, and disconnect.

    Raises:
        ConfigError: If the script file cannot be opened.
        ConnectionFailedError: If the server cannot be reached or login fails.
        ExportError: If an initial --csv / --dot target cannot be opened.
    """
    from nebula_console.cli.repl.terminal import create_terminal

    console = console or Console()
    script = _open_script(config)

    try:
        with connect(config) as session:
            data_set_printer = DataSetPrinter(console)
            plan_printer = PlanDescPrinter(console)
            if config.csv_file:
                data_set_printer.set_out_csv(config.csv_file)
            if config.dot_file:
                plan_printer.set_out_dot(config.dot_file)

            reader: LineReader
            if script is not None:
                reader = ScriptReader(script, config.user)
                script = None
            else:
                history_file = config.history_file or default_history_file()
                terminal = create_terminal(config.line_editor, history_file)
                reader = InteractiveReader(terminal, config.user)
                print_welcome()

            ctx = CommandContext(
                session=session,
                state=REPLState(),
                reader=reader,
                data_set_printer=data_set_printer,
                plan_printer=plan_printer,
            )
            try:
                run_loop(ctx, reader)
            finally:
                reader.close()
                data_set_printer.unset_out_csv()
                plan_printer.unset_out_dot()
                print_bye(config.user)
    finally:
        if script is not None:
            script.close()
