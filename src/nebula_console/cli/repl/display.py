"""Display and output formatting utilities for the REPL."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from nebula3.common.ttypes import ErrorCode

if TYPE_CHECKING:
    from nebula3.data.ResultSet import ResultSet

    from nebula_console.printer import DataSetPrinter, PlanDescPrinter


def is_partial(result: ResultSet) -> bool:
    return result.error_code() == ErrorCode.E_PARTIAL_SUCCEEDED


def succeeded(result: ResultSet) -> bool:
    """True for full and partial successes; partial results still carry data."""
    return result.is_succeeded() or is_partial(result)


def timestamp() -> str:
    """Local time in RFC 1123 layout, e.g. "Mon, 19 Oct 2026 10:00:00 CST"."""
    return datetime.now().astimezone().strftime("%a, %d %b %Y %H:%M:%S %Z")


def print_welcome() -> None:
    print()
    print("Welcome to Nebula Graph!")
    print()


def print_bye(user: str) -> None:
    print()
    print(f"Bye {user}!")
    print(timestamp())
    print()


def print_console_resp(message: str) -> None:
    """Print a local command response followed by the time."""
    print(message)
    print()
    print(timestamp())
    print()


def print_help() -> None:
    """Print local command help."""
    print("""
Local commands (never sent to the server):

  :quit, :exit                Leave the console
  :sleep <seconds>            Pause before reading the next line
  :repeat <n>                 Run the next statement n times and report timings
  :play <dataset>             Load a dataset (./data/<dataset>.ngql or bundled)

  :set csv <file>             Append every result table to <file> as CSV
  :unset csv                  Stop CSV export
  :set dot <file>             Write every DOT execution plan to <file>
  :unset dot                  Stop DOT export

  :param <name> => <value>    Define a query parameter (JSON value, empty to remove)
  :params [name]              Show all parameters, or one

  :help                       Show this help

Multi-line input:
  End a line with \\ to continue it, or wrap statements between lines of \"\"\".
""")


def print_result(
    result: ResultSet,
    elapsed_us: int,
    data_set_printer: DataSetPrinter,
    plan_printer: PlanDescPrinter,
) -> None:
    """Print one result set the way the server returned it.

    Args:
        result: Driver result set.
        elapsed_us: Client-side round trip in microseconds.
        data_set_printer: Table renderer (and CSV mirror).
        plan_printer: Plan renderer (and DOT mirror).
    """
    if not succeeded(result):
        print(f"[ERROR ({result.error_code()})]: {result.error_msg()}")
        print()
        return

    latency = result.latency()
    columns = result.keys()
    if columns:
        rows = [row.values for row in result.rows()]
        data_set_printer.print_data_set(columns, rows)
        if rows:
            print(f"Got {len(rows)} rows (time spent {latency}/{elapsed_us} us)")
        else:
            print(f"Empty set (time spent {latency}/{elapsed_us} us)")
    else:
        print(f"Execution succeeded (time spent {latency}/{elapsed_us} us)")

    if is_partial(result):
        print()
        print("[WARNING]: Got partial result.")

    comment = result.comment()
    if comment:
        print()
        print(f"[WARNING]: {comment}")

    plan = result.plan_desc()
    if plan is not None:
        print()
        print(f"Execution Plan (optimize time {plan.optimize_time_in_us} us)")
        print()
        plan_printer.print_plan_desc(plan)
    print()
