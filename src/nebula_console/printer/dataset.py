"""Data set rendering: ASCII table on screen, optional CSV export."""

from __future__ import annotations

import csv
import logging
import sys
from collections.abc import Sequence
from typing import IO, TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from nebula_console.core.errors import ExportError
from nebula_console.printer.values import value_to_string

if TYPE_CHECKING:
    from nebula3.common.ttypes import Value

logger = logging.getLogger(__name__)


def build_table(header: Sequence[str], rows: Sequence[Sequence[str]], show_lines: bool = False) -> Table:
    """ASCII box table with plain headers; cells are literal text, never markup."""
    table = Table(box=box.ASCII, show_lines=show_lines, header_style="none", highlight=False)
    for column in header:
        table.add_column(Text(column), no_wrap=True)
    for row in rows:
        table.add_row(*(Text(cell) for cell in row))
    return table


def print_table(console: Console, table: Table) -> None:
    """Print `table` at its natural width, whatever the terminal width.

    Cells are never folded and lines are never cropped, so piped output keeps
    every value on one table line.
    """
    options = console.options.update_width(sys.maxsize)
    table.width = Measurement.get(console, options, table).maximum
    console.print(table, crop=False)


class DataSetPrinter:
    """Prints result data sets and mirrors them to a CSV file when one is set."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self._csv_file: IO[str] | None = None
        self._csv_path: str | None = None

    @property
    def csv_path(self) -> str | None:
        return self._csv_path

    def set_out_csv(self, path: str) -> None:
        """Append every following data set to `path` (file is created if needed).

        Raises:
            ExportError: If the file cannot be opened.
        """
        self.unset_out_csv()
        try:
            self._csv_file = open(path, "a", newline="", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Open or Create file {path} failed, {e}") from e
        self._csv_path = path
        logger.info("csv export enabled: %s", path)

    def unset_out_csv(self) -> None:
        if self._csv_file is None:
            return
        try:
            self._csv_file.close()
        except OSError as e:
            logger.warning("Close file %s failed, %s", self._csv_path, e)
        self._csv_file = None
        self._csv_path = None

    def print_data_set(self, columns: Sequence[str], rows: Sequence[Sequence[Value]]) -> None:
        """Render rows of driver values; prints nothing for an empty set."""
        if not rows:
            return

        cells = [[value_to_string(v) for v in row] for row in rows]
        print_table(self.console, build_table(columns, cells))

        if self._csv_file is not None:
            self._write_csv(columns, cells)

    def _write_csv(self, columns: Sequence[str], cells: list[list[str]]) -> None:
        assert self._csv_file is not None
        try:
            writer = csv.writer(self._csv_file)
            writer.writerow(columns)
            writer.writerows(cells)
            self._csv_file.write("\n")
            self._csv_file.flush()
        except OSError as e:
            raise ExportError(f"Write file {self._csv_path} failed, {e}") from e
