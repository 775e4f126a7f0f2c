"""Result rendering: cell values, data set tables and execution plans."""

from nebula_console.printer.dataset import DataSetPrinter
from nebula_console.printer.plan import PlanDescPrinter
from nebula_console.printer.values import value_to_string

__all__ = ["DataSetPrinter", "PlanDescPrinter", "value_to_string"]
