"""Interactive and scripted nGQL REPL.

Public API:
    run_console: Connect and run statements from the terminal or a script
    run_loop: Read-dispatch-execute loop over one line source
    REPLState: State shared by every line source of a run
    InteractiveReader, ScriptReader: Line sources
"""

from __future__ import annotations

from nebula_console.cli.repl.core import run_console, run_loop
from nebula_console.cli.repl.readers import InteractiveReader, ScriptReader
from nebula_console.cli.repl.state import REPLState

__all__ = [
    "run_console",
    "run_loop",
    "REPLState",
    "InteractiveReader",
    "ScriptReader",
]
