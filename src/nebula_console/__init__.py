"""nebula-console - Interactive console for Nebula Graph.

Reads nGQL statements from a terminal, a script file or an inline string,
forwards them to a Nebula Graph session and renders the results as tables.

Layers:
    core/       Configuration, connection, parameters, logging, errors
    printer/    Value, data set and execution plan rendering
    cli/        Command-line entry point and the REPL loop

Quick Start:
    $ nebula-console --addr 127.0.0.1 --port 9669 -u root -p nebula
    (root@nebula) [(none)]> SHOW SPACES;
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
