"""Core building blocks shared by the CLI and the REPL."""

from nebula_console.core.config import ConsoleConfig
from nebula_console.core.connection import ConsoleSession, connect
from nebula_console.core.errors import (
    ConfigError,
    ConnectionFailedError,
    ConsoleError,
    DatasetNotFoundError,
    ExportError,
    ParamError,
)

__all__ = [
    "ConsoleConfig",
    "ConsoleSession",
    "connect",
    "ConsoleError",
    "ConfigError",
    "ConnectionFailedError",
    "DatasetNotFoundError",
    "ExportError",
    "ParamError",
]
