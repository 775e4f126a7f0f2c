"""Console error types.

Custom exceptions for configuration, connection and local command failures.
Errors returned by the server inside a result set are not exceptions; they
are rendered by the result printer.
"""

from __future__ import annotations


class ConsoleError(Exception):
    """Base error for console operations."""


class ConfigError(ConsoleError):
    """Invalid command-line configuration.

    Raised when:
    - Port, user or password is missing
    - TLS is enabled without all certificate paths
    """


class ConnectionFailedError(ConsoleError):
    """Could not reach the server or open a session.

    Raised when:
    - The connection pool fails to initialize
    - Authentication is rejected
    - TLS material cannot be loaded
    """


class DatasetNotFoundError(ConsoleError):
    """Dataset requested by `:play` exists neither on disk nor in the package."""


class ParamError(ConsoleError):
    """Malformed `:param` definition or unsupported parameter value."""


class ExportError(ConsoleError):
    """CSV or DOT export file could not be opened or written."""
