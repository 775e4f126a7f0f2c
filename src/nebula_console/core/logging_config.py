"""Logging setup for the console.

Console output (tables, prompts, errors returned by the server) goes to
stdout through print/rich. Logging is for diagnostics only and goes to stderr
or a file, so the default level is WARNING to keep it out of result tables.

Usage:
    from nebula_console.core.logging_config import configure_logging

    configure_logging(level="DEBUG")
    logger = logging.getLogger(__name__)

Environment Variables:
    NEBULA_CONSOLE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    NEBULA_CONSOLE_LOG_FORMAT: Output format ("text" or "json")
    NEBULA_CONSOLE_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra=`
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_configured = False


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object per line.

    {"timestamp": "...", "level": "INFO", "logger": "nebula_console...",
     "message": "...", "extra": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger once per process.

    Explicit arguments win over the NEBULA_CONSOLE_LOG_* environment
    variables. Subsequent calls are ignored unless force=True.

    Args:
        level: Log level name. Defaults to NEBULA_CONSOLE_LOG_LEVEL or "WARNING".
        format: "text" or "json". Defaults to NEBULA_CONSOLE_LOG_FORMAT or "text".
        file_path: Also log to this file. Defaults to NEBULA_CONSOLE_LOG_FILE.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("NEBULA_CONSOLE_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("NEBULA_CONSOLE_LOG_FORMAT", "text")  # type: ignore
    file_path = file_path or os.environ.get("NEBULA_CONSOLE_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True
