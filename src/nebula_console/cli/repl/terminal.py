"""Interactive line-editor backends.

Each backend shows a prompt and returns one raw line. Ctrl-D raises
EOFError and Ctrl-C raises KeyboardInterrupt, for every backend.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory
from prompt_toolkit.shortcuts import CompleteStyle
from prompt_toolkit.styles import Style

from nebula_console.cli.repl.completer import KeywordCompleter, ReadlineCompleter

logger = logging.getLogger(__name__)

PROMPT_STYLE = Style.from_dict(
    {
        "prompt": "bold",
        "prompt.error": "bold ansired",
    }
)

# Skip loading history files larger than this
MAX_HISTORY_FILE_SIZE = 1_000_000

EDITORS = ("prompt-toolkit", "readline")


class Terminal(Protocol):
    """A line editor that reads one line per prompt."""

    def prompt(self, message: str, error: bool = False) -> str:
        """Show `message` and return the typed line.

        Args:
            message: Prompt text.
            error: Highlight the prompt because the last statement failed.
        """
        ...

    def close(self) -> None:
        """Persist history and release the terminal."""
        ...


class PromptToolkitTerminal:
    """prompt_toolkit backend with file history and keyword completion."""

    def __init__(self, history_file: str, session: PromptSession[str] | None = None) -> None:
        self._session = session or PromptSession(
            history=FileHistory(history_file),
            completer=KeywordCompleter(),
            # Second Tab prints the candidate list, like GNU readline
            complete_style=CompleteStyle.READLINE_LIKE,
            complete_while_typing=False,
            style=PROMPT_STYLE,
        )

    def prompt(self, message: str, error: bool = False) -> str:
        style_class = "class:prompt.error" if error else "class:prompt"
        return self._session.prompt(FormattedText([(style_class, message)]))

    def close(self) -> None:
        # FileHistory appends on every accepted line
        pass


class ReadlineTerminal:
    """GNU readline backend, for terminals where prompt_toolkit misbehaves."""

    def __init__(self, history_file: str, history_length: int = 1000) -> None:
        import readline

        self._readline = readline
        self._history_file = history_file
        self._color = sys.stdout.isatty()

        readline.parse_and_bind("tab: complete")
        # Keep ':' inside words so local commands complete
        readline.set_completer_delims(" \t\n")
        readline.set_completer(ReadlineCompleter().complete)
        readline.set_history_length(history_length)

        try:
            if os.path.exists(history_file):
                size = os.path.getsize(history_file)
                if size > MAX_HISTORY_FILE_SIZE:
                    logger.warning(
                        "history file %s is too large (%d bytes), skipping load", history_file, size
                    )
                else:
                    readline.read_history_file(history_file)
        except OSError as e:
            logger.warning("Open history file %s failed, %s", history_file, e)

    def prompt(self, message: str, error: bool = False) -> str:
        if self._color:
            # \001 / \002 mark non-printing bytes so readline measures the prompt correctly
            color = "\001\033[1;31m\002" if error else "\001\033[1m\002"
            message = f"{color}{message}\001\033[0m\002"
        return input(message)

    def close(self) -> None:
        try:
            self._readline.write_history_file(self._history_file)
        except OSError as e:
            logger.warning("Write history file %s failed, %s", self._history_file, e)


def create_terminal(editor: str, history_file: str) -> Terminal:
    """Build the configured line-editor backend.

    Raises:
        ValueError: For an unknown editor name.
    """
    if editor == "prompt-toolkit":
        return PromptToolkitTerminal(history_file)
    if editor == "readline":
        return ReadlineTerminal(history_file)
    raise ValueError(f"unknown line editor: {editor} (choose from {', '.join(EDITORS)})")
