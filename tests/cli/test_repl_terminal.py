"""Tests for line-editor backends."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from nebula_console.cli.repl.terminal import (
    MAX_HISTORY_FILE_SIZE,
    PromptToolkitTerminal,
    ReadlineTerminal,
    create_terminal,
)


@pytest.fixture
def mock_readline():
    readline = MagicMock()
    with patch.dict(sys.modules, {"readline": readline}):
        yield readline


class TestPromptToolkitTerminal:
    """Tests for the prompt_toolkit backend."""

    def test_prompt_style(self):
        """The prompt is styled, red after an error."""
        session = MagicMock()
        session.prompt.return_value = "SHOW HOSTS"
        terminal = PromptToolkitTerminal("unused", session=session)

        assert terminal.prompt("> ") == "SHOW HOSTS"
        assert list(session.prompt.call_args.args[0]) == [("class:prompt", "> ")]

        terminal.prompt("> ", error=True)
        assert list(session.prompt.call_args.args[0]) == [("class:prompt.error", "> ")]

    def test_builds_session_with_history(self, tmp_path):
        """The default session uses file history and keyword completion."""
        history = str(tmp_path / "hist")
        with patch("nebula_console.cli.repl.terminal.PromptSession") as MockSession:
            PromptToolkitTerminal(history)
        kwargs = MockSession.call_args.kwargs
        assert kwargs["history"].filename == history
        assert kwargs["completer"] is not None


class TestReadlineTerminal:
    """Tests for the readline backend."""

    def test_loads_history(self, mock_readline, tmp_path):
        """An existing history file is loaded and completion is bound."""
        history = tmp_path / "hist"
        history.write_text("SHOW HOSTS\n")
        ReadlineTerminal(str(history))

        mock_readline.read_history_file.assert_called_once_with(str(history))
        mock_readline.set_completer_delims.assert_called_once_with(" \t\n")
        mock_readline.set_completer.assert_called_once()

    def test_skips_large_history(self, mock_readline, tmp_path):
        """Oversized history files are not loaded."""
        history = tmp_path / "hist"
        history.write_bytes(b"x" * (MAX_HISTORY_FILE_SIZE + 1))
        ReadlineTerminal(str(history))
        mock_readline.read_history_file.assert_not_called()

    def test_prompt_uses_input(self, mock_readline, tmp_path):
        """Lines are read with input()."""
        terminal = ReadlineTerminal(str(tmp_path / "hist"))
        with patch("builtins.input", return_value="SHOW SPACES") as mock_input:
            assert terminal.prompt("> ") == "SHOW SPACES"
        assert "> " in mock_input.call_args.args[0]

    def test_close_writes_history(self, mock_readline, tmp_path):
        """close saves the history file."""
        history = str(tmp_path / "hist")
        ReadlineTerminal(history).close()
        mock_readline.write_history_file.assert_called_once_with(history)

    def test_close_write_failure_logged(self, mock_readline, tmp_path, caplog):
        """History write failures are logged, not raised."""
        mock_readline.write_history_file.side_effect = OSError("read-only")
        ReadlineTerminal(str(tmp_path / "hist")).close()
        assert "Write history file" in caplog.text


class TestCreateTerminal:
    """Tests for create_terminal."""

    def test_readline(self, mock_readline, tmp_path):
        """readline selects the readline backend."""
        assert isinstance(create_terminal("readline", str(tmp_path / "h")), ReadlineTerminal)

    def test_prompt_toolkit(self, tmp_path):
        """prompt-toolkit selects the prompt_toolkit backend."""
        with patch("nebula_console.cli.repl.terminal.PromptSession"):
            terminal = create_terminal("prompt-toolkit", str(tmp_path / "h"))
        assert isinstance(terminal, PromptToolkitTerminal)

    def test_unknown(self):
        """Unknown editors raise ValueError."""
        with pytest.raises(ValueError, match="unknown line editor"):
            create_terminal("vim", "h")
