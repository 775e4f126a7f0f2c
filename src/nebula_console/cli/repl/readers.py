"""Line sources: the interactive terminal and non-interactive scripts.

Both return complete statements (continuations already joined) and None at
end of input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from nebula_console.cli.repl.joiner import LineJoiner
from nebula_console.cli.repl.state import ReaderStatus

if TYPE_CHECKING:
    from nebula_console.cli.repl.terminal import Terminal

CONTINUATION = "-> "


class LineReader:
    """Shared prompt and continuation handling."""

    def __init__(self, user: str, output: bool = True) -> None:
        self.status = ReaderStatus(user=user)
        self.output = output
        self._joiner = LineJoiner()
        self._prompt_len = 0

    def prompt(self) -> str:
        """Primary prompt, or the continuation marker aligned under it."""
        if self._joiner.pending:
            return " " * max(self._prompt_len - len(CONTINUATION), 0) + CONTINUATION
        prompt = f"({self.status.user}@nebula) [{self.status.space}]> "
        self._prompt_len = len(prompt)
        return prompt

    def read_line(self) -> str | None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class InteractiveReader(LineReader):
    """Reads statements from a line-editor backend."""

    def __init__(self, terminal: Terminal, user: str) -> None:
        super().__init__(user, output=True)
        self.terminal = terminal

    def read_line(self) -> str | None:
        """Next statement; "" after Ctrl-C, None after Ctrl-D."""
        while True:
            try:
                text = self.terminal.prompt(self.prompt(), error=self.status.last_error is not None)
            except KeyboardInterrupt:
                self._joiner.reset()
                return ""
            except EOFError:
                return None

            line = self._joiner.feed(text)
            if line is not None:
                return line

    def close(self) -> None:
        self.terminal.close()


class ScriptReader(LineReader):
    """Reads statements from a file or an inline -e string.

    With output enabled every input line is echoed after its prompt, so the
    transcript reads like an interactive session. Dataset replays run with
    output disabled.
    """

    def __init__(self, stream: TextIO, user: str, output: bool = True) -> None:
        super().__init__(user, output=output)
        self._stream = stream

    def read_line(self) -> str | None:
        while True:
            raw = self._stream.readline()
            if not raw:
                return self._joiner.flush()
            text = raw.rstrip("\r\n")
            if self.output:
                print(f"{self.prompt()}{text}")
            line = self._joiner.feed(text)
            if line is not None:
                return line

    def close(self) -> None:
        self._stream.close()
