"""REPL state management."""

from __future__ import annotations

from dataclasses import dataclass, field

from nebula_console.core.params import ParameterMap

NO_SPACE = "(none)"


@dataclass
class ReaderStatus:
    """Prompt-facing state owned by one line source.

    A `:play` replay gets its own status so its errors and space changes stay
    separate from the outer prompt until the replay finishes.
    """

    user: str = ""
    space: str = NO_SPACE
    last_error: str | None = None
    playing_data: bool = False

    def set_space(self, space: str | None) -> None:
        self.space = space or NO_SPACE


@dataclass
class REPLState:
    """State shared by every line source of one console run."""

    repeats: int = 1
    params: ParameterMap = field(default_factory=ParameterMap)
