"""Keyword completion for nGQL statements and local commands.

Completion is two levels deep: the first word completes against the
statement keywords (and `:` commands), the second against the sub-commands
of the first. Matching is case-insensitive; keywords are inserted upper-case.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

KEYWORDS: dict[str, list[str]] = {
    "SHOW": [
        "HOSTS",
        "SPACES",
        "PARTS",
        "TAGS",
        "EDGES",
        "USERS",
        "ROLES",
        "USER",
        "CONFIGS",
        "INDEXES",
        "STATS",
        "JOBS",
        "SESSIONS",
        "QUERIES",
    ],
    "DESCRIBE": ["TAG", "EDGE", "SPACE", "INDEX", "USER"],
    "DESC": ["TAG", "EDGE", "SPACE", "INDEX", "USER"],
    "GET": ["CONFIGS"],
    "CREATE": ["SPACE", "TAG", "EDGE", "USER", "INDEX"],
    "DROP": ["SPACE", "TAG", "EDGE", "USER", "INDEX"],
    "ALTER": ["USER", "TAG", "EDGE"],
    "INSERT": ["VERTEX", "EDGE"],
    "UPDATE": ["CONFIGS", "VERTEX", "EDGE"],
    "UPSERT": ["VERTEX", "EDGE"],
    "DELETE": ["VERTEX", "EDGE", "TAG"],
    "GRANT": ["ROLE"],
    "REVOKE": ["ROLE"],
    "CHANGE": ["PASSWORD"],
    "FETCH": ["PROP"],
    "SUBMIT": ["JOB"],
    "USE": [],
    "GO": [],
    "LOOKUP": [],
    "MATCH": [],
    "EXPLAIN": [],
    "PROFILE": [],
}

LOCAL_COMMANDS: dict[str, list[str]] = {
    ":quit": [],
    ":exit": [],
    ":sleep": [],
    ":play": [],
    ":repeat": [],
    ":set": ["csv", "dot"],
    ":unset": ["csv", "dot"],
    ":param": [],
    ":params": [],
    ":help": [],
}


def candidates(line: str, cursor: int | None = None) -> tuple[str, list[str]]:
    """Completions for the word under the cursor.

    Args:
        line: The whole input line.
        cursor: Cursor offset; defaults to the end of the line.

    Returns:
        (word being completed, matching candidates).
    """
    if cursor is None:
        cursor = len(line)
    before = line[:cursor]
    words = before.split()
    # A trailing space means the cursor starts a new, empty word
    if not words or before[-1:].isspace():
        words.append("")
    word = words[-1]

    if len(words) == 1:
        table: Iterable[str] = list(KEYWORDS) + list(LOCAL_COMMANDS)
    elif len(words) == 2:
        first = words[0]
        if first.startswith(":"):
            table = LOCAL_COMMANDS.get(first.lower(), [])
        else:
            table = KEYWORDS.get(first.upper(), [])
    else:
        table = []

    prefix = word.lower()
    return word, [c for c in table if c.lower().startswith(prefix)]


class KeywordCompleter(Completer):
    """prompt_toolkit completer over the keyword table."""

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        word, matches = candidates(document.text, document.cursor_position)
        for match in matches:
            yield Completion(text=match, start_position=-len(word))


class ReadlineCompleter:
    """Adapts the keyword table to readline's `complete(text, state)` protocol."""

    def __init__(
        self,
        line_buffer: Callable[[], str] | None = None,
        end_index: Callable[[], int] | None = None,
    ) -> None:
        # readline.get_line_buffer / readline.get_endidx when not given
        self._line_buffer = line_buffer
        self._end_index = end_index
        self._matches: list[str] = []

    def _current_line(self) -> tuple[str, int]:
        """The input line and the end of the word being completed."""
        if self._line_buffer is not None:
            line = self._line_buffer()
            end = self._end_index() if self._end_index is not None else len(line)
            return line, end
        import readline

        return readline.get_line_buffer(), readline.get_endidx()

    def complete(self, text: str, state: int) -> str | None:
        if state == 0:
            line, end = self._current_line()
            _, self._matches = candidates(line, end)
        if state < len(self._matches):
            return self._matches[state]
        return None
