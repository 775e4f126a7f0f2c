"""Multi-line statement assembly.

Two continuation styles:
- a trailing backslash joins the next line verbatim (backslash dropped)
- a line holding only three double or three single quotes opens a fence;
  interior lines are joined with a space until the closing fence

Fencing wins over backslash joining: inside a fence a trailing backslash only
suppresses the separating space.
"""

from __future__ import annotations

_FENCES = ('"""', "'''")


class LineJoiner:
    """Accumulates raw input lines into complete statements."""

    def __init__(self) -> None:
        self._line = ""
        self._fenced = False
        self._backslash = False

    @property
    def pending(self) -> bool:
        """True while a continuation is open."""
        return self._fenced or self._backslash

    def reset(self) -> None:
        self._line = ""
        self._fenced = False
        self._backslash = False

    def feed(self, text: str) -> str | None:
        """Consume one raw line.

        Returns:
            The complete statement, or None when more lines are needed.
        """
        is_fence = text.strip() in _FENCES
        ends_with_backslash = text.endswith("\\")

        if self._fenced:
            if is_fence:
                self._fenced = False
                return self._take()
            if ends_with_backslash:
                self._line += text[:-1]
            else:
                self._line += text + " "
            return None

        if self._backslash:
            if ends_with_backslash:
                self._line += text[:-1]
                return None
            self._line += text
            self._backslash = False
            return self._take()

        if is_fence:
            self._line = ""
            self._fenced = True
            return None
        if ends_with_backslash:
            self._line = text[:-1]
            self._backslash = True
            return None
        self._line = text
        return self._take()

    def flush(self) -> str | None:
        """Close an open continuation at end of input and return its text."""
        if not self.pending:
            return None
        self._fenced = False
        self._backslash = False
        return self._take()

    def _take(self) -> str:
        line, self._line = self._line, ""
        return line
