"""Source text and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Span:
    """A range within an expression source."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


class SourceText:
    """Expression text that did not necessarily come from a file.

    Command-line arguments and stdin have no path to re-read, so the
    renderer is handed one of these to quote lines from.
    """

    def __init__(self, text: str, name: str = "<expr>") -> None:
        self.name = name
        self.text = text
        self.lines = text.splitlines()

    @classmethod
    def from_path(cls, path: Path) -> SourceText:
        return cls(path.read_text(), str(path))

    def line_at(self, n: int) -> str | None:
        """Return the 1-indexed line, or None if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return None
