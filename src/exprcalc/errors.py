"""Lex/parse errors and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exprcalc.source import SourceText, Span
    from exprcalc.tokens import TokenKind


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, list[str]] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def add_source(self, source: SourceText) -> None:
        """Register text that has no file behind it (argv, stdin)."""
        self._sources[source.name] = source.lines

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Return the 1-indexed line of a registered source or file."""
        if filename not in self._sources:
            path = Path(filename)
            try:
                lines = path.read_text().splitlines() if path.is_file() else []
            except OSError:
                lines = []
            self._sources[filename] = lines
        lines = self._sources[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E204]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                gutter = f"{span.start_line:>4}"
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                        f"{padding}{self._c(color)}{'^' * caret_len}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


# ── Error hierarchy ──────────────────────────────────────────────


class CalcError(Exception):
    """A recoverable failure turning text into an expression tree."""

    code = "E000"
    note: str | None = None

    def __init__(
        self,
        message: str,
        span: Span | None = None,
        kind: TokenKind | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.kind = kind
        super().__init__(message)

    def to_diagnostic(self) -> Diagnostic:
        labels = []
        if self.span is not None:
            labels.append(DiagnosticLabel(span=self.span, message=""))
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self.message,
            labels=labels,
            notes=[self.note] if self.note else [],
        )


class LexError(CalcError):
    """The token source could not produce a token."""

    code = "E100"


class ParseError(CalcError):
    code = "E200"


class UnmatchedParenError(ParseError):
    code = "E201"
    note = "every '(' needs a matching ')'"


class NotUnaryError(ParseError):
    code = "E202"


class NotBinaryError(ParseError):
    code = "E203"
    note = "'!' is prefix-only: write x & !y or !(x), not x ! y"


class MissingOperandError(ParseError):
    code = "E204"


class EmptyExpressionError(ParseError):
    code = "E205"


class TrailingInputError(ParseError):
    code = "E206"


class NestingTooDeepError(ParseError):
    code = "E207"
    note = "raise [parser] max_depth in exprcalc.toml or pass --max-depth"
