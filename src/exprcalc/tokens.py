"""Token kinds, token representation, and the token-source protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from exprcalc.source import Span


class TokenKind(Enum):
    # Literals
    INTEGER_LIT = auto()
    BOOLEAN_LIT = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    STAR_STAR = auto()

    # Comparison
    LESS = auto()
    GREATER = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()

    # Logical
    PIPE = auto()
    AMPERSAND = auto()
    CARET = auto()
    BANG = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span

    @property
    def number(self) -> float:
        """Numeric value of a literal token.

        Integer literals go straight to float, so a literal too large for
        a double becomes ``inf`` rather than an error.
        """
        if self.kind == TokenKind.INTEGER_LIT:
            return float(self.value)
        if self.kind == TokenKind.BOOLEAN_LIT:
            return 1.0 if self.value == "True" else 0.0
        raise ValueError(f"{self.kind.name} token has no numeric value")


class TokenSource(Protocol):
    """Anything the parser can pull tokens from.

    Both methods may raise ``LexError``. ``peek`` must be idempotent, and
    once the input is exhausted both keep returning the EOF token.
    """

    def peek(self) -> Token: ...

    def consume(self) -> Token: ...


KEYWORDS: dict[str, TokenKind] = {
    "True": TokenKind.BOOLEAN_LIT,
    "False": TokenKind.BOOLEAN_LIT,
}

OPERATORS: dict[str, TokenKind] = {
    "**": TokenKind.STAR_STAR,
    "<=": TokenKind.LESS_EQUAL,
    ">=": TokenKind.GREATER_EQUAL,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "<": TokenKind.LESS,
    ">": TokenKind.GREATER,
    "|": TokenKind.PIPE,
    "&": TokenKind.AMPERSAND,
    "^": TokenKind.CARET,
    "!": TokenKind.BANG,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}
