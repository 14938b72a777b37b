"""Lexer for calculator expressions.

Scans lazily: a token is produced only when the parser peeks past the
previous one, so a lexical error surfaces at the exact point the parser
reaches it.
"""

from __future__ import annotations

from exprcalc.errors import LexError
from exprcalc.source import Span
from exprcalc.tokens import KEYWORDS, OPERATORS, Token, TokenKind

_WHITESPACE = frozenset(" \t\r\n")
_DIGITS = frozenset("0123456789")


class Lexer:
    """Tokenizes an expression. Implements the ``TokenSource`` protocol."""

    def __init__(self, source: str, filename: str = "<expr>", first_line: int = 1) -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = first_line
        self.col = 1
        self._lookahead: Token | None = None

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._scan()
        return self._lookahead

    def consume(self) -> Token:
        """Return the next token and advance past it."""
        tok = self.peek()
        if tok.kind != TokenKind.EOF:
            self._lookahead = None
        return tok

    def lex(self) -> list[Token]:
        """Tokenize the remaining source and return the token list, EOF last."""
        tokens = [self.consume()]
        while tokens[-1].kind != TokenKind.EOF:
            tokens.append(self.consume())
        return tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek_char(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _make(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        return Token(kind, value, span)

    def _error(self, message: str, line: int, col: int, end_col: int | None = None) -> LexError:
        span = Span(self.filename, line, col, line, end_col or col)
        return LexError(message, span)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in _WHITESPACE:
            self._advance()

    # ── Scanning ─────────────────────────────────────────────────

    def _scan(self) -> Token:
        self._skip_whitespace()
        if self.pos >= len(self.source):
            return self._make(TokenKind.EOF, "", self.line, self.col)
        ch = self.source[self.pos]
        if ch in _DIGITS:
            return self._lex_number()
        if ch.isalpha() or ch == '_':
            return self._lex_word()
        return self._lex_operator()

    def _lex_number(self) -> Token:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
            text.append(self._advance())
        return self._make(TokenKind.INTEGER_LIT, ''.join(text), start_line, start_col)

    def _lex_word(self) -> Token:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and (
                self.source[self.pos].isalnum() or self.source[self.pos] == '_'):
            text.append(self._advance())
        word = ''.join(text)
        if word in KEYWORDS:
            return self._make(KEYWORDS[word], word, start_line, start_col)
        raise self._error(
            f"unknown name {word!r}: only True and False are allowed",
            start_line, start_col, self.col - 1,
        )

    def _lex_operator(self) -> Token:
        start_line = self.line
        start_col = self.col

        two = self._peek_char() + self._peek_char(1)
        if two in OPERATORS:
            self._advance()
            self._advance()
            return self._make(OPERATORS[two], two, start_line, start_col)

        ch = self._advance()
        if ch in OPERATORS:
            return self._make(OPERATORS[ch], ch, start_line, start_col)
        raise self._error(f"unexpected character: {ch!r}", start_line, start_col)
