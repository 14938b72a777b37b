"""Parser for calculator expressions.

Top-down operator precedence (Pratt) parsing: every token kind carries a
binding power, a prefix handler (nud) builds literals, unary operators and
parenthesized groups, and an infix handler (led) extends an already parsed
left operand. The driver loop compares binding powers to decide whether
the next operator continues the current sub-expression or ends it.
"""

from __future__ import annotations

import logging

from exprcalc.errors import (
    EmptyExpressionError,
    MissingOperandError,
    NestingTooDeepError,
    NotBinaryError,
    NotUnaryError,
    TrailingInputError,
    UnmatchedParenError,
)
from exprcalc.lexer import Lexer
from exprcalc.tokens import Token, TokenKind, TokenSource
from exprcalc.tree import Expr

_logger = logging.getLogger(__name__)

# ── Binding powers ───────────────────────────────────────────────

DEFAULT_BP = 0

BINDING_POWER: dict[TokenKind, int] = {
    TokenKind.RPAREN: 1,
    TokenKind.PIPE: 10,
    TokenKind.AMPERSAND: 10,
    TokenKind.BANG: 10,
    TokenKind.CARET: 10,
    TokenKind.LESS: 10,
    TokenKind.GREATER: 10,
    TokenKind.GREATER_EQUAL: 10,
    TokenKind.LESS_EQUAL: 10,
    TokenKind.PLUS: 20,
    TokenKind.MINUS: 20,
    TokenKind.STAR: 30,
    TokenKind.SLASH: 30,
    TokenKind.PERCENT: 30,
    TokenKind.STAR_STAR: 40,
}

RIGHT_ASSOC: frozenset[TokenKind] = frozenset({TokenKind.STAR_STAR})

PREFIX_OPS: frozenset[TokenKind] = frozenset({
    TokenKind.PLUS,
    TokenKind.MINUS,
    TokenKind.BANG,
    TokenKind.CARET,
})

# Has a binding power for its operand but no binary meaning.
PREFIX_ONLY: frozenset[TokenKind] = frozenset({TokenKind.BANG})

# One below the weakest listed operator, so any of them may extend a
# top-level or parenthesized expression while unlisted tokens end it.
PROGRAM_BP = min(BINDING_POWER.values()) - 1

DEFAULT_MAX_DEPTH = 256

# Each nesting level costs two interpreter frames (_expr plus _nud or
# _led); stay well under the default recursion limit of 1000.
MAX_DEPTH_LIMIT = 400


def binding_power(kind: TokenKind) -> int:
    return BINDING_POWER.get(kind, DEFAULT_BP)


class Parser:
    """Parses one expression from a token source into an ``Expr`` tree."""

    def __init__(
        self,
        source: TokenSource,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.max_depth = max_depth
        self.log = logger or _logger
        self.depth = 0

    # ── Tracing ──────────────────────────────────────────────────

    def _trace(self, msg: str, *args: object) -> None:
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug("%s" + msg, "  " * self.depth, *args)

    # ── Entry point ──────────────────────────────────────────────

    def parse(self) -> Expr:
        """PROG := EXPR EOF"""
        self._trace("parse")
        expr = self._expr(PROGRAM_BP)
        if expr is None:
            tok = self.source.peek()
            raise EmptyExpressionError("empty expression", tok.span, tok.kind)
        tok = self.source.peek()
        if tok.kind != TokenKind.EOF:
            raise TrailingInputError(
                f"expected end of input, found {_describe(tok)}",
                tok.span, tok.kind,
            )
        self.source.consume()
        return expr

    # ── Driver ───────────────────────────────────────────────────

    def _expr(self, min_bp: int) -> Expr | None:
        if self.depth >= self.max_depth:
            tok = self.source.peek()
            raise NestingTooDeepError(
                f"expression nested deeper than {self.max_depth} levels",
                tok.span, tok.kind,
            )
        self.depth += 1
        try:
            self._trace("expr min_bp=%d", min_bp)
            tok = self.source.peek()
            if tok.kind == TokenKind.EOF:
                return None
            self.source.consume()
            left = self._nud(tok)

            while True:
                tok = self.source.peek()
                if tok.kind in (TokenKind.EOF, TokenKind.RPAREN):
                    return left
                bp = binding_power(tok.kind)
                if bp <= min_bp:
                    self._trace(
                        "not enough binding: %d <= %d, %s", bp, min_bp, tok.kind.name,
                    )
                    return left
                self.source.consume()
                left = self._led(left, tok)
        finally:
            self.depth -= 1

    # ── Handlers ─────────────────────────────────────────────────

    def _nud(self, tok: Token) -> Expr:
        """Null denotation: ``tok`` has no left operand."""
        self._trace("nud %s %r", tok.kind.name, tok.value)

        if tok.kind == TokenKind.LPAREN:
            expr = self._expr(PROGRAM_BP)
            close = self.source.peek()
            if expr is None or close.kind != TokenKind.RPAREN:
                raise UnmatchedParenError(
                    f"unmatched parenthesis: expected ')', found {_describe(close)}",
                    tok.span, tok.kind,
                )
            self.source.consume()
            return expr

        bp = binding_power(tok.kind)
        if bp == DEFAULT_BP:
            return Expr(tok)

        if tok.kind not in PREFIX_OPS:
            raise NotUnaryError(f"{_describe(tok)} is not unary", tok.span, tok.kind)
        operand = self._expr(bp)
        if operand is None:
            raise MissingOperandError(
                f"unary operator {tok.value!r} without operand", tok.span, tok.kind,
            )
        return Expr(tok, right=operand)

    def _led(self, left: Expr, tok: Token) -> Expr:
        """Left denotation: ``tok`` follows the parsed operand ``left``."""
        if tok.kind in PREFIX_ONLY:
            raise NotBinaryError(f"{_describe(tok)} is not binary", tok.span, tok.kind)

        rbp = binding_power(tok.kind)
        if tok.kind in RIGHT_ASSOC:
            rbp -= 1
        self._trace("led %s rbp=%d", tok.kind.name, rbp)

        right = self._expr(rbp)
        if right is None:
            raise MissingOperandError(
                f"missing operand for {tok.value!r}", tok.span, tok.kind,
            )
        return Expr(tok, left=left, right=right)


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"{tok.kind.name} ({tok.value!r})"


def parse(
    text: str,
    filename: str = "<expr>",
    *,
    first_line: int = 1,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: logging.Logger | None = None,
) -> Expr:
    """Lex and parse ``text`` in one call."""
    source = Lexer(text, filename, first_line)
    return Parser(source, max_depth=max_depth, logger=logger).parse()
