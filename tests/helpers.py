"""Shared test helpers for the exprcalc test suite."""

from __future__ import annotations

from exprcalc.errors import LexError
from exprcalc.lexer import Lexer
from exprcalc.parser import Parser
from exprcalc.source import Span
from exprcalc.tokens import Token, TokenKind
from exprcalc.tree import Expr, evaluate


def parse(source: str, **kwargs) -> Expr:
    """Lex and parse source, return the tree."""
    return Parser(Lexer(source, "<test>"), **kwargs).parse()


def calc(source: str) -> float:
    """Lex, parse and evaluate source."""
    return evaluate(parse(source))


def sexpr(source: str) -> str:
    """Parse source and return its fully parenthesized form."""
    return str(parse(source))


class ScriptedSource:
    """Token source replaying a fixed token list, failing where told to.

    A ``None`` entry in ``kinds`` stands for a lexical error at that point.
    """

    def __init__(self, kinds: list[TokenKind | None]) -> None:
        self.items: list[Token | None] = []
        for col, kind in enumerate(kinds, start=1):
            if kind is None:
                self.items.append(None)
                continue
            value = "1" if kind == TokenKind.INTEGER_LIT else kind.name
            self.items.append(Token(kind, value, Span("<scripted>", 1, col, 1, col)))
        self.pos = 0
        self.peeks = 0
        self.consumed: list[Token] = []

    def peek(self) -> Token:
        self.peeks += 1
        if self.pos >= len(self.items):
            return Token(TokenKind.EOF, "", Span("<scripted>", 1, self.pos + 1, 1, self.pos + 1))
        item = self.items[self.pos]
        if item is None:
            raise LexError("scripted failure", Span("<scripted>", 1, self.pos + 1, 1, self.pos + 1))
        return item

    def consume(self) -> Token:
        tok = self.peek()
        if tok.kind != TokenKind.EOF:
            self.pos += 1
            self.consumed.append(tok)
        return tok
