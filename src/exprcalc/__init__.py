"""Pratt-parsed arithmetic and boolean expression calculator."""

from exprcalc.errors import CalcError, LexError, ParseError
from exprcalc.lexer import Lexer
from exprcalc.parser import Parser, parse
from exprcalc.tree import Expr, evaluate

__version__ = "0.1.0"

__all__ = [
    "CalcError",
    "Expr",
    "LexError",
    "Lexer",
    "ParseError",
    "Parser",
    "evaluate",
    "parse",
]
