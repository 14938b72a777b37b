"""Expression tree nodes and the numeric evaluator."""

from __future__ import annotations

import math
from dataclasses import dataclass

from exprcalc.tokens import Token, TokenKind


@dataclass(frozen=True)
class Expr:
    """One operator application or literal.

    A leaf has no children, a unary node only ``right``, a binary node both.
    """

    token: Token
    left: Expr | None = None
    right: Expr | None = None

    @property
    def kind(self) -> TokenKind:
        return self.token.kind

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def is_unary(self) -> bool:
        return self.left is None and self.right is not None

    def __str__(self) -> str:
        """Fully parenthesized prefix form, e.g. ``(+ (* 1 2) 3)``."""
        parts: list[str] = []
        stack: list[Expr | str] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            elif item.is_leaf:
                parts.append(item.token.value)
            else:
                stack.append(")")
                for child in (item.right, item.left):
                    if child is not None:
                        stack.append(child)
                        stack.append(" ")
                parts.append(f"({item.token.value}")
        return "".join(parts)


# ── Evaluation ───────────────────────────────────────────────────


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _modulo(left: float, right: float) -> float:
    try:
        return math.fmod(left, right)
    except ValueError:
        # fmod(x, 0) and fmod(inf, y)
        return math.nan


def _power(left: float, right: float) -> float:
    odd_exponent = right.is_integer() and right % 2 == 1
    try:
        return math.pow(left, right)
    except OverflowError:
        return -math.inf if left < 0 and odd_exponent else math.inf
    except ValueError:
        if left == 0:
            # zero to a negative power
            return math.copysign(math.inf, left) if odd_exponent else math.inf
        return math.nan


def _truth(value: float) -> bool:
    return value != 0


def _apply(node: Expr, left: float, right: float) -> float:
    match node.kind:
        case TokenKind.INTEGER_LIT | TokenKind.BOOLEAN_LIT:
            return node.token.number
        case TokenKind.MINUS:
            return left - right
        case TokenKind.PLUS:
            return left + right
        case TokenKind.STAR:
            return left * right
        case TokenKind.SLASH:
            return _divide(left, right)
        case TokenKind.PERCENT:
            return _modulo(left, right)
        case TokenKind.STAR_STAR:
            return _power(left, right)
        case TokenKind.GREATER:
            return 1.0 if left > right else 0.0
        case TokenKind.LESS:
            return 1.0 if left < right else 0.0
        case TokenKind.GREATER_EQUAL:
            return 1.0 if left >= right else 0.0
        case TokenKind.LESS_EQUAL:
            return 1.0 if left <= right else 0.0
        case TokenKind.PIPE:
            return 1.0 if _truth(left) or _truth(right) else 0.0
        case TokenKind.AMPERSAND:
            return 1.0 if _truth(left) and _truth(right) else 0.0
        case TokenKind.CARET:
            return 1.0 if _truth(left) != _truth(right) else 0.0
        case TokenKind.BANG:
            return 0.0 if _truth(right) else 1.0
        case _:
            raise AssertionError(f"bad subtree: {node.kind.name} node cannot be evaluated")


def evaluate(expr: Expr) -> float:
    """Evaluate a parsed expression tree to a float.

    Children are visited right first, then left; a missing child counts as
    0.0. The walk uses an explicit stack, so long left-associative chains
    are not limited by the interpreter's recursion depth.
    """
    values: list[float] = []
    stack: list[tuple[Expr, bool]] = [(expr, False)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            stack.append((node, True))
            # Pushed last, popped first: the right subtree is evaluated first.
            if node.left is not None:
                stack.append((node.left, False))
            if node.right is not None:
                stack.append((node.right, False))
            continue
        left = values.pop() if node.left is not None else 0.0
        right = values.pop() if node.right is not None else 0.0
        values.append(_apply(node, left, right))
    return values.pop()
