"""Tests for expression trees and the evaluator."""

from __future__ import annotations

import math

import pytest

from exprcalc.source import Span
from exprcalc.tokens import Token, TokenKind
from exprcalc.tree import Expr, evaluate
from tests.helpers import calc, parse

_SPAN = Span("<test>", 1, 1, 1, 1)


def tok(kind: TokenKind, value: str = "") -> Token:
    return Token(kind, value or kind.name, _SPAN)


def num(n: int) -> Expr:
    return Expr(tok(TokenKind.INTEGER_LIT, str(n)))


class TestEvaluate:
    @pytest.mark.parametrize("source,expected", [
        ("1 * 2 + 3", 5.0),
        ("1 + 2 * 3", 7.0),
        ("3 * (4 + 5)", 27.0),
        ("2 ** 2 ** 2 ", 16.0),
        ("2 ** 2 ** 2 ** 2", 65536.0),
        ("3 / (4 + 6)", 0.3),
        ("-(2)", -2.0),
        ("--(2)", 2.0),
        ("3 * +5", 15.0),
        ("3 / -(4 + 6)", -0.3),
        ("(3 * 1 / 10 + 12) % 30", 12.3),
        ("20 % 5", 0.0),
        ("20 % 3", 2.0),
    ])
    def test_arithmetic(self, source, expected):
        assert calc(source) == pytest.approx(expected, abs=1e-9)

    @pytest.mark.parametrize("source,expected", [
        ("1 > -5", 1.0),
        ("-5 > 1", 0.0),
        ("1 >= -5", 1.0),
        ("-5 >= 1", 0.0),
        ("1 < -5", 0.0),
        ("-5 < 1", 1.0),
        ("1 <= -5", 0.0),
        ("-5 <= 1", 1.0),
        ("3 >= 3", 1.0),
        ("3 <= 3", 1.0),
    ])
    def test_comparisons(self, source, expected):
        assert calc(source) == expected

    @pytest.mark.parametrize("source,expected", [
        ("True | (4 >= 5)", 1.0),
        ("False | (4 >= 5)", 0.0),
        ("False & (4 >= 5)", 0.0),
        ("True & (4 < 5)", 1.0),
        ("!(4 >= 5)", 1.0),
        ("!(4 < 5)", 0.0),
        ("True ^ (4 >= 5)", 1.0),
        ("False ^ (4 >= 5)", 0.0),
        ("True ^ True", 0.0),
        ("7 & 3", 1.0),
    ])
    def test_logical(self, source, expected):
        assert calc(source) == expected

    def test_booleans_are_numbers(self):
        assert calc("True + True") == 2.0
        assert calc("False * 5") == 0.0

    def test_unary_caret_is_truthiness(self):
        assert calc("^5") == 1.0
        assert calc("^0") == 0.0

    def test_modulo_keeps_dividend_sign(self):
        assert calc("-7 % 3") == -1.0

    def test_negative_power(self):
        assert calc("2 ** -1") == 0.5

    def test_literal_too_large_for_double_is_inf(self):
        assert calc("1" + "0" * 400) == math.inf
        assert calc("0 - " + "9" * 400) == -math.inf

    def test_literal_past_int_digit_limit(self):
        assert calc("1" * 5000) == math.inf
        assert calc("1" * 5000 + " > 1") == 1.0


class TestFloatingPointEdges:
    def test_divide_by_zero(self):
        assert calc("1 / 0") == math.inf
        assert calc("-1 / 0") == -math.inf

    def test_zero_over_zero(self):
        assert math.isnan(calc("0 / 0"))

    def test_modulo_by_zero(self):
        assert math.isnan(calc("5 % 0"))

    def test_power_overflow(self):
        assert calc("10 ** 400") == math.inf
        assert calc("-10 ** 401") == -math.inf
        assert calc("(0 - 10) ** 401") == -math.inf
        assert calc("(0 - 10) ** 400") == math.inf

    def test_zero_to_negative_power(self):
        assert calc("0 ** -1") == math.inf

    def test_fractional_power_of_negative(self):
        assert math.isnan(calc("(0 - 8) ** (1 / 3)"))


class TestEvaluateProperties:
    def test_deterministic(self):
        tree = parse("(3 * 1 / 10 + 12) % 30 - 2 ** 0 / 7")
        first = evaluate(tree)
        for _ in range(10):
            assert evaluate(tree).hex() == first.hex()

    def test_right_child_evaluated_before_left(self):
        order = []

        class Spy(Expr):
            @property
            def kind(self):
                order.append(self.token.value)
                return super().kind

        tree = Expr(
            tok(TokenKind.MINUS, "-"),
            left=Spy(tok(TokenKind.INTEGER_LIT, "1")),
            right=Spy(tok(TokenKind.INTEGER_LIT, "2")),
        )
        assert evaluate(tree) == -1.0
        assert order == ["2", "1"]

    def test_missing_children_default_to_zero(self):
        assert evaluate(Expr(tok(TokenKind.MINUS, "-"), right=num(4))) == -4.0
        assert evaluate(Expr(tok(TokenKind.PLUS, "+"), left=num(4))) == 4.0

    def test_long_left_chain(self):
        source = " + ".join(["1"] * 5000)
        assert calc(source) == 5000.0

    def test_bad_subtree_is_fatal(self):
        with pytest.raises(AssertionError, match="bad subtree: LPAREN"):
            evaluate(Expr(tok(TokenKind.LPAREN, "(")))


class TestExprNode:
    def test_str_leaf(self):
        assert str(num(3)) == "3"

    def test_str_nested(self):
        tree = Expr(
            tok(TokenKind.PLUS, "+"),
            left=Expr(tok(TokenKind.STAR, "*"), left=num(1), right=num(2)),
            right=num(3),
        )
        assert str(tree) == "(+ (* 1 2) 3)"

    def test_str_unary(self):
        assert str(parse("-(1 + 2)")) == "(- (+ 1 2))"

    def test_str_long_left_chain(self):
        text = str(parse(" + ".join(["1"] * 5000)))
        assert text.startswith("(+ (+ (+ ")
        assert text.endswith(" 1) 1) 1)")
        assert text.count("(") == 4999

    def test_frozen(self):
        node = num(1)
        with pytest.raises(AttributeError):
            node.left = num(2)

    def test_shape_predicates(self):
        leaf = num(1)
        unary = Expr(tok(TokenKind.MINUS, "-"), right=leaf)
        assert leaf.is_leaf and not leaf.is_unary
        assert unary.is_unary and not unary.is_leaf
