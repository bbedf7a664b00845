"""Tests for the calculator recursive descent parser."""

from __future__ import annotations

import pytest

from calculator.errors import ExpressionSyntaxError, LexicalError
from calculator.nodes import BaseNode, ExpressionNode, ExpressionTail, TermTail
from calculator.parser import parse, parse_expr
from calculator.tokens import (
    ADD,
    DIVIDE,
    EXPONENT,
    LEFT_PAREN,
    MULTIPLY,
    RIGHT_PAREN,
    SUBTRACT,
    Token,
)

# ============================================================================
# Tree shape
# ============================================================================


class TestParserShape:
    """The tree mirrors the LL(1) grammar."""

    def test_single_integer(self) -> None:
        tree = parse_expr("42")
        assert isinstance(tree, ExpressionNode)
        assert tree.tail.is_empty
        assert tree.term.tail.is_empty
        assert tree.term.factor.exponent is None
        assert tree.term.factor.base.number == Token.integer(42)

    def test_parse_accepts_token_list(self) -> None:
        tree = parse([Token.integer(1), ADD, Token.decimal(2.0)])
        assert tree.term.factor.base.number == Token.integer(1)
        assert tree.tail.operator == ADD
        assert tree.tail.term is not None
        assert tree.tail.term.factor.base.number == Token.decimal(2.0)

    def test_multiplication_binds_tighter(self) -> None:
        tree = parse_expr("2+3*4")
        # 2 is a whole term; 3*4 is the term after '+'
        assert tree.term.tail.is_empty
        assert tree.tail.operator == ADD
        term = tree.tail.term
        assert term is not None
        assert term.factor.base.number == Token.integer(3)
        assert term.tail.operator == MULTIPLY
        assert term.tail.factor is not None
        assert term.tail.factor.base.number == Token.integer(4)

    def test_tail_chain_order(self) -> None:
        tree = parse_expr("1 - 2 + 3")
        segments = list(tree.tail.segments())
        assert [op for op, _ in segments] == [SUBTRACT, ADD]
        assert [term.factor.base.number for _, term in segments] == [
            Token.integer(2),
            Token.integer(3),
        ]

    def test_term_tail_chain(self) -> None:
        tree = parse_expr("8 / 2 * 3")
        assert [op for op, _ in tree.term.tail.segments()] == [DIVIDE, MULTIPLY]

    def test_exponent_is_right_recursive(self) -> None:
        factor = parse_expr("2^3^2").term.factor
        assert factor.base.number == Token.integer(2)
        assert factor.exponent is not None
        assert factor.exponent.base.number == Token.integer(3)
        assert factor.exponent.exponent is not None
        assert factor.exponent.exponent.base.number == Token.integer(2)
        assert factor.exponent.exponent.exponent is None

    def test_parenthesized_base(self) -> None:
        base = parse_expr("(1+2)*3").term.factor.base
        assert base.is_parenthesized
        assert base.expression is not None
        assert base.expression.tail.operator == ADD

    def test_nested_parentheses(self) -> None:
        base = parse_expr("((7))").term.factor.base
        assert base.expression is not None
        inner = base.expression.term.factor.base
        assert inner.expression is not None
        assert inner.expression.term.factor.base.number == Token.integer(7)

    def test_negative_literal_after_subtract(self) -> None:
        tree = parse_expr("1 - -1")
        assert tree.tail.operator == SUBTRACT
        assert tree.tail.term is not None
        assert tree.tail.term.factor.base.number == Token.integer(-1)

    def test_round_trips_to_canonical_text(self) -> None:
        tree = parse_expr("1+2*(3-4)^2/5")
        assert str(tree) == "1 + 2 * (3 - 4) ^ 2 / 5"
        assert parse_expr(str(tree)) == tree

    @pytest.mark.parametrize(
        ("source", "text"),
        [
            ("0.00001 + 1", "0.00001 + 1"),
            ("10000000000000000.0 * 2", "10000000000000000.0 * 2"),
            ("2 ^ -0.0000001", "2 ^ -0.0000001"),
        ],
    )
    def test_small_and_large_decimals_round_trip(self, source: str, text: str) -> None:
        tree = parse_expr(source)
        assert str(tree) == text
        assert parse_expr(str(tree)) == tree

    def test_long_chain_does_not_recurse(self) -> None:
        source = "+".join(["1"] * 3000)
        tree = parse_expr(source)
        assert len(list(tree.tail.segments())) == 2999

    def test_tokens_are_not_mutated(self) -> None:
        tokens = [LEFT_PAREN, Token.integer(1), RIGHT_PAREN, EXPONENT, Token.integer(2)]
        snapshot = list(tokens)
        parse(tokens)
        assert tokens == snapshot


# ============================================================================
# Errors
# ============================================================================


class TestParserErrors:
    def test_unterminated_paren(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match=r"expected '\)'") as exc:
            parse_expr("(1+2")
        assert exc.value.token is None
        assert exc.value.expected == (")",)

    def test_wrong_token_instead_of_paren(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match=r"Unexpected token: '\('") as exc:
            parse([LEFT_PAREN, Token.integer(1), LEFT_PAREN])
        assert exc.value.token == LEFT_PAREN

    def test_operator_where_number_expected(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="expected a number or '\\('") as exc:
            parse_expr("*1")
        assert exc.value.token == MULTIPLY
        assert exc.value.expected == ("number", "(")

    def test_empty_input(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="end of input") as exc:
            parse_expr("")
        assert exc.value.token is None

    def test_dangling_operator(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="Unexpected token: end of input"):
            parse_expr("1 +")

    def test_empty_parentheses(self) -> None:
        with pytest.raises(ExpressionSyntaxError) as exc:
            parse_expr("()")
        assert exc.value.token == RIGHT_PAREN

    def test_trailing_tokens(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="after expression") as exc:
            parse_expr("1 2")
        assert exc.value.token == Token.integer(2)
        assert exc.value.expected == ("end of input",)

    def test_unbalanced_close_paren(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="after expression"):
            parse_expr("(1))")

    def test_space_separated_negative_literal_is_trailing(self) -> None:
        # "-3" right after whitespace lexes as a literal, not as subtraction
        with pytest.raises(ExpressionSyntaxError, match="after expression"):
            parse_expr("5 -3")

    def test_lexical_error_propagates(self) -> None:
        with pytest.raises(LexicalError):
            parse_expr("1 @ 2")


class TestParserDepthLimit:
    def test_within_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALCULATOR_MAX_DEPTH", "5")
        assert isinstance(parse_expr("((((1))))").term.factor.base, BaseNode)

    def test_parentheses_beyond_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALCULATOR_MAX_DEPTH", "5")
        with pytest.raises(ExpressionSyntaxError, match="nested deeper than 5"):
            parse_expr("((((((1))))))")

    def test_exponent_chain_beyond_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALCULATOR_MAX_DEPTH", "3")
        with pytest.raises(ExpressionSyntaxError, match="nested deeper"):
            parse_expr("2^2^2^2^2")

    def test_default_limit_prevents_recursion_error(self) -> None:
        with pytest.raises(ExpressionSyntaxError, match="nested deeper"):
            parse_expr("(" * 5000 + "1" + ")" * 5000)


class TestTailNodes:
    def test_empty_tails(self) -> None:
        assert TermTail.empty().is_empty
        assert ExpressionTail.empty().is_empty
        assert list(ExpressionTail.empty().segments()) == []
