"""Tests for AST node validation and rendering."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from calculator.nodes import (
    BaseNode,
    ExpressionNode,
    ExpressionTail,
    FactorNode,
    NumericResult,
    NumericType,
    TermNode,
    TermTail,
)
from calculator.parser import parse_expr
from calculator.tokens import ADD, MULTIPLY, Token


def term_of(value: int) -> TermNode:
    factor = FactorNode(base=BaseNode.literal(Token.integer(value)), exponent=None)
    return TermNode(factor=factor, tail=TermTail.empty())


class TestBaseNode:
    def test_needs_exactly_one_variant(self) -> None:
        with pytest.raises(ValidationError, match="exactly one"):
            BaseNode()
        with pytest.raises(ValidationError, match="exactly one"):
            BaseNode(number=Token.integer(1), expression=parse_expr("2"))

    def test_literal_must_be_numeric(self) -> None:
        with pytest.raises(ValidationError, match="must be numeric"):
            BaseNode.literal(ADD)

    def test_parenthesized(self) -> None:
        node = BaseNode.parenthesized(parse_expr("1 + 1"))
        assert node.is_parenthesized
        assert str(node) == "(1 + 1)"


class TestTailNodes:
    def test_partial_tail_rejected(self) -> None:
        with pytest.raises(ValidationError, match="or none of them"):
            ExpressionTail(operator=ADD, term=term_of(1), tail=None)

    def test_wrong_operator_rejected(self) -> None:
        with pytest.raises(ValidationError, match="tail operator must be one of"):
            ExpressionTail(operator=MULTIPLY, term=term_of(1), tail=ExpressionTail.empty())

    def test_hand_built_tree(self) -> None:
        tail = ExpressionTail(operator=ADD, term=term_of(2), tail=ExpressionTail.empty())
        tree = ExpressionNode(term=term_of(1), tail=tail)
        assert tree == parse_expr("1 + 2")
        assert tree.result == NumericResult(NumericType.INTEGER, 3)

    def test_default_tails_are_empty(self) -> None:
        factor = FactorNode(base=BaseNode.literal(Token.decimal(1.5)))
        tree = ExpressionNode(term=TermNode(factor=factor))
        assert tree.tail.is_empty
        assert tree.term.tail.is_empty
        assert tree.value == 1.5


class TestNodeImmutability:
    def test_frozen(self) -> None:
        tree = parse_expr("1 + 2")
        with pytest.raises(ValidationError):
            tree.term = term_of(5)  # type: ignore[misc]

    def test_str_is_canonical(self) -> None:
        assert str(parse_expr("  2*( 3 -  -1 )^2 ")) == "2 * (3 - -1) ^ 2"
