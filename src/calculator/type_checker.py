"""
Type inference for calculator parse trees.

Infers the NumericType a tree will evaluate to without doing any
arithmetic, so it never raises for division by zero or overflow.
"""

from __future__ import annotations

from calculator.nodes import (
    BaseNode,
    ExpressionNode,
    FactorNode,
    NumericType,
    TailNode,
    TermNode,
    ValuedNode,
)
from calculator.tokens import TokenKind


def infer_type(node: ValuedNode) -> NumericType:
    """Infer the result type of a tree.

    Every operator promotes to DECIMAL when either operand is DECIMAL, so the
    result is DECIMAL exactly when some literal in the tree is a decimal.

    Args:
        node: A Base, Factor, Term or Expression node.

    Returns:
        The inferred NumericType. Agrees with ``evaluate(node).type``
        whenever evaluation succeeds.
    """
    return _infer(node)


def _infer(node: ValuedNode) -> NumericType:
    """Dispatch type inference."""
    if isinstance(node, ExpressionNode):
        return _join(_infer(node.term), _infer_tail(node.tail))

    if isinstance(node, TermNode):
        return _join(_infer(node.factor), _infer_tail(node.tail))

    if isinstance(node, FactorNode):
        if node.exponent is None:
            return _infer(node.base)
        return _join(_infer(node.base), _infer(node.exponent))

    if isinstance(node, BaseNode):
        if node.expression is not None:
            return _infer(node.expression)
        assert node.number is not None
        if node.number.kind == TokenKind.DECIMAL:
            return NumericType.DECIMAL
        return NumericType.INTEGER

    raise TypeError(f"Cannot infer the type of {type(node).__name__}")


def _infer_tail(tail: TailNode) -> NumericType:
    result = NumericType.INTEGER
    for _, operand in tail.segments():
        result = _join(result, _infer(operand))
    return result


def _join(left: NumericType, right: NumericType) -> NumericType:
    if NumericType.DECIMAL in (left, right):
        return NumericType.DECIMAL
    return NumericType.INTEGER
