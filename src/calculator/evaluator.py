"""
Expression evaluator for the calculator.

Walks a parse tree bottom-up and computes a typed NumericResult. Pure
evaluation: no I/O, no side effects, nothing stored on the tree, so the same
tree can be evaluated any number of times, from any thread.

Type promotion: if either operand of an operator is DECIMAL, both are
widened to float and the result is DECIMAL; otherwise the result is INTEGER
and division truncates toward zero.
"""

from __future__ import annotations

import logging
import math

from calculator.environment import get_settings
from calculator.errors import EvaluationError
from calculator.nodes import (
    BaseNode,
    ExpressionNode,
    FactorNode,
    NumericResult,
    NumericType,
    TailNode,
    TermNode,
    ValuedNode,
)
from calculator.parser import parse_expr
from calculator.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


def evaluate(node: ValuedNode) -> NumericResult:
    """Evaluate a parse tree (or any valued subtree).

    Args:
        node: A Base, Factor, Term or Expression node.

    Returns:
        The node's type and value.

    Raises:
        EvaluationError: On division by zero or a result with no real value.
    """
    result = _interpret(node)
    logger.debug("Evaluated %s to %s", node, result)
    return result


def calculate(source: str) -> NumericResult:
    """Tokenize, parse and evaluate an expression string.

    Example:
        >>> calculate("2 ^ 3 ^ 2")
        NumericResult(type=<NumericType.INTEGER: 'integer'>, value=512)
    """
    return evaluate(parse_expr(source))


def apply_tail(tail: TailNode, lhs: NumericResult) -> NumericResult:
    """Thread ``lhs`` through a tail chain, left to right.

    ``1 - 2 - 3`` parses as Term(1) followed by the tail ``- 2 - 3``; folding
    from the left gives ``(1 - 2) - 3``.
    """
    result = lhs
    for operator, operand in tail.segments():
        result = _binary(operator.kind, result, _interpret(operand))
    return result


def _interpret(node: ValuedNode) -> NumericResult:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(node, ExpressionNode):
        return apply_tail(node.tail, _interpret(node.term))

    if isinstance(node, TermNode):
        return apply_tail(node.tail, _interpret(node.factor))

    if isinstance(node, FactorNode):
        return _interpret_factor(node)

    if isinstance(node, BaseNode):
        return _interpret_base(node)

    raise EvaluationError(f"Unknown node type: {type(node).__name__}")


def _interpret_base(node: BaseNode) -> NumericResult:
    # Parentheses are transparent
    if node.expression is not None:
        return _interpret(node.expression)

    token = node.number
    assert token is not None and token.value is not None
    if token.kind == TokenKind.DECIMAL:
        return NumericResult(NumericType.DECIMAL, token.value)
    return NumericResult(NumericType.INTEGER, token.value)


def _interpret_factor(node: FactorNode) -> NumericResult:
    base = _interpret(node.base)
    if node.exponent is None:
        return base
    # a ^ b ^ c == a ^ (b ^ c)
    return _power(base, _interpret(node.exponent))


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _binary(kind: TokenKind, left: NumericResult, right: NumericResult) -> NumericResult:
    """Apply + - * / with type promotion."""
    if kind == TokenKind.DIVIDE and right.value == 0:
        raise EvaluationError("Division by zero")

    if NumericType.DECIMAL in (left.type, right.type):
        lhs, rhs = _widen(left), _widen(right)
        if kind == TokenKind.ADD:
            value = lhs + rhs
        elif kind == TokenKind.SUBTRACT:
            value = lhs - rhs
        elif kind == TokenKind.MULTIPLY:
            value = lhs * rhs
        elif kind == TokenKind.DIVIDE:
            value = lhs / rhs
        else:
            raise EvaluationError(f"Unknown binary operator: {kind}")
        value = _finite(value, f"{lhs} {Token.operator(kind)} {rhs}")
        return NumericResult(NumericType.DECIMAL, value)
    else:
        a, b = int(left.value), int(right.value)
        if kind == TokenKind.ADD:
            return NumericResult(NumericType.INTEGER, a + b)
        if kind == TokenKind.SUBTRACT:
            return NumericResult(NumericType.INTEGER, a - b)
        if kind == TokenKind.MULTIPLY:
            return NumericResult(NumericType.INTEGER, a * b)
        if kind == TokenKind.DIVIDE:
            return NumericResult(NumericType.INTEGER, _truncating_divide(a, b))

    raise EvaluationError(f"Unknown binary operator: {kind}")


def _power(base: NumericResult, exponent: NumericResult) -> NumericResult:
    if NumericType.DECIMAL in (base.type, exponent.type):
        return NumericResult(NumericType.DECIMAL, _decimal_power(_widen(base), _widen(exponent)))
    return NumericResult(NumericType.INTEGER, _integer_power(int(base.value), int(exponent.value)))


def _integer_power(base: int, exponent: int) -> int:
    if exponent < 0:
        # Stays an integer: 1 / base**n truncated toward zero
        if base == 0:
            raise EvaluationError("Division by zero: 0 raised to a negative power")
        if abs(base) == 1:
            return base if exponent % 2 else 1
        return 0

    if abs(base) > 1:
        limit = get_settings().max_integer_bits
        # Bit length of base**exponent is floor(exponent * log2|base|) + 1, and at
        # least exponent + 1, which also keeps huge exponents out of float math
        if exponent >= limit or math.floor(exponent * math.log2(abs(base))) + 1 > limit:
            raise EvaluationError(
                f"Result of {_brief(base)} ^ {_brief(exponent)} "
                f"exceeds the {limit}-bit integer limit"
            )
    return int(base**exponent)


def _decimal_power(base: float, exponent: float) -> float:
    try:
        value = base**exponent
    except ZeroDivisionError as e:
        raise EvaluationError("Division by zero: 0.0 raised to a negative power") from e
    except OverflowError as e:
        raise EvaluationError(f"Result of {base} ^ {exponent} is too large") from e

    # A negative base with a fractional exponent yields a complex number
    if isinstance(value, complex):
        raise EvaluationError(f"{base} ^ {exponent} has no real value")
    return _finite(value, f"{base} ^ {exponent}")


def _finite(value: float, description: str) -> float:
    # float + - * / overflow to inf instead of raising
    if not math.isfinite(value):
        raise EvaluationError(f"Result of {description} is not a finite number")
    return value


def _brief(n: int) -> str:
    # str() refuses ints past the interpreter's digit limit
    if n.bit_length() <= 64:
        return str(n)
    return f"<{n.bit_length()}-bit integer>"


def _truncating_divide(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero (``-7 / 2 == -3``)."""
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        return -quotient
    return quotient


def _widen(operand: NumericResult) -> float:
    try:
        return float(operand.value)
    except OverflowError as e:
        raise EvaluationError(
            f"Integer {_brief(int(operand.value))} is too large to convert to decimal"
        ) from e
