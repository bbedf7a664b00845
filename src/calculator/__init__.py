"""
Calculator expression engine.

Tokenizer, LL(1) parser, and typed evaluator for arithmetic expressions
over integers and decimals with ``+ - * / ^`` and parentheses.

Usage:
    from calculator import calculate, parse_expr

    tree = parse_expr("2 + 3 * 4")
    tree.type, tree.value
    # (NumericType.INTEGER, 14)

    calculate("1 / 2.0")
    # NumericResult(type=NumericType.DECIMAL, value=0.5)
"""

from __future__ import annotations

from calculator._version import get_version
from calculator.errors import (
    CalculatorError,
    EvaluationError,
    ExpressionSyntaxError,
    LexicalError,
)
from calculator.evaluator import calculate, evaluate
from calculator.lexer import tokenize
from calculator.nodes import ExpressionNode, NumericResult, NumericType
from calculator.parser import parse, parse_expr
from calculator.tokens import Token, TokenKind
from calculator.type_checker import infer_type

__version__ = get_version()

__all__ = [
    "__version__",
    "CalculatorError",
    "EvaluationError",
    "ExpressionNode",
    "ExpressionSyntaxError",
    "LexicalError",
    "NumericResult",
    "NumericType",
    "Token",
    "TokenKind",
    "calculate",
    "evaluate",
    "infer_type",
    "parse",
    "parse_expr",
    "tokenize",
]
