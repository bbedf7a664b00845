"""
Error types for calculator tokenizing, parsing, and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calculator.tokens import Token


class CalculatorError(Exception):
    """Base exception for all calculator errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class LexicalError(CalculatorError):
    """
    Raised when the source text cannot be tokenized.

    Examples:
    - A character outside the recognised alphabet (``1 @ 2``)
    - A recognised character that is illegal where it appears (``1..2``)
    - End of input reached in a non-accepting lexer state
    """

    def __init__(
        self,
        message: str,
        offset: int,
        char: str | None = None,
        context: ErrorContext | None = None,
    ):
        self.offset = offset
        self.char = char
        super().__init__(message, context)


class ExpressionSyntaxError(CalculatorError):
    """
    Raised when a token sequence does not match the expression grammar.

    ``token`` is the token that was found (``None`` at end of input) and
    ``expected`` lists the acceptable alternatives.
    """

    def __init__(self, message: str, token: Token | None, expected: tuple[str, ...]):
        self.token = token
        self.expected = expected
        super().__init__(message)


class EvaluationError(CalculatorError):
    """
    Raised when a well-formed tree has no numeric value.

    Examples:
    - Division by zero
    - Negative decimal base with a fractional exponent
    - Results too large to represent
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        source: The full expression text
        offset: 0-based index of the offending character
    """

    source: str
    offset: int

    def format(self) -> str:
        """
        Format the source with a marker under the offending column.

        Returns:
            Two lines: the source and a ``^`` under ``offset``.
        """
        line = self.source.replace("\n", " ").replace("\t", " ")
        return f"{line}\n{' ' * self.offset}^"


def describe_token(token: Token | None) -> str:
    """Human-readable name of a token for error messages."""
    if token is None:
        return "end of input"
    return repr(token.lexeme)
