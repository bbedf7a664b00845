"""
Token model for the calculator expression language.

Tokens are immutable values. Operator and punctuation tokens carry no
payload, so any two tokens of the same operator kind compare equal; numeric
tokens carry the parsed literal.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    INTEGER = auto()
    DECIMAL = auto()

    # Operators
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    EXPONENT = auto()

    # Punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()


NUMERIC_KINDS = frozenset({TokenKind.INTEGER, TokenKind.DECIMAL})

# Canonical source text of every payload-free kind
_LEXEMES: dict[TokenKind, str] = {
    TokenKind.ADD: "+",
    TokenKind.SUBTRACT: "-",
    TokenKind.MULTIPLY: "*",
    TokenKind.DIVIDE: "/",
    TokenKind.EXPONENT: "^",
    TokenKind.LEFT_PAREN: "(",
    TokenKind.RIGHT_PAREN: ")",
}

_KINDS_BY_LEXEME: dict[str, TokenKind] = {text: kind for kind, text in _LEXEMES.items()}


class Token(BaseModel):
    """A single lexical unit: a kind plus, for numeric kinds, its value."""

    kind: TokenKind
    value: int | float | None = Field(default=None, description="Literal value (numbers only)")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_payload(self) -> Token:
        if self.kind == TokenKind.INTEGER:
            if not isinstance(self.value, int) or isinstance(self.value, bool):
                raise ValueError(f"integer token requires an int value, got {self.value!r}")
        elif self.kind == TokenKind.DECIMAL:
            if not isinstance(self.value, float):
                raise ValueError(f"decimal token requires a float value, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"{self.kind} token carries no value, got {self.value!r}")
        return self

    @classmethod
    def integer(cls, value: int) -> Token:
        return cls(kind=TokenKind.INTEGER, value=value)

    @classmethod
    def decimal(cls, value: float) -> Token:
        return cls(kind=TokenKind.DECIMAL, value=float(value))

    @classmethod
    def operator(cls, kind: TokenKind) -> Token:
        """Payload-free token of the given operator or punctuation kind."""
        if kind in NUMERIC_KINDS:
            raise ValueError(f"{kind} is not an operator kind")
        return cls(kind=kind, value=None)

    @classmethod
    def from_lexeme(cls, text: str) -> Token:
        """Resolve a single operator/punctuation character to its token."""
        try:
            return cls.operator(_KINDS_BY_LEXEME[text])
        except KeyError:
            raise ValueError(f"not an operator or punctuation lexeme: {text!r}") from None

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @property
    def lexeme(self) -> str:
        """Canonical source text for this token."""
        if self.kind == TokenKind.DECIMAL:
            return _decimal_lexeme(float(self.value))  # type: ignore[arg-type]
        if self.is_numeric:
            return str(self.value)
        return _LEXEMES[self.kind]

    def __str__(self) -> str:
        return self.lexeme

    def __repr__(self) -> str:
        if self.is_numeric:
            return f"Token({self.kind}, {self.value!r})"
        return f"Token({self.kind})"


def _decimal_lexeme(value: float) -> str:
    """Positional text for a decimal literal (no exponent), always with a point."""
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def is_operator_lexeme(char: str) -> bool:
    """True for ``+ - * / ^ ( )``."""
    return char in _KINDS_BY_LEXEME


ADD = Token.operator(TokenKind.ADD)
SUBTRACT = Token.operator(TokenKind.SUBTRACT)
MULTIPLY = Token.operator(TokenKind.MULTIPLY)
DIVIDE = Token.operator(TokenKind.DIVIDE)
EXPONENT = Token.operator(TokenKind.EXPONENT)
LEFT_PAREN = Token.operator(TokenKind.LEFT_PAREN)
RIGHT_PAREN = Token.operator(TokenKind.RIGHT_PAREN)
