"""
AST node types for the calculator.

The tree mirrors the LL(1) grammar:

    Expression      → Term ExpressionTail
    ExpressionTail  → ε | ("+" | "-") Term ExpressionTail
    Term            → Factor TermTail
    TermTail        → ε | ("*" | "/") Factor TermTail
    Factor          → Base ["^" Factor]
    Base            → number | "(" Expression ")"

Nodes are frozen. Base, Factor, Term and Expression nodes expose their
numeric ``type`` and ``value``; both are computed on access by
``calculator.evaluator`` and never cached on the node. Tail nodes have no
value of their own: ``apply(lhs)`` folds the left operand through them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from calculator.tokens import Token, TokenKind

# ---------------------------------------------------------------------------
# Numeric results
# ---------------------------------------------------------------------------


class NumericType(StrEnum):
    """Types a node can evaluate to."""

    INTEGER = "integer"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class NumericResult:
    """A typed numeric value: ``int`` for INTEGER, ``float`` for DECIMAL."""

    type: NumericType
    value: int | float

    def __str__(self) -> str:
        return f"{self.type}({self.value})"


_TERM_OPERATORS = frozenset({TokenKind.MULTIPLY, TokenKind.DIVIDE})
_EXPRESSION_OPERATORS = frozenset({TokenKind.ADD, TokenKind.SUBTRACT})


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class _ValuedNode(_Node):
    """A node that evaluates to a NumericResult on its own."""

    @property
    def result(self) -> NumericResult:
        from calculator.evaluator import evaluate

        return evaluate(self)  # type: ignore[arg-type]

    @property
    def type(self) -> NumericType:
        return self.result.type

    @property
    def value(self) -> int | float:
        return self.result.value


class BaseNode(_ValuedNode):
    """
    A numeric literal or a parenthesized expression.

    Examples:
        - BaseNode(number=Token.integer(2)) → 2
        - BaseNode(expression=...) → (1 + 2)
    """

    number: Token | None = Field(default=None, description="Numeric literal token")
    expression: ExpressionNode | None = Field(
        default=None, description="Parenthesized sub-expression"
    )

    @model_validator(mode="after")
    def _check_variant(self) -> BaseNode:
        if (self.number is None) == (self.expression is None):
            raise ValueError("base node holds exactly one of a number or an expression")
        if self.number is not None and not self.number.is_numeric:
            raise ValueError(f"base node literal must be numeric, got {self.number!r}")
        return self

    @classmethod
    def literal(cls, token: Token) -> BaseNode:
        return cls(number=token, expression=None)

    @classmethod
    def parenthesized(cls, expression: ExpressionNode) -> BaseNode:
        return cls(number=None, expression=expression)

    @property
    def is_parenthesized(self) -> bool:
        return self.expression is not None

    def __str__(self) -> str:
        if self.expression is not None:
            return f"({self.expression})"
        return str(self.number)


class FactorNode(_ValuedNode):
    """Base, optionally raised to a right-recursive Factor (``a ^ b ^ c``)."""

    base: BaseNode
    exponent: FactorNode | None = Field(default=None, description="Right operand of '^'")

    def __str__(self) -> str:
        if self.exponent is None:
            return str(self.base)
        return f"{self.base} ^ {self.exponent}"


class TermTail(_Node):
    """
    Zero or more ``("*" | "/") Factor`` continuations of a Term.

    Empty when operator, factor and tail are all None; otherwise all three
    are set.
    """

    operator: Token | None = None
    factor: FactorNode | None = None
    tail: TermTail | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> TermTail:
        _check_tail_shape(self.operator, self.factor, self.tail, _TERM_OPERATORS)
        return self

    @classmethod
    def empty(cls) -> TermTail:
        return cls(operator=None, factor=None, tail=None)

    @property
    def is_empty(self) -> bool:
        return self.operator is None

    def segments(self) -> Iterator[tuple[Token, FactorNode]]:
        """Yield ``(operator, factor)`` pairs left to right."""
        node: TermTail | None = self
        while node is not None and node.operator is not None:
            assert node.factor is not None
            yield node.operator, node.factor
            node = node.tail

    def apply(self, lhs: NumericResult) -> NumericResult:
        """Fold ``lhs`` through every segment of this tail."""
        from calculator.evaluator import apply_tail

        return apply_tail(self, lhs)

    def __str__(self) -> str:
        return "".join(f" {op} {factor}" for op, factor in self.segments())


class TermNode(_ValuedNode):
    """A Factor followed by its multiplicative tail."""

    factor: FactorNode
    tail: TermTail = Field(default_factory=TermTail.empty)

    def __str__(self) -> str:
        return f"{self.factor}{self.tail}"


class ExpressionTail(_Node):
    """
    Zero or more ``("+" | "-") Term`` continuations of an Expression.

    Empty when operator, term and tail are all None; otherwise all three
    are set.
    """

    operator: Token | None = None
    term: TermNode | None = None
    tail: ExpressionTail | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> ExpressionTail:
        _check_tail_shape(self.operator, self.term, self.tail, _EXPRESSION_OPERATORS)
        return self

    @classmethod
    def empty(cls) -> ExpressionTail:
        return cls(operator=None, term=None, tail=None)

    @property
    def is_empty(self) -> bool:
        return self.operator is None

    def segments(self) -> Iterator[tuple[Token, TermNode]]:
        """Yield ``(operator, term)`` pairs left to right."""
        node: ExpressionTail | None = self
        while node is not None and node.operator is not None:
            assert node.term is not None
            yield node.operator, node.term
            node = node.tail

    def apply(self, lhs: NumericResult) -> NumericResult:
        """Fold ``lhs`` through every segment of this tail."""
        from calculator.evaluator import apply_tail

        return apply_tail(self, lhs)

    def __str__(self) -> str:
        return "".join(f" {op} {term}" for op, term in self.segments())


class ExpressionNode(_ValuedNode):
    """A Term followed by its additive tail. Root of every parse."""

    term: TermNode
    tail: ExpressionTail = Field(default_factory=ExpressionTail.empty)

    def __str__(self) -> str:
        return f"{self.term}{self.tail}"


def _check_tail_shape(
    operator: Token | None,
    operand: _Node | None,
    tail: _Node | None,
    allowed: frozenset[TokenKind],
) -> None:
    present = [part is not None for part in (operator, operand, tail)]
    if any(present) and not all(present):
        raise ValueError("tail node needs an operator, an operand and a tail, or none of them")
    if operator is not None and operator.kind not in allowed:
        expected = ", ".join(sorted(str(kind) for kind in allowed))
        raise ValueError(f"tail operator must be one of {expected}, got {operator!r}")


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

ValuedNode = BaseNode | FactorNode | TermNode | ExpressionNode
TailNode = TermTail | ExpressionTail

# Rebuild models for recursive forward references
BaseNode.model_rebuild()
FactorNode.model_rebuild()
TermTail.model_rebuild()
TermNode.model_rebuild()
ExpressionTail.model_rebuild()
ExpressionNode.model_rebuild()
