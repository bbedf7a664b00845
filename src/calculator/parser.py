"""
Recursive descent parser for the calculator expression language.

The natural grammar is left recursive, which a top-down parser cannot use:

    expression → expression ("+" | "-") term | term
    term       → term ("*" | "/") factor | factor
    factor     → base ["^" factor]
    base       → INTEGER | DECIMAL | "(" expression ")"

Eliminating the left recursion gives the LL(1) grammar parsed here
(ε is the empty string):

    expression      → term expression_tail
    expression_tail → ε | ("+" | "-") term expression_tail
    term            → factor term_tail
    term_tail       → ε | ("*" | "/") factor term_tail
    factor          → base ["^" factor]
    base            → INTEGER | DECIMAL | "(" expression ")"

Left associativity of + - * / is restored at evaluation time by threading
the left operand through the tail chain. ``factor`` stays right recursive,
which makes ``^`` right associative.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from calculator.environment import get_settings
from calculator.errors import ExpressionSyntaxError, describe_token
from calculator.lexer import tokenize
from calculator.nodes import (
    BaseNode,
    ExpressionNode,
    ExpressionTail,
    FactorNode,
    TermNode,
    TermTail,
)
from calculator.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_ADDITIVE = (TokenKind.ADD, TokenKind.SUBTRACT)
_MULTIPLICATIVE = (TokenKind.MULTIPLY, TokenKind.DIVIDE)


class _Parser:
    """Recursive descent parser with one token of lookahead."""

    def __init__(self, tokens: Iterable[Token], max_depth: int) -> None:
        self.tokens = list(tokens)
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    @property
    def current(self) -> Token | None:
        """The lookahead token, or None at end of input."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def check(self, *kinds: TokenKind) -> bool:
        tok = self.current
        return tok is not None and tok.kind in kinds

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise ExpressionSyntaxError(
                f"Expression nested deeper than {self.max_depth} levels",
                self.current,
                (),
            )

    def _leave(self) -> None:
        self.depth -= 1

    # -- Grammar rules --

    def parse_expression(self) -> ExpressionNode:
        """term expression_tail"""
        self._enter()
        term = self.parse_term()
        tail = self.parse_expression_tail()
        self._leave()
        return ExpressionNode(term=term, tail=tail)

    def parse_expression_tail(self) -> ExpressionTail:
        """ε | ('+' | '-') term expression_tail"""
        segments: list[tuple[Token, TermNode]] = []
        while self.check(*_ADDITIVE):
            op = self.advance()
            segments.append((op, self.parse_term()))

        tail = ExpressionTail.empty()
        for op, term in reversed(segments):
            tail = ExpressionTail(operator=op, term=term, tail=tail)
        return tail

    def parse_term(self) -> TermNode:
        """factor term_tail"""
        factor = self.parse_factor()
        tail = self.parse_term_tail()
        return TermNode(factor=factor, tail=tail)

    def parse_term_tail(self) -> TermTail:
        """ε | ('*' | '/') factor term_tail"""
        segments: list[tuple[Token, FactorNode]] = []
        while self.check(*_MULTIPLICATIVE):
            op = self.advance()
            segments.append((op, self.parse_factor()))

        tail = TermTail.empty()
        for op, factor in reversed(segments):
            tail = TermTail(operator=op, factor=factor, tail=tail)
        return tail

    def parse_factor(self) -> FactorNode:
        """base ['^' factor]"""
        base = self.parse_base()
        if not self.check(TokenKind.EXPONENT):
            return FactorNode(base=base, exponent=None)

        self.advance()
        self._enter()
        exponent = self.parse_factor()
        self._leave()
        return FactorNode(base=base, exponent=exponent)

    def parse_base(self) -> BaseNode:
        """INTEGER | DECIMAL | '(' expression ')'"""
        tok = self.current

        if tok is not None and tok.is_numeric:
            return BaseNode.literal(self.advance())

        if tok is not None and tok.kind == TokenKind.LEFT_PAREN:
            self.advance()
            expression = self.parse_expression()
            if not self.check(TokenKind.RIGHT_PAREN):
                raise ExpressionSyntaxError(
                    f"Unexpected token: {describe_token(self.current)}, expected ')'",
                    self.current,
                    (")",),
                )
            self.advance()
            return BaseNode.parenthesized(expression)

        raise ExpressionSyntaxError(
            f"Unexpected token: {describe_token(tok)}, expected a number or '('",
            tok,
            ("number", "("),
        )


def parse(tokens: Iterable[Token]) -> ExpressionNode:
    """Parse a token sequence into an expression tree.

    Args:
        tokens: Tokens as produced by ``tokenize()``.

    Returns:
        Root ExpressionNode of the parse tree.

    Raises:
        ExpressionSyntaxError: If the tokens do not form exactly one expression.
        LexicalError: If ``tokens`` is a lazy tokenizer that hits bad input.
    """
    parser = _Parser(tokens, get_settings().max_depth)
    tree = parser.parse_expression()

    # Ensure all tokens consumed
    if parser.current is not None:
        raise ExpressionSyntaxError(
            f"Unexpected token after expression: {describe_token(parser.current)}",
            parser.current,
            ("end of input",),
        )

    logger.debug("Parsed %d tokens into %s", len(parser.tokens), tree)
    return tree


def parse_expr(source: str) -> ExpressionNode:
    """Tokenize and parse an expression string.

    Args:
        source: Expression string (e.g., "2 + 3 * 4")

    Returns:
        Parsed expression AST.

    Raises:
        LexicalError: If tokenization fails.
        ExpressionSyntaxError: If the expression is invalid.
    """
    return parse(tokenize(source))
