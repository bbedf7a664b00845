"""
Lexer for the calculator expression language.

Token grammar:
    integer     → ["-"] digit {digit}
    decimal     → ["-"] digit {digit} "." {digit}
    operator    → "+" | "-" | "*" | "/" | "^"
    punctuation → "(" | ")"

The lexer is a deterministic finite automaton with four states:

    DEFAULT       initial state; whitespace is skipped
    INTEGER_PART  accumulating the digits of a literal
    GOT_HYPHEN    saw "-", which is either a subtract operator or the sign
                  of a negative literal depending on the next character
    DECIMAL       accumulating the digits after the decimal point

``transition()`` is the whole automaton: given a state and a classified
input character it returns the next state (or ACCEPT / ERROR) plus the
tokens emitted by that step. ``tokenize()`` drives it over a string.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum, auto

from calculator.errors import ErrorContext, LexicalError
from calculator.tokens import SUBTRACT, Token, is_operator_lexeme

logger = logging.getLogger(__name__)


class StateKind(StrEnum):
    """Lexer automaton states."""

    DEFAULT = auto()
    INTEGER_PART = auto()
    GOT_HYPHEN = auto()
    DECIMAL = auto()


class CharClass(StrEnum):
    """Input events the automaton reacts to."""

    WHITESPACE = auto()
    DIGIT = auto()
    HYPHEN = auto()
    FULL_STOP = auto()
    OPERATOR = auto()  # + * / ^ ( )
    END_OF_INPUT = auto()


class Outcome(StrEnum):
    """Terminal results of a transition."""

    ACCEPT = auto()
    ERROR = auto()


@dataclass(frozen=True)
class LexerState:
    """Automaton state. ``digits`` holds the literal text scanned so far."""

    kind: StateKind
    digits: str = ""


@dataclass(frozen=True)
class Transition:
    """Result of one automaton step."""

    next: LexerState | Outcome
    emitted: tuple[Token, ...] = ()


DEFAULT_STATE = LexerState(StateKind.DEFAULT)
GOT_HYPHEN_STATE = LexerState(StateKind.GOT_HYPHEN)

_WHITESPACE = frozenset(" \t\n\r\f\v")
_DIGITS = frozenset("0123456789")


def classify(char: str) -> CharClass | None:
    """Classify a single character, or return None if it is not in the alphabet."""
    if char in _WHITESPACE:
        return CharClass.WHITESPACE
    if char in _DIGITS:
        return CharClass.DIGIT
    if char == "-":
        return CharClass.HYPHEN
    if char == ".":
        return CharClass.FULL_STOP
    if is_operator_lexeme(char):
        return CharClass.OPERATOR
    return None


def transition(state: LexerState, char_class: CharClass, char: str = "") -> Transition:
    """Apply one input event to the automaton.

    Args:
        state: Current state.
        char_class: Classification of the input character.
        char: The character itself (unused for END_OF_INPUT).

    Returns:
        The next state or outcome, with the tokens emitted by this step.

    Raises:
        ValueError: If a finished literal cannot be converted to a number.
    """
    if state.kind == StateKind.DEFAULT:
        return _from_default(char_class, char)
    if state.kind == StateKind.GOT_HYPHEN:
        return _from_hyphen(char_class, char)
    return _from_literal(state, char_class, char)


def _from_default(char_class: CharClass, char: str) -> Transition:
    if char_class == CharClass.WHITESPACE:
        return Transition(DEFAULT_STATE)
    if char_class == CharClass.DIGIT:
        return Transition(LexerState(StateKind.INTEGER_PART, char))
    if char_class == CharClass.HYPHEN:
        return Transition(GOT_HYPHEN_STATE)
    if char_class == CharClass.OPERATOR:
        return Transition(DEFAULT_STATE, (Token.from_lexeme(char),))
    if char_class == CharClass.END_OF_INPUT:
        return Transition(Outcome.ACCEPT)
    return Transition(Outcome.ERROR)


def _from_hyphen(char_class: CharClass, char: str) -> Transition:
    # Anything but a digit settles the pending hyphen as a subtract operator
    if char_class == CharClass.DIGIT:
        return Transition(LexerState(StateKind.INTEGER_PART, "-" + char))
    if char_class == CharClass.WHITESPACE:
        return Transition(DEFAULT_STATE, (SUBTRACT,))
    if char_class == CharClass.HYPHEN:
        return Transition(GOT_HYPHEN_STATE, (SUBTRACT,))
    if char_class == CharClass.OPERATOR:
        return Transition(DEFAULT_STATE, (SUBTRACT, Token.from_lexeme(char)))
    if char_class == CharClass.END_OF_INPUT:
        return Transition(Outcome.ACCEPT, (SUBTRACT,))
    return Transition(Outcome.ERROR)


def _from_literal(state: LexerState, char_class: CharClass, char: str) -> Transition:
    """Shared transitions of INTEGER_PART and DECIMAL."""
    if char_class == CharClass.DIGIT:
        return Transition(LexerState(state.kind, state.digits + char))
    if char_class == CharClass.FULL_STOP:
        if state.kind == StateKind.INTEGER_PART:
            return Transition(LexerState(StateKind.DECIMAL, state.digits + "."))
        return Transition(Outcome.ERROR)

    literal = _finish_literal(state)
    if char_class == CharClass.WHITESPACE:
        return Transition(DEFAULT_STATE, (literal,))
    if char_class == CharClass.HYPHEN:
        return Transition(DEFAULT_STATE, (literal, SUBTRACT))
    if char_class == CharClass.OPERATOR:
        return Transition(DEFAULT_STATE, (literal, Token.from_lexeme(char)))
    return Transition(Outcome.ACCEPT, (literal,))


def _finish_literal(state: LexerState) -> Token:
    if state.kind == StateKind.DECIMAL:
        return Token.decimal(float(state.digits))
    return Token.integer(int(state.digits))


def tokenize(text: str) -> Iterator[Token]:
    """Lazily tokenize an expression string.

    Tokens are yielded as soon as the automaton emits them, so a consumer
    sees every token before the first malformed character.

    Args:
        text: Expression source, e.g. ``"2 * (3 - -1.5)"``.

    Yields:
        Tokens in source order.

    Raises:
        LexicalError: On a character outside the alphabet, a character that
            is illegal in the current state, or a premature end of input.
    """
    state = DEFAULT_STATE

    for offset, char in enumerate(text):
        char_class = classify(char)
        if char_class is None:
            raise LexicalError(
                f"Unrecognized character {char!r} at offset {offset}",
                offset,
                char,
                ErrorContext(source=text, offset=offset),
            )

        step = _step(state, char_class, char, text, offset)
        if not isinstance(step.next, LexerState):
            raise LexicalError(
                f"Unexpected character {char!r} at offset {offset}",
                offset,
                char,
                ErrorContext(source=text, offset=offset),
            )
        yield from _emit(step, offset)
        state = step.next

    offset = len(text)
    step = _step(state, CharClass.END_OF_INPUT, "", text, offset)
    if step.next != Outcome.ACCEPT:
        raise LexicalError(
            "Unexpected end of input",
            offset,
            context=ErrorContext(source=text, offset=offset),
        )
    yield from _emit(step, offset)


def _step(
    state: LexerState, char_class: CharClass, char: str, text: str, offset: int
) -> Transition:
    try:
        return transition(state, char_class, char)
    except ValueError as e:
        # int() refuses literals beyond the interpreter's digit limit
        raise LexicalError(
            f"Invalid numeric literal of {len(state.digits)} characters ending at offset {offset}",
            offset,
            char or None,
            ErrorContext(source=text, offset=offset),
        ) from e


def _emit(step: Transition, offset: int) -> Iterator[Token]:
    for token in step.emitted:
        logger.debug("Emitting %r at offset %d", token, offset)
        yield token
