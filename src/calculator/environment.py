"""
Environment configuration for the calculator.

Settings are read from environment variables each time ``get_settings()``
is called, so tests can override them with ``monkeypatch.setenv``.

Environment variables:
    - CALCULATOR_MAX_DEPTH: maximum parser nesting depth (default 100)
    - CALCULATOR_MAX_INTEGER_BITS: largest integer power result, in bits
      (default 1_000_000)

Usage:
    from calculator.environment import get_settings

    settings = get_settings()
    if depth > settings.max_depth:
        ...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


DEFAULT_MAX_DEPTH = 100
DEFAULT_MAX_INTEGER_BITS = 1_000_000

MAX_DEPTH_VAR = "CALCULATOR_MAX_DEPTH"
MAX_INTEGER_BITS_VAR = "CALCULATOR_MAX_INTEGER_BITS"


@dataclass(frozen=True)
class CalculatorSettings:
    """Resolved runtime settings."""

    max_depth: int = DEFAULT_MAX_DEPTH
    max_integer_bits: int = DEFAULT_MAX_INTEGER_BITS


def _positive_int_from_env(name: str, default: int) -> int:
    """Read a positive integer variable, falling back to ``default`` with a warning."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%d, using %d", name, value, default)
        return default
    return value


def get_settings() -> CalculatorSettings:
    """Resolve settings from the environment.

    Returns:
        CalculatorSettings with defaults for unset or invalid variables.

    Examples:
        >>> import os
        >>> os.environ["CALCULATOR_MAX_DEPTH"] = "32"
        >>> get_settings().max_depth
        32
    """
    return CalculatorSettings(
        max_depth=_positive_int_from_env(MAX_DEPTH_VAR, DEFAULT_MAX_DEPTH),
        max_integer_bits=_positive_int_from_env(MAX_INTEGER_BITS_VAR, DEFAULT_MAX_INTEGER_BITS),
    )
