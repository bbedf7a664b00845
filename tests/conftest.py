"""Shared pytest fixtures for calculator tests."""

import pytest

from calculator.environment import MAX_DEPTH_VAR, MAX_INTEGER_BITS_VAR


@pytest.fixture(autouse=True)
def clean_calculator_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default settings."""
    monkeypatch.delenv(MAX_DEPTH_VAR, raising=False)
    monkeypatch.delenv(MAX_INTEGER_BITS_VAR, raising=False)
