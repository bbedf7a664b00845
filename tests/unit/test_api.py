"""Tests for the public package surface."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError
from pathlib import Path

import pytest

import calculator
from calculator import NumericResult, NumericType, _version


class TestPublicApi:
    def test_version(self) -> None:
        assert isinstance(calculator.__version__, str)
        assert calculator.__version__

    def test_pipeline(self) -> None:
        tokens = list(calculator.tokenize("2 * (3 + 4)"))
        tree = calculator.parse(tokens)
        assert calculator.evaluate(tree) == NumericResult(NumericType.INTEGER, 14)
        assert calculator.infer_type(tree) == NumericType.INTEGER

    def test_calculate(self) -> None:
        assert calculator.calculate("1 / 2.0") == NumericResult(NumericType.DECIMAL, 0.5)

    def test_parse_expr_root(self) -> None:
        tree = calculator.parse_expr("2^3^2")
        assert isinstance(tree, calculator.ExpressionNode)
        assert (tree.type, tree.value) == (NumericType.INTEGER, 512)

    def test_exports(self) -> None:
        for name in calculator.__all__:
            assert hasattr(calculator, name)

    def test_version_matches_project_metadata(self) -> None:
        pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with pyproject.open("rb") as f:
            assert calculator.__version__ == tomllib.load(f)["project"]["version"]

    def test_version_falls_back_without_metadata(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        def missing(name: str) -> str:
            raise PackageNotFoundError(name)

        monkeypatch.setattr(_version, "version", missing)
        monkeypatch.setattr(_version, "_PYPROJECT", tmp_path / "pyproject.toml")
        assert _version.get_version() == "0.0.0"
