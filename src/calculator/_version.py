"""Package version lookup."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_DISTRIBUTION = "calculator"
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Installed distribution version, else the source checkout's, else ``0.0.0``."""
    try:
        return version(_DISTRIBUTION)
    except PackageNotFoundError:
        pass

    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
        if project.get("name") == _DISTRIBUTION and "version" in project:
            return str(project["version"])
    return "0.0.0"
