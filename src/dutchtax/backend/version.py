"""Report the installed dutchtax version."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "dutchtax"
PYPROJECT_FILE: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the distribution version, or the checkout's ``pyproject.toml`` one.

    Running from a source tree without ``pip install -e .`` leaves no package
    metadata, which is how the test suite runs through ``tests/conftest.py``.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        pass

    try:
        with PYPROJECT_FILE.open("rb") as handle:
            project = tomllib.load(handle).get("project", {})
    except FileNotFoundError as exc:
        raise RuntimeError(f"{PACKAGE_NAME} is neither installed nor a source checkout") from exc

    version = project.get("version")
    if not isinstance(version, str) or not version:
        raise RuntimeError(f"No [project].version in {PYPROJECT_FILE}")
    return version


__all__ = ["PACKAGE_NAME", "get_project_version"]
