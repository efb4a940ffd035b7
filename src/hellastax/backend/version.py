"""Expose the HellasTax version from package metadata or ``pyproject.toml``."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "hellastax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed version, reading ``pyproject.toml`` for source checkouts."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_version_from_pyproject(PYPROJECT_PATH)


def read_version_from_pyproject(path: Path) -> str:
    """Return the ``[project]`` version declared in ``path``."""

    if not path.exists():
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    in_project = False
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            in_project = line == "[project]"
            continue
        if in_project and line.split("=", 1)[0].strip() == "version":
            version = line.split("=", 1)[1].strip().strip("\"'")
            if version:
                return version
            break

    raise RuntimeError(f"Unable to determine project version from {path.name}")


__all__ = ["PACKAGE_NAME", "get_project_version", "read_version_from_pyproject"]
