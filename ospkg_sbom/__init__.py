"""ospkg-sbom package for normalizing OS package inventories into SBOM components."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path


def _get_version() -> str:
    """Installed distribution version, else the version in a source checkout's pyproject.toml."""
    try:
        return version("ospkg-sbom")
    except PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    try:
        with open(pyproject_path, "rb") as f:
            return tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        return "unknown"


__version__ = _get_version()
