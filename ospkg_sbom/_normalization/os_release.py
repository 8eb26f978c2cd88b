"""Reading ``os-release`` metadata from a target root filesystem."""

import os
import posixpath
from pathlib import Path
from typing import Dict, Optional, Union

from ospkg_sbom.logging_config import logger

from .models import OsReleaseInfo

# Checked in order; the first existing file wins
OS_RELEASE_PATHS = (
    Path("etc") / "os-release",
    Path("usr") / "lib" / "os-release",
)

_QUOTES = ('"', "'")

# Symlink hops followed before a candidate is given up
MAX_SYMLINK_HOPS = 8


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def parse_os_release(text: str) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines from an os-release file.

    Comment lines and lines without ``=`` are ignored; surrounding quotes are
    stripped from values.

    Args:
        text: File contents

    Returns:
        Mapping of key to value
    """
    data: Dict[str, str] = {}
    for line in text.splitlines():
        if line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            data[key] = _unquote(value)
    return data


def find_os_release_file(root: Union[str, Path]) -> Optional[Path]:
    """
    Locate the os-release file under a root filesystem.

    Args:
        root: Root directory of the scanned host or unpacked image

    Returns:
        Path to the first existing candidate, or None
    """
    root_path = Path(root)
    for candidate in OS_RELEASE_PATHS:
        path = _resolve_in_root(root_path, candidate)
        if path is not None:
            return path
    return None


def _resolve_in_root(root_path: Path, relative: Path) -> Optional[Path]:
    """
    Follow symlinks as if ``root_path`` were ``/``.

    Image filesystems commonly link ``etc/os-release`` to the absolute
    ``/usr/lib/os-release``; resolving that on the host would read the host's
    file instead of the image's.
    """
    for _ in range(MAX_SYMLINK_HOPS):
        path = root_path / relative
        if not path.is_symlink():
            return path if path.is_file() else None
        target = os.readlink(path)
        if not posixpath.isabs(target):
            target = posixpath.join(relative.parent.as_posix(), target)
        # ".." above the root stays at the root
        normalized = posixpath.normpath("/" + target.lstrip("/"))
        relative = Path(normalized.lstrip("/"))
    logger.warning(f"Too many symlinks resolving {root_path / relative}")
    return None


def load_os_release_file(path: Union[str, Path]) -> OsReleaseInfo:
    """
    Load and parse an os-release file.

    Unreadable files yield empty metadata rather than an error.
    """
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Could not read os-release file {path}: {e}")
        return OsReleaseInfo()
    return OsReleaseInfo.from_mapping(parse_os_release(text))


def read_os_release(root: Union[str, Path]) -> OsReleaseInfo:
    """
    Read os-release metadata from a root filesystem.

    Args:
        root: Root directory of the scanned host or unpacked image

    Returns:
        Parsed metadata, empty when no os-release file exists
    """
    path = find_os_release_file(root)
    if path is None:
        logger.debug(f"No os-release file found under {root}")
        return OsReleaseInfo()

    info = load_os_release_file(path)
    logger.debug(f"Loaded os-release from {path}: {dict(info.values)}")
    return info
