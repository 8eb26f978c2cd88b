"""File-level entry points for OS package normalization.

Usage:
    from ospkg_sbom.normalization import normalize_bom_file, normalize_rootfs

    # Normalize an existing scanner document
    result = normalize_bom_file("trivy-bom.json", os_release_file="rootfs/etc/os-release")

    # Scan a root filesystem or image and normalize in one step
    result = normalize_rootfs("/mnt/rootfs")
    print(result.to_dict()["allTypes"])
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ._normalization.models import NormalizationResult, OsReleaseInfo
from ._normalization.os_release import load_os_release_file, read_os_release
from ._normalization.pipeline import normalize_bom
from ._scanner.trivy import scan_os_packages
from .config import ScannerConfig
from .exceptions import FileProcessingError
from .logging_config import logger

PathLike = Union[str, Path]


def load_scanner_document(bom_file: PathLike) -> Dict[str, Any]:
    """
    Load a scanner CycloneDX document from disk.

    Raises:
        FileProcessingError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(bom_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileProcessingError(f"Scanner document not found: {bom_file}")
    except json.JSONDecodeError as e:
        raise FileProcessingError(f"Invalid JSON in scanner document {bom_file}: {e}")
    except OSError as e:
        raise FileProcessingError(f"Could not read scanner document {bom_file}: {e}")

    if not isinstance(data, dict):
        raise FileProcessingError(f"Scanner document {bom_file} is not a JSON object")
    return data


def resolve_os_release(
    os_release_file: Optional[PathLike] = None,
    rootfs: Optional[PathLike] = None,
) -> OsReleaseInfo:
    """
    Load os-release metadata from an explicit file or a root filesystem.

    An explicit file takes precedence; with neither, the metadata is empty.
    """
    if os_release_file:
        return load_os_release_file(os_release_file)
    if rootfs:
        return read_os_release(rootfs)
    return OsReleaseInfo()


def normalize_bom_file(
    bom_file: PathLike,
    os_release_file: Optional[PathLike] = None,
    rootfs: Optional[PathLike] = None,
) -> NormalizationResult:
    """
    Normalize a scanner document stored on disk.

    Args:
        bom_file: Path to the scanner's CycloneDX JSON
        os_release_file: Path to an os-release file
        rootfs: Root filesystem to read os-release from (ignored when
            os_release_file is given)

    Returns:
        NormalizationResult

    Raises:
        FileProcessingError: If the scanner document cannot be loaded
    """
    bom = load_scanner_document(bom_file)
    os_release = resolve_os_release(os_release_file, rootfs)
    return normalize_bom(bom, os_release)


def normalize_rootfs(src: str, config: Optional[ScannerConfig] = None) -> NormalizationResult:
    """
    Scan an image or root filesystem and normalize its OS packages.

    os-release metadata is read from ``src`` when it is a directory. A missing
    scanner or scanner output yields an empty result.

    Args:
        src: Image reference or root filesystem directory
        config: Scanner configuration

    Returns:
        NormalizationResult
    """
    bom = scan_os_packages(src, config)
    os_release = read_os_release(src) if Path(src).is_dir() else OsReleaseInfo()
    return normalize_bom(bom, os_release)


def write_result(result: NormalizationResult, output_file: PathLike) -> None:
    """
    Write a normalization result as JSON.

    Raises:
        FileProcessingError: If the file cannot be written
    """
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
    except OSError as e:
        raise FileProcessingError(f"Could not write {output_file}: {e}")
    logger.info(f"Wrote {len(result.packages)} OS packages to {output_file}")
