"""Trivy scanner collaborator for OS package inventories.

Runs Trivy in offline mode against a container image or an unpacked root
filesystem and returns its CycloneDX document. Trivy is located, in order,
through the plugin directory (``trivy/trivy-cdxgen-<os>-<arch>``), ``TRIVY_CMD``
or ``PATH``.
"""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from ospkg_sbom.config import ScannerConfig
from ospkg_sbom.exceptions import ScannerError
from ospkg_sbom.logging_config import logger

from .utils import get_plugin_platform, run_command

TRIVY_COMMAND = "trivy"
BOM_FILE_NAME = "trivy-bom.json"


def get_plugin_binary(plugins_dir: str) -> Optional[str]:
    """
    Path of the Trivy plugin binary for this platform, if the plugin is installed.

    Args:
        plugins_dir: Plugin directory holding a ``trivy`` subdirectory
    """
    trivy_dir = Path(plugins_dir) / "trivy"
    if not trivy_dir.is_dir():
        return None
    system, arch, extension = get_plugin_platform()
    return str(trivy_dir / f"trivy-cdxgen-{system}-{arch}{extension}")


def resolve_trivy_binary(config: ScannerConfig) -> Optional[str]:
    """
    Find the Trivy binary to run.

    Args:
        config: Scanner configuration

    Returns:
        Path or command name, or None if Trivy is not available
    """
    if config.plugins_dir:
        plugin_binary = get_plugin_binary(config.plugins_dir)
        if plugin_binary:
            return plugin_binary
    if config.trivy_cmd:
        return config.trivy_cmd
    return shutil.which(TRIVY_COMMAND)


def build_trivy_args(src: str, output_file: str, config: ScannerConfig) -> list[str]:
    """
    Build the Trivy arguments for an offline CycloneDX scan.

    Existing directories are scanned as root filesystems, anything else as an
    image reference.
    """
    image_type = "rootfs" if Path(src).exists() else "image"
    args = [
        image_type,
        "--skip-db-update",
        "--skip-java-db-update",
        "--offline-scan",
        "--skip-files",
        "**/*.jar",
        "--no-progress",
        "--exit-code",
        "0",
        "--format",
        "cyclonedx",
        "--cache-dir",
        config.cache_dir,
        "--output",
        output_file,
    ]
    if not config.debug:
        args.append("-q")
    args.append(src)
    return args


def _prepare_cache_dir(cache_dir: str) -> None:
    for sub_dir in ("db", "java-db"):
        try:
            Path(cache_dir, sub_dir).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Could not create trivy cache directory {sub_dir}: {e}")


def _load_bom(bom_file: Path) -> Optional[Dict[str, Any]]:
    if not bom_file.exists():
        logger.warning("Trivy did not produce a CycloneDX document")
        return None
    try:
        with bom_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Invalid JSON output from trivy: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning("Trivy output is not a CycloneDX document")
        return None
    return data


def scan_os_packages(src: str, config: Optional[ScannerConfig] = None) -> Optional[Dict[str, Any]]:
    """
    Scan an image or root filesystem for OS packages.

    Scanner failures are logged rather than raised; whatever document Trivy
    managed to write is still returned.

    Args:
        src: Image reference or root filesystem directory
        config: Scanner configuration (defaults apply when omitted)

    Returns:
        Parsed CycloneDX document, or None when Trivy is unavailable or
        produced no usable output
    """
    config = config or ScannerConfig()
    trivy_bin = resolve_trivy_binary(config)
    if not trivy_bin:
        logger.warning("Trivy is not available; skipping OS package scan")
        return None

    _prepare_cache_dir(config.cache_dir)

    with tempfile.TemporaryDirectory(prefix="trivy-ospkg-") as temp_dir:
        bom_file = Path(temp_dir) / BOM_FILE_NAME
        cmd = [trivy_bin, *build_trivy_args(src, str(bom_file), config)]
        try:
            run_command(cmd, TRIVY_COMMAND, timeout=config.timeout)
        except ScannerError as e:
            logger.warning(f"Trivy scan of {src} did not complete cleanly: {e}")
        return _load_bom(bom_file)
