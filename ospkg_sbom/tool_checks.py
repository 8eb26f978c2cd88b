"""Availability checks for the external OS package scanner.

When the scanner is missing, these helpers produce installation instructions
so the CLI can fail with a useful message.
"""

import shutil
from dataclasses import dataclass, field
from typing import Optional

from ._scanner.trivy import TRIVY_COMMAND, resolve_trivy_binary
from .config import ScannerConfig
from .logging_config import logger


@dataclass
class ToolInfo:
    """Static description of the scanner binary."""

    name: str
    command: str
    install_instructions: str
    homepage: str
    required_for: list[str] = field(default_factory=list)


@dataclass
class ToolStatus:
    """Result of looking the scanner up on this host."""

    name: str
    available: bool
    path: Optional[str] = None
    info: Optional[ToolInfo] = None


TRIVY_TOOL = ToolInfo(
    name="Trivy",
    command=TRIVY_COMMAND,
    install_instructions=(
        "Install via package manager:\n"
        "  - macOS: brew install trivy\n"
        "  - Linux: See https://aquasecurity.github.io/trivy/latest/getting-started/installation/\n"
        "  - Or point TRIVY_CMD at an existing binary"
    ),
    homepage="https://trivy.dev",
    required_for=["Container images", "Root filesystems"],
)


def check_tool_available(command: str) -> tuple[bool, Optional[str]]:
    """Resolve ``command`` (a name on PATH or an executable path); returns (found, resolved path)."""
    path = shutil.which(command)
    return (path is not None, path)


def check_scanner(config: Optional[ScannerConfig] = None) -> ToolStatus:
    """
    Check whether the scanner can be run with the given configuration.

    Explicitly configured binaries (plugin directory, ``TRIVY_CMD``) are
    resolved through ``PATH`` when given as bare command names.
    """
    config = config or ScannerConfig()
    binary = resolve_trivy_binary(config)
    available, path = check_tool_available(binary) if binary else (False, None)
    return ToolStatus(name=TRIVY_TOOL.name, available=available, path=path, info=TRIVY_TOOL)


def log_tool_status(config: Optional[ScannerConfig] = None) -> ToolStatus:
    """Check the scanner and log where it was found, or that it is missing."""
    status = check_scanner(config)
    if status.available:
        logger.info(f"Available scanner: {status.name} ({status.path})")
    else:
        logger.warning(f"Missing scanner: {status.name} (no '{TRIVY_TOOL.command}' binary found)")
    return status


def get_tool_install_message() -> str:
    """Formatted installation instructions for the scanner."""
    lines = [
        f"To scan {' and '.join(TRIVY_TOOL.required_for).lower()}, install the required tool:",
        "",
        f"{TRIVY_TOOL.name} ({TRIVY_TOOL.homepage})",
        TRIVY_TOOL.install_instructions,
    ]
    return "\n".join(lines)
