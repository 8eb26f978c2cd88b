"""External scanner collaborator."""

from .trivy import build_trivy_args, resolve_trivy_binary, scan_os_packages
from .utils import run_command

__all__ = [
    "build_trivy_args",
    "resolve_trivy_binary",
    "run_command",
    "scan_os_packages",
]
