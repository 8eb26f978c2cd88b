"""Process and platform helpers for the scanner collaborator."""

import platform
import subprocess
import threading
import time
from contextlib import contextmanager
from typing import Iterator

from ospkg_sbom.config import DEFAULT_SCAN_TIMEOUT
from ospkg_sbom.exceptions import ScannerError
from ospkg_sbom.logging_config import logger

# Seconds between "still running" log lines
PROGRESS_INTERVAL = 60

# Python machine names mapped to the suffixes used by plugin binaries
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "x32": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64le",
}


def get_plugin_platform() -> tuple[str, str, str]:
    """
    Get the platform, architecture and executable extension for plugin binaries.

    Returns:
        Tuple of (platform, arch, extension), e.g. ("linux", "amd64", "")
    """
    system = platform.system().lower()
    extension = ".exe" if system == "windows" else ""
    machine = platform.machine().lower()
    return system, _ARCH_MAP.get(machine, machine), extension


@contextmanager
def _progress_heartbeat(command_name: str, started: float) -> Iterator[None]:
    """Log a heartbeat line every PROGRESS_INTERVAL seconds until the block exits."""
    done = threading.Event()

    def beat() -> None:
        while not done.wait(PROGRESS_INTERVAL):
            minutes, seconds = divmod(int(time.time() - started), 60)
            logger.info(f"{command_name} still scanning... ({minutes}m {seconds}s elapsed)")

    heartbeat = threading.Thread(target=beat, name=f"{command_name}-progress", daemon=True)
    heartbeat.start()
    try:
        yield
    finally:
        done.set()
        heartbeat.join(timeout=1)


def run_command(
    cmd: list[str],
    command_name: str,
    timeout: int = DEFAULT_SCAN_TIMEOUT,
) -> subprocess.CompletedProcess:
    """
    Run a scanner process to completion.

    Args:
        cmd: Executable and arguments
        command_name: Short name used in log lines and errors
        timeout: Seconds before the process is killed

    Returns:
        The completed process with captured text output

    Raises:
        ScannerError: If the process exits non-zero, times out or cannot be started
    """
    logger.info(f"Running {command_name}: {' '.join(cmd)}")
    started = time.time()

    with _progress_heartbeat(command_name, started):
        try:
            return subprocess.run(cmd, capture_output=True, check=True, text=True, timeout=timeout)
        except subprocess.CalledProcessError as e:
            if e.stderr:
                logger.error(f"[{command_name}] {e.stderr.strip()}")
            raise ScannerError(f"{command_name} exited with return code {e.returncode}")
        except subprocess.TimeoutExpired:
            elapsed = int(time.time() - started)
            logger.error(f"{command_name} was stopped after {elapsed}s (limit: {timeout}s)")
            raise ScannerError(f"{command_name} timed out")
        except FileNotFoundError:
            raise ScannerError(f"{command_name} executable not found - is it installed?")
