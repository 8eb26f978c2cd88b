"""Scanner configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .logging_config import logger

# Default command timeout in seconds
DEFAULT_SCAN_TIMEOUT = 1800


def _default_cache_dir() -> str:
    return str(Path.home() / ".cache" / "trivy")


def evaluate_boolean(value: str) -> bool:
    """
    Evaluate string values as boolean.

    Args:
        value: String value to evaluate

    Returns:
        Boolean result
    """
    return value.lower() in ["true", "yes", "yeah", "1"]


@dataclass
class ScannerConfig:
    """Configuration for running the OS package scanner."""

    trivy_cmd: Optional[str] = None
    plugins_dir: Optional[str] = None
    cache_dir: str = field(default_factory=_default_cache_dir)
    timeout: int = DEFAULT_SCAN_TIMEOUT
    debug: bool = False

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.timeout <= 0:
            raise ConfigurationError(f"SCAN_TIMEOUT must be a positive number of seconds, got {self.timeout}")
        if self.plugins_dir and not Path(self.plugins_dir).is_dir():
            raise ConfigurationError(f"OSPKG_PLUGINS_DIR is not a directory: {self.plugins_dir}")
        if not self.cache_dir:
            raise ConfigurationError("TRIVY_CACHE_DIR cannot be empty")


def load_scanner_config() -> ScannerConfig:
    """
    Load and validate scanner configuration from environment variables.

    Returns:
        Validated configuration object

    Raises:
        ConfigurationError: If configuration is invalid
    """
    timeout_env = os.getenv("SCAN_TIMEOUT")
    timeout = DEFAULT_SCAN_TIMEOUT
    if timeout_env:
        try:
            timeout = int(timeout_env)
        except ValueError:
            raise ConfigurationError(f"Invalid SCAN_TIMEOUT value: '{timeout_env}'")

    config = ScannerConfig(
        trivy_cmd=os.getenv("TRIVY_CMD") or None,
        plugins_dir=os.getenv("OSPKG_PLUGINS_DIR") or None,
        cache_dir=os.getenv("TRIVY_CACHE_DIR") or _default_cache_dir(),
        timeout=timeout,
        debug=evaluate_boolean(os.getenv("SCAN_DEBUG", "False")),
    )
    config.validate()
    logger.debug(f"Scanner configuration: {config}")
    return config
