"""Logging configuration for ospkg-sbom."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAME = "ospkg_sbom"

TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call repeatedly: the existing handler is reconfigured rather than
    a second one added.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO
        structured: Emit JSON lines instead of text

    Returns:
        The ``ospkg_sbom`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    if not logger.handlers:
        # stderr keeps stdout free for JSON results
        logger.addHandler(logging.StreamHandler(sys.stderr))
    handler = logger.handlers[0]
    handler.setLevel(log_level)
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(TEXT_FORMAT, DATE_FORMAT))

    return logger


logger = setup_logging(os.getenv("LOG_LEVEL", "INFO"))
