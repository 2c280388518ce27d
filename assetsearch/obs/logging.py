"""
Logging utilities for asset search observability.

This module provides structured JSON logging to stdout with optional
sampling, and a single entry point that configures logging from settings.
"""

import json
import logging
import random
from typing import Optional

from ..contracts.settings import Settings, settings as default_settings


def should_log(sample_rate: float = 1.0) -> bool:
    """
    Determine if log should be emitted based on sampling rate.

    Args:
        sample_rate: Sampling rate (0.0-1.0)

    Returns:
        True if log should be emitted
    """
    if sample_rate >= 1.0:
        return True
    if sample_rate <= 0.0:
        return False
    return random.random() < sample_rate


class JSONHandler(logging.Handler):
    """Handler that writes each record as one JSON line to stdout."""

    def __init__(self, sample_rate: float = 1.0, level: int = logging.NOTSET):
        super().__init__(level)
        self.sample_rate = sample_rate

    def emit(self, record: logging.LogRecord) -> None:
        # Warnings and errors are never sampled away
        if record.levelno < logging.WARNING and not should_log(self.sample_rate):
            return

        log_entry = {
            "timestamp": record.created,
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "fields"):
            log_entry.update(record.fields)

        print(json.dumps(log_entry, ensure_ascii=False, default=str))

    def formatException(self, exc_info) -> str:
        return logging.Formatter().formatException(exc_info)


def setup_json_logging(sample_rate: float = 1.0, level: str = "INFO") -> None:
    """
    Configure the root logger to emit JSON.

    Args:
        sample_rate: Log sampling rate (0.0-1.0)
        level: Root log level
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(JSONHandler(sample_rate))
    root_logger.setLevel(level)


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure JSON or plain-text logging from settings."""
    config = config or default_settings
    if config.json_logs:
        setup_json_logging(config.log_sample_rate, config.log_level)
    else:
        logging.basicConfig(level=config.log_level, format=config.log_format, force=True)
