#!/usr/bin/env python3
"""Structured logging setup for the FUTÁR client."""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from ..config import get_settings
from .exceptions import ConfigurationError

ROOT_LOGGER_NAME = "futar"

LOG_FORMATS = {
    "json": "%(asctime)s %(levelname)s %(name)s %(message)s",
    "text": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
}


def setup_logging(
    level: Optional[str] = None, format_type: Optional[str] = None
) -> logging.Logger:
    """Attach a stderr handler to the ``futar`` logger.

    The library never calls this itself; applications opt in. Arguments left
    as ``None`` come from ``FUTAR_LOG_LEVEL`` / ``FUTAR_LOG_FORMAT``.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format type ("json" or "text")

    Returns:
        The configured ``futar`` logger
    """
    settings = get_settings()
    level = level or settings.log_level
    format_type = format_type or settings.log_format

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level}", "log_level")
    if format_type not in LOG_FORMATS:
        raise ConfigurationError(f"Unknown log format: {format_type}", "log_format")

    if format_type == "json":
        formatter = jsonlogger.JsonFormatter(fmt=LOG_FORMATS["json"])
    else:
        formatter = logging.Formatter(LOG_FORMATS["text"])

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name (defaults to "futar")

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


class LoggerMixin:
    """Mixin class to add logging capabilities to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return get_logger(self.__class__.__name__)


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    duration_ms: float,
    status_code: Optional[int] = None,
    envelope_code: Optional[int] = None,
    error_code: Optional[str] = None,
    **kwargs,
) -> None:
    """Log a dispatched request with structured data.

    Args:
        logger: Logger instance
        endpoint: Service endpoint that was called
        duration_ms: Duration in milliseconds
        status_code: HTTP status code (if a response arrived)
        envelope_code: ``code`` field of the response envelope (if parsed)
        error_code: Error code (if the call failed)
        **kwargs: Additional fields to include in log
    """
    log_data = {
        "component": "futar_client",
        "api_endpoint": endpoint,
        "duration_ms": round(duration_ms, 2),
    }

    if status_code is not None:
        log_data["status_code"] = status_code

    if envelope_code is not None:
        log_data["envelope_code"] = envelope_code

    if error_code is not None:
        log_data["error_code"] = error_code

    log_data.update(kwargs)

    if error_code:
        logger.error(f"API call failed: {endpoint}", extra=log_data)
    else:
        logger.info(f"API call completed: {endpoint}", extra=log_data)
