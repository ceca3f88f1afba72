"""Utility modules for the FUTÁR client."""

from .exceptions import (
    ConfigurationError,
    FutarError,
    InvalidArgumentError,
    ServiceError,
)
from .formatters import format_day, format_place, join_modes, split_date_time
from .logger import get_logger, log_api_call, setup_logging
from .validators import fallback, normalize_route, normalize_stop, require_fields

__all__ = [
    "ConfigurationError",
    "FutarError",
    "InvalidArgumentError",
    "ServiceError",
    "format_day",
    "format_place",
    "join_modes",
    "split_date_time",
    "get_logger",
    "log_api_call",
    "setup_logging",
    "fallback",
    "normalize_route",
    "normalize_stop",
    "require_fields",
]
