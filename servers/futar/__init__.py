#!/usr/bin/env python3
"""BKK FUTÁR client

Async access to the Budapest public transport information service: stop
arrivals and departures, routes, trip planning, alerts and bicycle rental.
"""

from .client import FutarClient
from .config import ClientConfig, Settings, get_settings
from .utils.exceptions import (
    ConfigurationError,
    FutarError,
    InvalidArgumentError,
    ServiceError,
)

__version__ = "1.0.0"
__author__ = "FUTÁR client contributors"

__all__ = [
    "FutarClient",
    "ClientConfig",
    "Settings",
    "get_settings",
    "FutarError",
    "InvalidArgumentError",
    "ServiceError",
    "ConfigurationError",
]
