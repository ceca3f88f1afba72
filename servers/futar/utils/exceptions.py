#!/usr/bin/env python3
"""Custom exception classes for the FUTÁR client."""

from typing import Any, Dict, Optional


class FutarError(Exception):
    """Base exception for all FUTÁR client errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidArgumentError(FutarError):
    """Raised when a required argument is missing, before any request is sent."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: Optional[int] = None,
        error_code: str = "INVALID_ARGUMENT",
    ):
        super().__init__(message, error_code, {"field": field, "code": code})
        self.field = field
        self.code = code


class ServiceError(InvalidArgumentError):
    """Raised when the service answers with a non-200 envelope code.

    Subclasses InvalidArgumentError because the service historically reported
    every upstream failure under that name; callers catching it keep working.
    """

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message, code=code, error_code="SERVICE_ERROR")
        self.text = message


class ConfigurationError(FutarError):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, "CONFIGURATION_ERROR", {"config_key": config_key})
        self.config_key = config_key
