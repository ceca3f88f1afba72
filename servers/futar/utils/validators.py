#!/usr/bin/env python3
"""Input validation utilities for the FUTÁR client."""

from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .exceptions import InvalidArgumentError
from .logger import get_logger

logger = get_logger("validators")

Options = Union[str, Mapping[str, Any], None]


def _normalize_identifier(opts: Options, field: str) -> Dict[str, Any]:
    """Turn a bare identifier or an options mapping into an options dict.

    Raises:
        InvalidArgumentError: If the identifier is missing
    """
    if isinstance(opts, str):
        if opts:
            return {field: opts}
    elif isinstance(opts, Mapping):
        if opts.get(field):
            return dict(opts)

    logger.debug("Rejected arguments without %s", field)
    raise InvalidArgumentError(f"{field} is required", field=field)


def normalize_stop(opts: Options) -> Dict[str, Any]:
    """Normalize stop-scoped arguments: ``"F01234"`` becomes ``{"stopId": "F01234"}``."""
    return _normalize_identifier(opts, "stopId")


def normalize_route(opts: Options) -> Dict[str, Any]:
    """Normalize route-scoped arguments: ``"3040"`` becomes ``{"routeId": "3040"}``."""
    return _normalize_identifier(opts, "routeId")


def normalize_query(opts: Options) -> Dict[str, Any]:
    """Normalize search arguments: a bare string is taken as the query."""
    return _normalize_identifier(opts, "query")


def require_fields(opts: Optional[Mapping[str, Any]], fields: Iterable[str]) -> Dict[str, Any]:
    """Check that every named field is present and truthy.

    Zero coordinates count as missing, matching the service's historic client.

    Args:
        opts: Options mapping supplied by the caller
        fields: Names of the required fields

    Returns:
        A shallow copy of the options

    Raises:
        InvalidArgumentError: If any field is missing
    """
    fields = list(fields)
    if not isinstance(opts, Mapping) or not all(opts.get(name) for name in fields):
        if len(fields) > 1:
            message = ", ".join(fields[:-1]) + f" and {fields[-1]} are required"
        else:
            message = f"{fields[0]} is required"
        logger.debug("Rejected arguments: %s", message)
        raise InvalidArgumentError(message, field=",".join(fields))
    return dict(opts)


def fallback(value: Any, default: Any) -> Any:
    """Return ``value`` unless it is falsy, in which case ``default``.

    Explicit ``False``, ``0`` and ``""`` are replaced too. Existing users rely
    on this, e.g. ``onlyDepartures=False`` is always sent as ``true``.
    """
    return value or default
