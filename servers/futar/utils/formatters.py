#!/usr/bin/env python3
"""Formatters that turn Python values into the service's query parameter strings."""

from datetime import date, datetime, tzinfo
from typing import Any, Iterable, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from .exceptions import InvalidArgumentError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DateTimeLike = Union[datetime, str, int, float]


def to_service_datetime(value: DateTimeLike, tz: tzinfo) -> datetime:
    """Convert a point in time to the service's local calendar.

    Args:
        value: A ``datetime`` (naive values are taken as already local),
            an ISO 8601 string, or an epoch timestamp in milliseconds
        tz: The service time zone

    Returns:
        Aware datetime in ``tz``

    Raises:
        InvalidArgumentError: If the value cannot be interpreted
    """
    if isinstance(value, bool):
        raise InvalidArgumentError("dateTime must be a point in time", field="dateTime")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=tz)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidArgumentError(
                f"Invalid dateTime: {value}", field="dateTime"
            ) from exc

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Invalid dateTime: {value}", field="dateTime"
            ) from exc

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)

    raise InvalidArgumentError("dateTime must be a point in time", field="dateTime")


def split_date_time(value: DateTimeLike, tz: tzinfo) -> Tuple[str, str]:
    """Return the ``(YYYY-MM-DD, HH:MM)`` pair the trip planner expects."""
    local = to_service_datetime(value, tz)
    return local.strftime(DATE_FORMAT), local.strftime(TIME_FORMAT)


def format_day(day: Optional[Union[date, str]], tz: tzinfo) -> str:
    """Format a schedule day, defaulting to today in the service time zone."""
    if not day:
        return datetime.now(tz).strftime(DATE_FORMAT)
    if isinstance(day, date):
        return day.strftime(DATE_FORMAT)
    return day


def format_place(lat: Any, lon: Any, name: Optional[str] = None) -> str:
    """Build a ``fromPlace``/``toPlace`` value, e.g. ``Deák tér::47.497,19.054``."""
    place = f"{lat},{lon}"
    return f"{name}::{place}" if name else place


def join_modes(mode: Union[str, Iterable[str]]) -> str:
    """Comma-join a list of travel modes; strings pass through unchanged."""
    if isinstance(mode, str):
        return mode
    return ",".join(str(m).upper() for m in mode)


def service_timezone(name: str) -> ZoneInfo:
    return ZoneInfo(name)
