"""
Duration calculation for seatime ranges.

Instants are subtracted as absolute points in time. No timezone
normalisation happens here, so a day is always 24 elapsed hours regardless
of daylight-saving transitions.
"""

import math
from datetime import date, datetime
from typing import Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDate, InvalidRange
from .models import SeatimeDuration

DateLike = Union[DateTime, datetime, date, str]


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero for non-negative values."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def parse_instant(value: DateLike) -> DateTime:
    """
    Convert a date-like value into a pendulum DateTime.

    Naive datetimes and bare dates are taken as UTC.

    Raises:
        InvalidDate: If the value is empty, of an unsupported type, or does
            not describe an instant.
    """
    if isinstance(value, datetime):
        return pendulum.instance(value)

    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day)

    if not isinstance(value, str) or not value.strip():
        raise InvalidDate(f"Invalid date provided: {value!r}")

    try:
        parsed = pendulum.parse(value.strip())
    except (ValueError, TypeError) as exc:
        raise InvalidDate(f"Invalid date provided: {value!r}") from exc

    if isinstance(parsed, DateTime):
        return parsed
    if isinstance(parsed, date):
        return pendulum.datetime(parsed.year, parsed.month, parsed.day)

    # Durations, bare times and the like
    raise InvalidDate(f"Invalid date provided: {value!r}")


def elapsed_minutes(start: DateTime, end: DateTime) -> int:
    """Whole minutes between two instants; the sub-minute remainder is dropped."""
    return int((end - start).total_seconds() // 60)


def calculate_duration(start_at: DateLike, end_at: DateLike) -> SeatimeDuration:
    """
    Calculate the seatime duration between two instants.

    Args:
        start_at: Sign-on instant (datetime, date or ISO-8601 string)
        end_at: Sign-off instant

    Returns:
        SeatimeDuration with every field rounded to 2 decimals

    Raises:
        InvalidDate: If either value cannot be parsed
        InvalidRange: If end_at lies before start_at
    """
    start = parse_instant(start_at)
    end = parse_instant(end_at)

    if end < start:
        raise InvalidRange("End date must be after start date")

    total_hours = elapsed_minutes(start, end) / 60
    total_days = total_hours / 24

    rounded_hours = round_half_up(total_hours)
    rounded_days = round_half_up(total_days)
    whole_days = math.floor(rounded_days)

    return SeatimeDuration(
        total_hours=rounded_hours,
        total_days=rounded_days,
        whole_days=whole_days,
        # Clamped: rounding can carry 23:59 over into a whole day
        remaining_hours=round_half_up(max(total_hours - whole_days * 24, 0.0)),
    )
