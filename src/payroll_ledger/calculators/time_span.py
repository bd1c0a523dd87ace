"""Clock-time span to decimal hours."""

from __future__ import annotations

from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal

from payroll_ledger.exceptions import ValidationError

HOURS_PRECISION = Decimal("0.01")
MINUTES_PER_DAY = 24 * 60


def parse_clock_time(value: time | str) -> time:
    """Parse an ``HH:MM`` string into a time, passing times through."""
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid clock time {value!r}, expected HH:MM", field="time")


def _minutes(value: time) -> Decimal:
    return Decimal(value.hour * 60 + value.minute) + Decimal(value.second) / 60


def hours_between(start: time | str, end: time | str) -> Decimal | None:
    """Hours worked between two clock times.

    An end before the start means the shift crossed midnight. Equal times
    yield None rather than zero so an empty shift is never recorded.
    """
    minutes = _minutes(parse_clock_time(end)) - _minutes(parse_clock_time(start))
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    if minutes <= 0:
        return None

    return (minutes / 60).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)
