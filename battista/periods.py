"""Calendar arithmetic for bucket periods.

Period lengths are always derived by subtracting the first day of a period
from the first day of the following one, so leap years need no special case.
Periods are half-open: ``[start, end)``.
"""

from __future__ import annotations

from datetime import date, timedelta

from .logging_setup import get_logger

_logger = get_logger("battista.periods")

ONE_DAY = timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return ``(first_day, first_day_of_next_month)``; December rolls over."""

    start = date(year, month, 1)
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year + 1, 1, 1)


def days_in_month(d: date) -> int:
    start, end = month_bounds(d.year, d.month)
    return (end - start).days


def days_in_year(d: date) -> int:
    start, end = year_bounds(d.year)
    return (end - start).days


def clipped_days(nominal_start: date, nominal_end: date, *, data_start: date, today: date) -> int:
    """Days of ``[nominal_start, nominal_end)`` that overlap the observed data.

    The observed range is ``[data_start, today]`` (today inclusive). The
    result never exceeds the nominal length and may be zero or negative when
    the two ranges do not overlap.
    """

    nominal = (nominal_end - nominal_start).days
    period_start = max(nominal_start, data_start)
    period_end = min(nominal_end, today + ONE_DAY)
    return min(nominal, (period_end - period_start).days)


def apply_min_days(days: int, *, min_days: int | None, label: str) -> int:
    """Raise a non-positive span to ``min_days``.

    With ``min_days=None`` the span is returned untouched and the caller's
    finalize step rejects it.
    """

    if days > 0 or min_days is None:
        return days
    _logger.warning(
        "Bucket %s covers %d elapsed day(s); using %d day(s) as the denominator",
        label,
        days,
        min_days,
    )
    return min_days


def year_period_days(year: int, *, data_start: date, today: date, min_days: int | None = 1) -> int:
    start, end = year_bounds(year)
    days = clipped_days(start, end, data_start=data_start, today=today)
    return apply_min_days(days, min_days=min_days, label=f"{year:04d}")


def month_period_days(
    year: int, month: int, *, data_start: date, today: date, min_days: int | None = 1
) -> int:
    start, end = month_bounds(year, month)
    days = clipped_days(start, end, data_start=data_start, today=today)
    return apply_min_days(days, min_days=min_days, label=f"{year:04d}-{month:02d}")


def in_window(tx_date: date, *, today: date, days: int) -> bool:
    """Whether ``tx_date`` falls in the last ``days`` days ending today.

    Membership is strict: a transaction exactly ``days`` days old is out.
    Dates after ``today`` are in no window.
    """

    age = (today - tx_date).days
    return 0 <= age < days


__all__ = [
    "apply_min_days",
    "clipped_days",
    "days_in_month",
    "days_in_year",
    "in_window",
    "month_bounds",
    "month_period_days",
    "year_bounds",
    "year_period_days",
]
