"""Budget comparisons over finalized buckets.

Pure presentation helpers: nothing here mutates a :class:`Budget` or a
:class:`Stats`. Allowances are daily rates in major units; a bucket's
allowance is the daily rate times its ``period_days``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from .models import Budget, Stats
from .periods import days_in_month, month_bounds

# Share of the allowance that may remain before a bucket counts as "close".
WARNING_RATIO = 0.25

# Overview thresholds, in percent of the 30-day budget.
OVERVIEW_WARNING_PERCENT = 75.0
OVERVIEW_OVER_PERCENT = 100.0

DAYS_PER_MONTH_NORM = 30


class Severity(Enum):
    ON_TRACK = "on-track"
    WARNING = "warning"
    OVER = "over"


@dataclass(frozen=True, slots=True)
class BudgetStatus:
    """Outcome of comparing one total against one allowance.

    ``remaining`` is negative when the allowance was exceeded.
    """

    allowance: float
    spent: float
    remaining: float
    severity: Severity


@dataclass(frozen=True, slots=True)
class BucketBudget:
    overall: BudgetStatus | None
    by_category: tuple[tuple[str, BudgetStatus | None], ...]

    def for_category(self, category: str) -> BudgetStatus | None:
        for key, status in self.by_category:
            if key == category:
                return status
        return None


@dataclass(frozen=True, slots=True)
class BudgetOverview:
    """Spending over the most recent months, normalized to 30 days.

    ``percentage``, ``severity`` and ``balance`` are ``None`` without a
    configured budget. A positive ``balance`` is money saved.
    """

    months: int
    total: float
    days: int
    average_per_30_days: float
    percentage: float | None
    severity: Severity | None
    balance: float | None


def evaluate(total: float, allowance_per_day: float, period_days: int) -> BudgetStatus | None:
    """Classify ``total`` against ``allowance_per_day`` over ``period_days``.

    Returns ``None`` when no allowance is configured (zero or negative rate)
    or the period is empty.
    """

    if allowance_per_day <= 0.0 or period_days <= 0:
        return None
    allowance = allowance_per_day * period_days
    remaining = allowance - total
    if remaining < 0:
        severity = Severity.OVER
    elif remaining / allowance < WARNING_RATIO:
        severity = Severity.WARNING
    else:
        severity = Severity.ON_TRACK
    return BudgetStatus(allowance=allowance, spent=total, remaining=remaining, severity=severity)


def evaluate_bucket(stats: Stats, budget: Budget) -> BucketBudget:
    """Evaluate every category of ``stats`` and its overall total."""

    days = stats.period_days
    categories = tuple(
        (category, evaluate(amount, budget.allowance_for(category), days))
        for category, amount in stats.by_category
    )
    return BucketBudget(overall=evaluate(stats.total, budget.total, days), by_category=categories)


def monthly_allowance(year: int, month: int, budget: Budget, *, today: date) -> float:
    """Overall allowance for a month, prorated to elapsed days in the current one."""

    start, _ = month_bounds(year, month)
    if (year, month) == (today.year, today.month):
        days = (today - start).days + 1
    else:
        days = days_in_month(start)
    return days * budget.total


def overview(
    monthly: Sequence[tuple[tuple[int, int], Stats]],
    budget: Budget,
    *,
    months: int = 12,
) -> BudgetOverview | None:
    """Summarize the last ``months`` monthly buckets against ``budget``.

    Days are full calendar months, matching how allowances accrue. Returns
    ``None`` when there are no monthly buckets.
    """

    recent = list(monthly)[-months:] if months > 0 else []
    if not recent:
        return None

    total = sum(stats.total for _, stats in recent)
    days = sum(days_in_month(date(y, m, 1)) for (y, m), _ in recent)
    average = total * DAYS_PER_MONTH_NORM / days

    percentage: float | None = None
    severity: Severity | None = None
    balance: float | None = None
    if budget.is_configured:
        percentage = average * 100.0 / (budget.total * DAYS_PER_MONTH_NORM)
        if percentage > OVERVIEW_OVER_PERCENT:
            severity = Severity.OVER
        elif percentage > OVERVIEW_WARNING_PERCENT:
            severity = Severity.WARNING
        else:
            severity = Severity.ON_TRACK
        balance = budget.total * days - total

    return BudgetOverview(
        months=len(recent),
        total=total,
        days=days,
        average_per_30_days=average,
        percentage=percentage,
        severity=severity,
        balance=balance,
    )


__all__ = [
    "BucketBudget",
    "BudgetOverview",
    "BudgetStatus",
    "Severity",
    "evaluate",
    "evaluate_bucket",
    "monthly_allowance",
    "overview",
]
