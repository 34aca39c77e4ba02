"""Data models for ``battista``.

Everything here is immutable once built. ``Transaction`` and ``Budget`` are
produced by the ingest layer (or by callers directly); ``Stats`` and
``StatsCollection`` are produced by :func:`battista.stats.compute_stats`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

Category: TypeAlias = str
"""Categories are opaque keys; no closed vocabulary is enforced."""

Breakdown: TypeAlias = tuple[tuple[str, float], ...]
"""``(key, amount)`` pairs in major units, sorted by descending amount."""


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single validated ledger entry.

    Attributes
    ----------
    amount:
        Signed amount in cents. Spending is positive in the ledgers this tool
        reads; the engine itself does not care about the sign convention.
    date:
        Calendar date of the transaction.
    category, payment_method, note:
        Grouping keys, used verbatim (``note`` may be empty).
    """

    amount: int
    date: date
    category: Category
    payment_method: str
    note: str = ""


@dataclass(frozen=True, slots=True)
class Budget:
    """Daily allowances in major units per day.

    ``per_category`` maps a category to its allowance; ``total`` is the
    overall allowance. A zero ``total`` means no budget is configured.
    """

    per_category: Mapping[Category, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    total: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.per_category, MappingProxyType):
            object.__setattr__(self, "per_category", MappingProxyType(dict(self.per_category)))

    @classmethod
    def from_allowances(
        cls, per_category: Mapping[Category, float], total: float | None = None
    ) -> Budget:
        """Build a budget, defaulting ``total`` to the sum of the categories."""

        if total is None or total == 0.0:
            total = sum(per_category.values())
        return cls(per_category=dict(per_category), total=total)

    @property
    def is_configured(self) -> bool:
        return self.total > 0.0

    def allowance_for(self, category: Category) -> float:
        return self.per_category.get(category, 0.0)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Stats:
    """Immutable, display-ready snapshot of one finalized bucket.

    Monetary values are floats in major units. ``period_days`` is the
    denominator that produced ``per_day``.
    """

    per_day: float
    total: float
    by_category: Breakdown
    by_payment_method: Breakdown
    by_note: Breakdown
    average_transaction: float
    transaction_count: int
    period_days: int

    def category_amount(self, category: Category) -> float:
        for key, value in self.by_category:
            if key == category:
                return value
        return 0.0


@dataclass(frozen=True, slots=True)
class StatsCollection:
    """Yearly, monthly and rolling-window statistics over one transaction set.

    ``yearly`` is ordered by year, ``monthly`` chronologically; rolling
    windows are keyed by their size in days and carry no ordering (use
    :meth:`windows` for a deterministic display order).
    """

    yearly: tuple[tuple[int, Stats], ...] = ()
    monthly: tuple[tuple[tuple[int, int], Stats], ...] = ()
    last_n_days: Mapping[int, Stats] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.last_n_days, MappingProxyType):
            object.__setattr__(self, "last_n_days", MappingProxyType(dict(self.last_n_days)))

    @property
    def is_empty(self) -> bool:
        return not self.yearly and not self.monthly and not self.last_n_days

    def year(self, year: int) -> Stats | None:
        for key, stats in self.yearly:
            if key == year:
                return stats
        return None

    def month(self, year: int, month: int) -> Stats | None:
        for key, stats in self.monthly:
            if key == (year, month):
                return stats
        return None

    def window(self, days: int) -> Stats | None:
        return self.last_n_days.get(days)

    def windows(self) -> list[int]:
        return sorted(self.last_n_days)


__all__ = [
    "Breakdown",
    "Budget",
    "Category",
    "Stats",
    "StatsCollection",
    "Transaction",
]
