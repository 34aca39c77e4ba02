"""Per-bucket running sums.

An :class:`Accumulator` is created the first time a transaction falls into a
bucket, receives one :meth:`~Accumulator.update` per matching transaction,
is finalized once with :meth:`~Accumulator.calc_averages`, and is then turned
into an immutable :class:`~battista.models.Stats` with
:meth:`~Accumulator.into_stats`.

All sums are integer cents, so the order in which transactions (or partial
accumulators, see :meth:`~Accumulator.merge`) are folded in never changes the
totals.
"""

from __future__ import annotations

from collections.abc import Mapping

from .models import Breakdown, Stats, Transaction
from .money import to_major


class StatsError(ValueError):
    """Invariant violation while finalizing a bucket."""


class InvalidPeriodError(StatsError):
    """A bucket was finalized with a non-positive day count."""


class EmptyBucketError(StatsError):
    """A bucket was finalized (or snapshotted) without any transactions."""


def _add(target: dict[str, int], key: str, value: int) -> None:
    target[key] = target.get(key, 0) + value


def _sorted_breakdown(subtotals: Mapping[str, int]) -> Breakdown:
    # sorted() is stable with reverse=True, so ties keep insertion order.
    items = [(key, to_major(value)) for key, value in subtotals.items()]
    return tuple(sorted(items, key=lambda kv: kv[1], reverse=True))


class Accumulator:
    """Mutable running sums for one bucket."""

    __slots__ = (
        "total",
        "count",
        "by_category",
        "by_payment_method",
        "by_note",
        "per_day",
        "average_transaction",
        "period_days",
    )

    def __init__(self) -> None:
        self.total: int = 0
        self.count: int = 0
        self.by_category: dict[str, int] = {}
        self.by_payment_method: dict[str, int] = {}
        self.by_note: dict[str, int] = {}
        self.per_day: float | None = None
        self.average_transaction: float | None = None
        self.period_days: int | None = None

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Accumulator(total={self.total}, count={self.count})"

    def update(self, transaction: Transaction) -> None:
        value = transaction.amount
        self.total += value
        _add(self.by_category, transaction.category, value)
        _add(self.by_payment_method, transaction.payment_method, value)
        _add(self.by_note, transaction.note, value)
        self.count += 1

    def merge(self, other: Accumulator) -> None:
        """Fold another (unfinalized) accumulator's sums into this one."""

        self.total += other.total
        self.count += other.count
        for key, value in other.by_category.items():
            _add(self.by_category, key, value)
        for key, value in other.by_payment_method.items():
            _add(self.by_payment_method, key, value)
        for key, value in other.by_note.items():
            _add(self.by_note, key, value)

    def calc_averages(self, period_days: int) -> None:
        """Finalize the bucket for a period covering ``period_days`` days.

        Both the day count and the transaction count must be positive; a
        violation is a programming error in the caller and aborts the
        aggregation instead of producing ``inf``/``nan``.
        """

        if period_days <= 0:
            raise InvalidPeriodError(f"period must cover at least one day, got {period_days}")
        if self.count == 0:
            raise EmptyBucketError("cannot average a bucket without transactions")
        total = to_major(self.total)
        self.per_day = total / period_days
        self.average_transaction = total / self.count
        self.period_days = period_days

    def into_stats(self) -> Stats:
        if self.per_day is None or self.average_transaction is None or self.period_days is None:
            raise EmptyBucketError("calc_averages() must run before into_stats()")
        return Stats(
            per_day=self.per_day,
            total=to_major(self.total),
            by_category=_sorted_breakdown(self.by_category),
            by_payment_method=_sorted_breakdown(self.by_payment_method),
            by_note=_sorted_breakdown(self.by_note),
            average_transaction=self.average_transaction,
            transaction_count=self.count,
            period_days=self.period_days,
        )


__all__ = [
    "Accumulator",
    "EmptyBucketError",
    "InvalidPeriodError",
    "StatsError",
]
