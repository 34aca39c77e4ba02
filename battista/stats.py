"""Bucket assembly: transactions in, :class:`StatsCollection` out.

One pass folds every transaction into its year bucket, its month bucket and
each rolling window it belongs to, tracking the earliest date seen. A second
pass finalizes every bucket with its clipped period length (see
:mod:`battista.periods`) and snapshots it.

The engine is a pure function of its arguments: ``today`` is always supplied
by the caller and nothing here reads the clock, the environment or files.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from .accumulator import Accumulator
from .logging_setup import get_logger
from .models import Stats, StatsCollection, Transaction
from .periods import in_window, month_period_days, year_period_days
from .pmap import p_map

DEFAULT_WINDOWS: tuple[int, ...] = (7, 14, 30, 365)

_logger = get_logger("battista.stats")


@dataclass(slots=True)
class _Buckets:
    """Unfinalized accumulators for one shard (or the whole input)."""

    yearly: dict[int, Accumulator] = field(default_factory=dict)
    monthly: dict[tuple[int, int], Accumulator] = field(default_factory=dict)
    last_n_days: dict[int, Accumulator] = field(default_factory=dict)
    start: date | None = None

    def merge(self, other: _Buckets) -> None:
        for target, source in (
            (self.yearly, other.yearly),
            (self.monthly, other.monthly),
            (self.last_n_days, other.last_n_days),
        ):
            for key, acc in source.items():
                target.setdefault(key, Accumulator()).merge(acc)
        if other.start is not None and (self.start is None or other.start < self.start):
            self.start = other.start


def normalize_windows(windows: Iterable[int]) -> tuple[int, ...]:
    """Validate rolling window sizes; duplicates collapse, order is ascending."""

    out: set[int] = set()
    for n in windows:
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise ValueError(f"rolling window sizes must be positive integers, got {n!r}")
        out.add(n)
    return tuple(sorted(out))


def _accumulate(
    transactions: Iterable[Transaction], *, today: date, windows: Sequence[int]
) -> _Buckets:
    buckets = _Buckets()
    for tx in transactions:
        if buckets.start is None or tx.date < buckets.start:
            buckets.start = tx.date

        year = tx.date.year
        buckets.yearly.setdefault(year, Accumulator()).update(tx)
        buckets.monthly.setdefault((year, tx.date.month), Accumulator()).update(tx)

        for n in windows:
            if in_window(tx.date, today=today, days=n):
                buckets.last_n_days.setdefault(n, Accumulator()).update(tx)
    return buckets


def _shards(items: Sequence[Transaction], n_shards: int) -> list[Sequence[Transaction]]:
    size = -(-len(items) // n_shards)
    return [items[i : i + size] for i in range(0, len(items), size)]


def _accumulate_sharded(
    transactions: Sequence[Transaction],
    *,
    today: date,
    windows: Sequence[int],
    concurrency: int,
) -> _Buckets:
    shards = _shards(transactions, concurrency)
    partials = p_map(
        shards,
        lambda shard: _accumulate(shard, today=today, windows=windows),
        concurrency=concurrency,
        thread_name_prefix="battista-shard",
    )
    # Merge in shard order so key order matches the sequential pass.
    merged = _Buckets()
    for part in partials:
        merged.merge(part)
    return merged


def compute_stats(
    transactions: Iterable[Transaction],
    *,
    today: date,
    windows: Iterable[int] = DEFAULT_WINDOWS,
    min_period_days: int | None = 1,
    concurrency: int = 1,
) -> StatsCollection:
    """Aggregate ``transactions`` into yearly, monthly and rolling-window stats.

    Parameters
    ----------
    transactions:
        Validated transactions in any order.
    today:
        Reference date. Monthly/yearly periods are clipped to end on it
        (inclusive) and rolling windows end on it.
    windows:
        Rolling window sizes in days.
    min_period_days:
        Denominator used when clipping leaves a bucket without elapsed days
        (possible only for transactions dated after ``today``). ``None``
        makes such a bucket an error instead.
    concurrency:
        Number of shards accumulated in parallel before merging. ``1`` runs
        the single-pass path; results are identical either way.

    Raises
    ------
    ValueError
        For invalid window sizes, ``min_period_days`` or ``concurrency``.
    battista.accumulator.InvalidPeriodError
        When a bucket ends up with a non-positive period and
        ``min_period_days`` is ``None``.
    """

    sizes = normalize_windows(windows)
    if min_period_days is not None and min_period_days < 1:
        raise ValueError("min_period_days must be at least 1 (or None)")
    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    items = list(transactions)
    if concurrency > 1 and len(items) > 1:
        buckets = _accumulate_sharded(items, today=today, windows=sizes, concurrency=concurrency)
    else:
        buckets = _accumulate(items, today=today, windows=sizes)

    if buckets.start is None:
        return StatsCollection()
    start = buckets.start

    yearly: list[tuple[int, Stats]] = []
    for year, acc in buckets.yearly.items():
        acc.calc_averages(
            year_period_days(year, data_start=start, today=today, min_days=min_period_days)
        )
        yearly.append((year, acc.into_stats()))
    yearly.sort(key=lambda kv: kv[0])

    monthly: list[tuple[tuple[int, int], Stats]] = []
    for (year, month), acc in buckets.monthly.items():
        acc.calc_averages(
            month_period_days(year, month, data_start=start, today=today, min_days=min_period_days)
        )
        monthly.append(((year, month), acc.into_stats()))
    monthly.sort(key=lambda kv: kv[0][0] * 12 + kv[0][1])

    last_n_days: dict[int, Stats] = {}
    for n, acc in buckets.last_n_days.items():
        acc.calc_averages(n)
        last_n_days[n] = acc.into_stats()

    _logger.debug(
        "Aggregated %d transaction(s) into %d year, %d month and %d window bucket(s)",
        len(items),
        len(yearly),
        len(monthly),
        len(last_n_days),
    )
    return StatsCollection(yearly=tuple(yearly), monthly=tuple(monthly), last_n_days=last_n_days)


__all__ = ["DEFAULT_WINDOWS", "compute_stats", "normalize_windows"]
