"""Public API for the ``battista`` package.

A stable import surface for callers that want results rather than files:
:func:`compute_stats` is re-exported from :mod:`battista.stats`, and
:func:`analyze_ledger` loads a ledger file and aggregates it in one call,
filling unset knobs from :func:`battista.config.load_settings`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from os import PathLike

from .config import Settings, load_settings
from .ingest.records import Ledger
from .models import Budget, StatsCollection
from .stats import compute_stats  # noqa: F401  (re-export)


@dataclass(frozen=True, slots=True)
class LedgerAnalysis:
    ledger: Ledger
    budget: Budget
    stats: StatsCollection


def analyze_ledger(
    path: str | PathLike[str],
    *,
    today: date,
    windows: Iterable[int] | None = None,
    min_period_days: int | None = None,
    concurrency: int | None = None,
    settings: Settings | None = None,
) -> LedgerAnalysis:
    """Load ``path`` and compute its statistics as of ``today``.

    Explicit arguments win over ``settings``; ``settings`` defaults to the
    environment. Loader errors (``FileNotFoundError``, ``csv.Error``,
    :class:`~battista.ingest.records.LedgerError`) propagate unchanged.
    """

    from .ingest.utils import load_ledger

    cfg = settings or load_settings()
    ledger = load_ledger(path)
    budget = ledger.budget
    stats = compute_stats(
        ledger.transactions,
        today=today,
        windows=cfg.windows if windows is None else windows,
        min_period_days=cfg.min_period_days if min_period_days is None else min_period_days,
        concurrency=cfg.concurrency if concurrency is None else concurrency,
    )
    return LedgerAnalysis(ledger=ledger, budget=budget, stats=stats)


__all__ = ["LedgerAnalysis", "analyze_ledger", "compute_stats"]
