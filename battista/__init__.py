"""battista: personal spending statistics and budget reports.

Reads a ledger of transactions and budgets, aggregates spending per calendar
year, calendar month and rolling window, and renders a Typst report.
"""

from .budget import Severity, evaluate, evaluate_bucket, overview
from .models import Budget, Stats, StatsCollection, Transaction
from .stats import DEFAULT_WINDOWS, compute_stats

__version__ = "0.1.0"

__all__ = [
    "Budget",
    "DEFAULT_WINDOWS",
    "Severity",
    "Stats",
    "StatsCollection",
    "Transaction",
    "__version__",
    "compute_stats",
    "evaluate",
    "evaluate_bucket",
    "overview",
]
