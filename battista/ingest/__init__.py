"""Ledger ingest: file adapters and validated raw records."""

from .records import (
    BudgetRecord,
    Ledger,
    LedgerError,
    TransactionRecord,
    build_budget,
    format_ledger_date,
    parse_ledger_date,
)
from .utils import is_csv_path, load_ledger

__all__ = [
    "BudgetRecord",
    "Ledger",
    "LedgerError",
    "TransactionRecord",
    "build_budget",
    "format_ledger_date",
    "is_csv_path",
    "load_ledger",
    "parse_ledger_date",
]
