"""Adapter for CSV ledgers.

CSV header (exact keys expected, ``note`` optional)::

    date,amount,category,payment-method,note

Values use the same conventions as the XML ledger (``dd/mm/yyyy`` dates,
decimal amounts). Budgets cannot be expressed in CSV; a CSV ledger always
has an unconfigured budget.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from typing import TextIO

from ..records import Ledger, TransactionRecord, make_transaction_record

FIELDNAMES: tuple[str, ...] = ("date", "amount", "category", "payment-method", "note")
REQUIRED_COLUMNS: set[str] = {"date", "amount", "category", "payment-method"}


def _dict_reader(file: TextIO) -> csv.DictReader:
    reader = csv.DictReader(file)
    headers = reader.fieldnames
    if headers is None:
        raise csv.Error("CSV ledger appears to have no header row")
    normalized = {h.strip() for h in headers if h is not None}
    missing = sorted(col for col in REQUIRED_COLUMNS if col not in normalized)
    if missing:
        raise csv.Error("CSV ledger header mismatch. Missing columns: " + ", ".join(missing))
    return reader


def iter_records(file: TextIO) -> Iterator[TransactionRecord]:
    """Yield validated records in file order, skipping blank rows."""

    position = 0
    for row in _dict_reader(file):
        # DictReader puts surplus cells under a None key and fills short rows with None.
        cells = {k.strip(): (v or "") for k, v in row.items() if k is not None}
        if all(not v.strip() for v in cells.values()):
            continue
        yield make_transaction_record(cells, position=position)
        position += 1


def read_csv_ledger(file: TextIO) -> Ledger:
    return Ledger(records=tuple(iter_records(file)))


def parse_csv_ledger(text: str) -> Ledger:
    with io.StringIO(text) as f:
        return read_csv_ledger(f)


__all__ = ["FIELDNAMES", "REQUIRED_COLUMNS", "iter_records", "parse_csv_ledger", "read_csv_ledger"]
