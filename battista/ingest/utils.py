"""Ingest utilities shared by CLI commands and the entry flow.

Exposes a single helper that loads a ledger file, picking the adapter from the
file suffix: ``.csv`` files use the CSV adapter, everything else is read as an
XML ledger.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from .records import Ledger

_logger = get_logger("battista.ingest")


def is_csv_path(path: str | PathLike[str]) -> bool:
    return Path(path).suffix.lower() == ".csv"


def load_ledger(path: str | PathLike[str]) -> Ledger:
    """Read and validate the ledger at ``path``.

    Raises ``FileNotFoundError``/``PermissionError`` from the filesystem,
    ``csv.Error`` for CSV header problems and
    :class:`~battista.ingest.records.LedgerError` for invalid content.
    """

    from .adapters.csv_ledger import read_csv_ledger
    from .adapters.xml_ledger import read_xml_ledger

    p = Path(path)
    with p.open(encoding="utf-8", newline="") as f:
        ledger = read_csv_ledger(f) if is_csv_path(p) else read_xml_ledger(f)

    _logger.info(
        "Loaded %d transaction(s) and %d budget line(s) from %s",
        len(ledger.records),
        len(ledger.budgets),
        p,
    )
    return ledger


__all__ = ["is_csv_path", "load_ledger"]
