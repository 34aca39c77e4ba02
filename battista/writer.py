"""Ledger writers.

Rewrites a ledger after the entry flow appended records. Ordering follows the
layout users keep by hand: the overall budget first, then category budgets
by descending amount, then transactions newest first. Text values are written
exactly as they were read or typed.
"""

from __future__ import annotations

import contextlib
import csv
import io
import os
import shutil
from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from xml.sax.saxutils import quoteattr

from .ingest.adapters.csv_ledger import FIELDNAMES
from .ingest.records import BudgetRecord, Ledger, TransactionRecord
from .ingest.utils import is_csv_path
from .logging_setup import get_logger

_logger = get_logger("battista.writer")


def _budget_sort_key(rec: BudgetRecord) -> tuple[int, float]:
    return (0 if rec.category is None else 1, -float(rec.amount))


def sorted_budgets(budgets: Iterable[BudgetRecord]) -> list[BudgetRecord]:
    return sorted(budgets, key=_budget_sort_key)


def sorted_records(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    # Stable, so same-day records keep their entry order.
    return sorted(records, key=lambda r: r.parsed_date, reverse=True)


def render_xml_ledger(ledger: Ledger) -> str:
    lines: list[str] = []
    for b in sorted_budgets(ledger.budgets):
        attrs = [] if b.category is None else [f"category={quoteattr(b.category)}"]
        attrs += [f"amount={quoteattr(b.amount)}", f"duration={quoteattr(b.duration)}"]
        lines.append(f"<budget {' '.join(attrs)}/>")
    for r in sorted_records(ledger.records):
        attrs = [
            f"amount={quoteattr(r.amount)}",
            f"category={quoteattr(r.category)}",
            f"date={quoteattr(r.date)}",
            f"payment-method={quoteattr(r.payment_method)}",
        ]
        if r.note:
            attrs.append(f"note={quoteattr(r.note)}")
        lines.append(f"<transaction {' '.join(attrs)}/>")
    return "".join(line + "\n" for line in lines)


def render_csv_ledger(ledger: Ledger) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(FIELDNAMES), lineterminator="\n")
    writer.writeheader()
    for r in sorted_records(ledger.records):
        writer.writerow(
            {
                "date": r.date,
                "amount": r.amount,
                "category": r.category,
                "payment-method": r.payment_method,
                "note": r.note,
            }
        )
    if ledger.budgets:
        _logger.warning("CSV ledgers cannot store budgets; %d line(s) dropped", len(ledger.budgets))
    return buf.getvalue()


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to a sibling ``.tmp`` file, then move it over ``path``."""

    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8", newline="")
        os.replace(tmp, path)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise


def save_ledger(path: str | PathLike[str], ledger: Ledger) -> Path:
    """Write ``ledger`` to ``path`` in the format implied by its suffix."""

    p = Path(path)
    text = render_csv_ledger(ledger) if is_csv_path(p) else render_xml_ledger(ledger)
    write_text_atomic(p, text)
    _logger.info("Wrote %d transaction(s) to %s", len(ledger.records), p)
    return p


def backup_file(path: str | PathLike[str]) -> Path:
    """Copy ``path`` to ``<path>.bak`` (overwriting an older backup)."""

    p = Path(path)
    backup = p.with_name(p.name + ".bak")
    shutil.copyfile(p, backup)
    return backup


__all__ = [
    "backup_file",
    "render_csv_ledger",
    "render_xml_ledger",
    "save_ledger",
    "sorted_budgets",
    "sorted_records",
    "write_text_atomic",
]
