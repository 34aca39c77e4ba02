"""Interactive transaction entry.

``add_transactions`` drives the question/answer loop through a small
:class:`Prompter` protocol so the flow can be exercised without a terminal;
:class:`TerminalPrompter` is the prompt_toolkit-backed implementation used by
the CLI. ``run_add_flow`` wraps the loop with a backup of the ledger file and
an atomic rewrite.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from os import PathLike
from pathlib import Path
from typing import Protocol

from prompt_toolkit import PromptSession
from rich.console import Console

from .ingest.records import (
    Ledger,
    TransactionRecord,
    format_ledger_date,
    make_transaction_record,
)
from .logging_setup import get_logger
from .money import format_cents

_logger = get_logger("battista.entry")


class Prompter(Protocol):
    def date(self, *, default: date, today: date) -> date: ...

    def text(self, label: str, *, default: str, completions: Sequence[str]) -> str: ...

    def amount(self) -> str: ...

    def note(self) -> str: ...

    def confirm(self, message: str) -> bool: ...

    def echo(self, message: str = "") -> None: ...


class TerminalPrompter:
    """Prompter that asks on the terminal (or on ``session``'s input/output)."""

    def __init__(
        self,
        *,
        session: PromptSession | None = None,
        console: Console | None = None,
    ) -> None:
        self._session = session
        self._console = console or Console(highlight=False)

    def date(self, *, default: date, today: date) -> date:
        from .term_ui import prompt_date

        return prompt_date(default=default, today=today, session=self._session)

    def text(self, label: str, *, default: str, completions: Sequence[str]) -> str:
        from .term_ui import prompt_text

        return prompt_text(label, default=default, completions=completions, session=self._session)

    def amount(self) -> str:
        from .term_ui import prompt_amount

        return prompt_amount(session=self._session)

    def note(self) -> str:
        from .term_ui import prompt_text

        return prompt_text("Note (optional)", required=False, session=self._session)

    def confirm(self, message: str) -> bool:
        from .term_ui import prompt_yes_no

        return prompt_yes_no(message, session=self._session)

    def echo(self, message: str = "") -> None:
        self._console.print(message, markup=False)


# ----------------------------------------------------------------------------
# Defaults and context
# ----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EntryDefaults:
    date: date
    category: str
    payment_method: str


def entry_defaults(records: Sequence[TransactionRecord], *, today: date) -> EntryDefaults:
    """Defaults for the first prompt: the most recent record's values.

    With several records on the latest date the one entered last wins.
    """

    if not records:
        return EntryDefaults(date=today, category="", payment_method="")
    # ``max`` keeps the first maximum, so scan newest-entered first.
    latest = max(reversed(records), key=lambda r: r.parsed_date)
    return EntryDefaults(
        date=latest.parsed_date,
        category=latest.category,
        payment_method=latest.payment_method,
    )


def latest_day_records(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    items = list(records)
    if not items:
        return []
    last = max(r.parsed_date for r in items)
    return [r for r in items if r.parsed_date == last]


def _known_categories(ledger: Ledger) -> tuple[list[str], list[str]]:
    existing = sorted({r.category for r in ledger.records})
    budgeted = sorted({b.category for b in ledger.budgets if b.category is not None})
    return existing, budgeted


# ----------------------------------------------------------------------------
# Flow
# ----------------------------------------------------------------------------


def add_transactions(ledger: Ledger, *, today: date, prompter: Prompter) -> list[TransactionRecord]:
    """Ask for transactions until the user declines; return the new records.

    Each answer becomes the default for the next transaction. Nothing is
    written here; see :func:`run_add_flow`.
    """

    existing, budgeted = _known_categories(ledger)
    payment_methods = sorted({r.payment_method for r in ledger.records})
    defaults = entry_defaults(ledger.records, today=today)

    prompter.echo("=== Transaction Entry Mode ===")
    if existing:
        prompter.echo(f"Existing categories: {', '.join(existing)}")
    if budgeted:
        prompter.echo(f"Budget categories: {', '.join(budgeted)}")
    recent = latest_day_records(ledger.records)
    if recent:
        prompter.echo("Last transactions:")
        for rec in recent:
            prompter.echo(f" - {rec}")

    completions = sorted(set(existing) | set(budgeted))
    added: list[TransactionRecord] = []
    while True:
        prompter.echo()
        prompter.echo(f"--- Transaction #{len(added) + 1} ---")

        tx_date = prompter.date(default=defaults.date, today=today)
        category = prompter.text("Category", default=defaults.category, completions=completions)
        amount = prompter.amount()
        payment_method = prompter.text(
            "Payment method", default=defaults.payment_method, completions=payment_methods
        )
        note = prompter.note()

        record = make_transaction_record(
            {
                "amount": amount,
                "category": category,
                "date": format_ledger_date(tx_date),
                "payment_method": payment_method,
                "note": note,
            },
            position=len(ledger.records) + len(added),
        )
        added.append(record)
        prompter.echo(str(record))
        prompter.echo(f"Transaction added ({format_cents(record.cents)}).")
        _logger.debug("Added %s", record)

        defaults = EntryDefaults(date=tx_date, category=category, payment_method=payment_method)
        if category not in completions:
            completions = sorted({*completions, category})
        if payment_method not in payment_methods:
            payment_methods = sorted({*payment_methods, payment_method})

        if not prompter.confirm("Add another transaction? (Y/n) > "):
            break

    return added


def run_add_flow(
    path: str | PathLike[str],
    *,
    today: date,
    prompter: Prompter | None = None,
) -> tuple[Ledger, list[TransactionRecord]]:
    """Back up ``path``, collect new transactions and rewrite the ledger.

    Returns the updated ledger and the records that were added. Interrupting
    a prompt (Ctrl-C/Ctrl-D) propagates before anything is rewritten.
    """

    from .ingest.utils import load_ledger
    from .writer import backup_file, save_ledger

    p = Path(path)
    backup = backup_file(p)
    _logger.info("Backed up %s to %s", p, backup)

    ui = prompter or TerminalPrompter()
    ledger = load_ledger(p)
    added = add_transactions(ledger, today=today, prompter=ui)

    updated = ledger.with_records(added)
    save_ledger(p, updated)
    ui.echo(f"Saved {len(added)} transaction(s) to {p}")
    return updated, added


__all__ = [
    "EntryDefaults",
    "Prompter",
    "TerminalPrompter",
    "add_transactions",
    "entry_defaults",
    "latest_day_records",
    "run_add_flow",
]
