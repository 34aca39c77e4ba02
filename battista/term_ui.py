"""Tiny terminal UI helpers (prompt_toolkit-based).

Small, focused prompts used by the interactive entry flow, kept apart from the
flow itself so they can be tested in isolation with a pipe input. Each helper
accepts an optional ``session`` whose input/output are reused; without one a
fresh ``PromptSession`` talks to the real terminal.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.validation import ValidationError, Validator

from .ingest.records import format_ledger_date, parse_ledger_date
from .money import AmountError, parse_amount_cents

INVALID_DATE_MESSAGE = "Invalid date format. Please use dd/mm/yyyy."
INVALID_AMOUNT_MESSAGE = "Please enter a valid amount (e.g., 15.50)"


def _session(session: PromptSession | None) -> PromptSession:
    if session is None:
        return PromptSession()
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
    )


# ----------------------------------------------------------------------------
# Date input
# ----------------------------------------------------------------------------


def resolve_date_input(text: str, *, default: date, today: date) -> date | None:
    """Interpret a typed date, or return ``None`` when it is not valid.

    - empty input keeps ``default``;
    - ``today`` (any case) means ``today``;
    - ``dd/mm/yyyy`` is taken as is;
    - ``d`` is a day in the default's month and year;
    - ``d/m`` is a day and month in the default's year.
    """

    s = text.strip()
    if not s:
        return default
    if s.lower() == "today":
        return today
    parts = s.split("/")
    if not all(p.strip().isdigit() for p in parts):
        return None
    numbers = [int(p) for p in parts]
    try:
        if len(numbers) == 3:
            return parse_ledger_date(s)
        if len(numbers) == 2:
            return date(default.year, numbers[1], numbers[0])
        if len(numbers) == 1:
            return date(default.year, default.month, numbers[0])
    except ValueError:
        return None
    return None


class _DateValidator(Validator):
    def __init__(self, *, default: date, today: date) -> None:
        self._default = default
        self._today = today

    def validate(self, document) -> None:
        if resolve_date_input(document.text, default=self._default, today=self._today) is None:
            raise ValidationError(message=INVALID_DATE_MESSAGE)


def prompt_date(
    *,
    default: date,
    today: date,
    session: PromptSession | None = None,
) -> date:
    """Ask for a transaction date; Enter keeps ``default``."""

    sess = _session(session)
    text = sess.prompt(
        f"Date [{format_ledger_date(default)}] (or 'today') > ",
        validator=_DateValidator(default=default, today=today),
        validate_while_typing=False,
    )
    resolved = resolve_date_input(text, default=default, today=today)
    if resolved is None:
        raise ValueError(f"invalid date: {text!r}")
    return resolved


# ----------------------------------------------------------------------------
# Text / amount / confirmation
# ----------------------------------------------------------------------------


class _RequiredValidator(Validator):
    def validate(self, document) -> None:
        if not document.text.strip():
            raise ValidationError(message="A value is required")


def prompt_text(
    label: str,
    *,
    default: str = "",
    completions: Iterable[str] = (),
    required: bool = True,
    session: PromptSession | None = None,
) -> str:
    """Ask for a free-text value with completion over ``completions``.

    With a non-empty ``default`` an empty answer keeps it; without one an
    empty answer is rejected when ``required``.
    """

    words = sorted(set(completions))
    completer = WordCompleter(words, ignore_case=True, match_middle=True, sentence=True)
    message = f"{label} [{default}] > " if default else f"{label} > "
    validator = _RequiredValidator() if required and not default else None

    sess = _session(session)
    value = sess.prompt(
        message,
        completer=completer if words else None,
        validator=validator,
        validate_while_typing=False,
    ).strip()
    return value or default


class _AmountValidator(Validator):
    def validate(self, document) -> None:
        try:
            parse_amount_cents(document.text)
        except AmountError as exc:
            raise ValidationError(message=INVALID_AMOUNT_MESSAGE) from exc


def prompt_amount(*, message: str = "Amount > ", session: PromptSession | None = None) -> str:
    """Ask for an amount until it parses; returns the trimmed text."""

    sess = _session(session)
    return sess.prompt(message, validator=_AmountValidator(), validate_while_typing=False).strip()


def prompt_yes_no(message: str, *, session: PromptSession | None = None) -> bool:
    """Yes/no question where an empty answer means yes."""

    sess = _session(session)
    answer = sess.prompt(message).strip().lower()
    return answer == "" or answer.startswith("y")


__all__ = [
    "INVALID_AMOUNT_MESSAGE",
    "INVALID_DATE_MESSAGE",
    "prompt_amount",
    "prompt_date",
    "prompt_text",
    "prompt_yes_no",
    "resolve_date_input",
]
