"""Raw ledger records and their validation.

Ledger files store amounts and dates as text. The records below keep that
text verbatim (so rewriting a ledger does not reformat what the user typed)
while validating on construction that it parses; conversion to the engine's
:class:`~battista.models.Transaction` and :class:`~battista.models.Budget`
happens through :meth:`TransactionRecord.to_transaction` and
:func:`build_budget`.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models import Budget, Transaction
from ..money import parse_amount_cents

DATE_FORMAT = "%d/%m/%Y"


class LedgerError(ValueError):
    """A ledger file or one of its records is invalid."""


def parse_ledger_date(raw: str) -> date:
    return datetime.strptime(raw.strip(), DATE_FORMAT).date()


def format_ledger_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def _finite_number(v: str, what: str) -> Decimal:
    try:
        value = Decimal(v)
    except InvalidOperation as exc:
        raise ValueError(f"{what} must be a number, got {v!r}") from exc
    # Allowances are computed in floats, so the float must be finite too.
    if not value.is_finite() or not math.isfinite(float(value)):
        raise ValueError(f"{what} must be a finite number, got {v!r}")
    return value


def _non_empty(v: str) -> str:
    if not v:
        raise ValueError("must be non-empty")
    return v


class TransactionRecord(BaseModel):
    """One ``<transaction>`` element (or CSV row), text preserved."""

    model_config = ConfigDict(
        strict=True,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    amount: str
    category: str
    date: str
    payment_method: str = Field(alias="payment-method")
    note: str = ""

    @field_validator("category", "payment_method")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _non_empty(v)

    @field_validator("amount")
    @classmethod
    def _amount_parses(cls, v: str) -> str:
        parse_amount_cents(v)
        return v

    @field_validator("date")
    @classmethod
    def _date_parses(cls, v: str) -> str:
        try:
            parse_ledger_date(v)
        except ValueError as exc:
            raise ValueError(f"date must be dd/mm/yyyy, got {v!r}") from exc
        return v

    @property
    def cents(self) -> int:
        return parse_amount_cents(self.amount)

    @property
    def parsed_date(self) -> date:
        return parse_ledger_date(self.date)

    def to_transaction(self) -> Transaction:
        return Transaction(
            amount=self.cents,
            date=self.parsed_date,
            category=self.category,
            payment_method=self.payment_method,
            note=self.note,
        )

    def __str__(self) -> str:
        return (
            f"[TRANSACTION; {self.date}; {self.category}; {self.amount}; "
            f"{self.payment_method}; `{self.note}`]"
        )


class BudgetRecord(BaseModel):
    """One ``<budget>`` element: ``amount`` spread over ``duration`` days."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True, str_strip_whitespace=True)

    category: str | None = None
    amount: str
    duration: str

    @field_validator("category")
    @classmethod
    def _blank_category_is_overall(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("amount")
    @classmethod
    def _amount_is_number(cls, v: str) -> str:
        if _finite_number(v, "amount") < 0:
            raise ValueError("amount must not be negative")
        return v

    @field_validator("duration")
    @classmethod
    def _duration_is_positive(cls, v: str) -> str:
        if float(_finite_number(v, "duration")) <= 0:
            raise ValueError("duration must be positive")
        return v

    @property
    def daily_allowance(self) -> float:
        return float(self.amount) / float(self.duration)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def make_transaction_record(attrs: Mapping[str, Any], *, position: int) -> TransactionRecord:
    try:
        return TransactionRecord.model_validate(dict(attrs))
    except ValidationError as exc:
        raise LedgerError(f"invalid transaction #{position + 1}: {_describe(exc)}") from exc


def make_budget_record(attrs: Mapping[str, Any], *, position: int) -> BudgetRecord:
    try:
        return BudgetRecord.model_validate(dict(attrs))
    except ValidationError as exc:
        raise LedgerError(f"invalid budget #{position + 1}: {_describe(exc)}") from exc


def build_budget(records: Iterable[BudgetRecord]) -> Budget:
    """Combine budget records into daily allowances.

    Each category may be budgeted once and at most one overall budget may be
    declared; without one the overall allowance is the sum of the categories.
    """

    per_category: dict[str, float] = {}
    total: float | None = None
    for rec in records:
        if rec.category is None:
            if total is not None:
                raise LedgerError("the overall budget is declared more than once")
            total = rec.daily_allowance
            continue
        if rec.category in per_category:
            raise LedgerError(f"budget for category {rec.category!r} is declared more than once")
        per_category[rec.category] = rec.daily_allowance
    return Budget.from_allowances(per_category, total)


@dataclass(frozen=True, slots=True)
class Ledger:
    """Everything read from one ledger file."""

    budgets: tuple[BudgetRecord, ...] = ()
    records: tuple[TransactionRecord, ...] = field(default=())

    @property
    def transactions(self) -> list[Transaction]:
        return [rec.to_transaction() for rec in self.records]

    @property
    def budget(self) -> Budget:
        return build_budget(self.budgets)

    def with_records(self, extra: Iterable[TransactionRecord]) -> Ledger:
        return Ledger(budgets=self.budgets, records=self.records + tuple(extra))


__all__ = [
    "BudgetRecord",
    "DATE_FORMAT",
    "Ledger",
    "LedgerError",
    "TransactionRecord",
    "build_budget",
    "format_ledger_date",
    "make_budget_record",
    "make_transaction_record",
    "parse_ledger_date",
]
