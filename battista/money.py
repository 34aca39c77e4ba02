"""Fixed-point money helpers.

Amounts are carried as signed integer cents everywhere in the engine. The only
place a float appears is :func:`to_major`, used when a finalized bucket is
turned into a display snapshot.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

CENTS_PER_UNIT = 100


class AmountError(ValueError):
    """Raised when an amount string cannot be represented as whole cents."""


def parse_amount_cents(raw: str | None) -> int:
    """Parse a human-entered amount into signed integer cents.

    Accepts an optional leading ``+``/``-`` and up to two fractional digits
    (``"12"``, ``"12.5"``, ``"-3.05"``). Anything finer than a cent is
    rejected rather than rounded.
    """

    if raw is None:
        raise AmountError("amount is required")
    s = raw.strip()
    if not s:
        raise AmountError("amount is empty")

    try:
        d = Decimal(s)
    except InvalidOperation as exc:
        raise AmountError(f"invalid amount: {raw!r}") from exc
    if not d.is_finite():
        raise AmountError(f"invalid amount: {raw!r}")

    digits, exponent = d.as_tuple()[1:]
    if isinstance(exponent, int) and exponent < -2:
        raise AmountError(
            f"could not parse amount {s!r} (cents seem to have too many digits)"
        )
    # Wide enough that scaling to cents never rounds.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(digits) + 2)
        return int(d * CENTS_PER_UNIT)


def to_major(cents: int) -> float:
    return cents / CENTS_PER_UNIT


def format_cents(cents: int) -> str:
    """Render cents as an exact two-decimal string (``-1205`` -> ``"-12.05"``)."""

    sign = "-" if cents < 0 else ""
    units, rem = divmod(abs(cents), CENTS_PER_UNIT)
    return f"{sign}{units}.{rem:02d}"


__all__ = ["AmountError", "CENTS_PER_UNIT", "parse_amount_cents", "to_major", "format_cents"]
