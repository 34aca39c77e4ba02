from datetime import date

import pytest

from battista.accumulator import (
    Accumulator,
    EmptyBucketError,
    InvalidPeriodError,
    StatsError,
)
from battista.models import Transaction


def _tx(amount: int, category: str = "Food", pm: str = "Card", note: str = "") -> Transaction:
    return Transaction(
        amount=amount, date=date(2024, 2, 1), category=category, payment_method=pm, note=note
    )


def test_update_tracks_totals_and_breakdowns():
    acc = Accumulator()
    acc.update(_tx(1250, "Food", "Card", "Lunch"))
    acc.update(_tx(500, "Transport", "Cash"))
    acc.update(_tx(250, "Food", "Cash", "Lunch"))

    assert acc.total == 2000
    assert acc.count == 3
    assert acc.by_category == {"Food": 1500, "Transport": 500}
    assert acc.by_payment_method == {"Card": 1250, "Cash": 750}
    assert acc.by_note == {"Lunch": 1500, "": 500}


def test_calc_averages_and_snapshot():
    acc = Accumulator()
    acc.update(_tx(1000))
    acc.update(_tx(2000, "Rent"))
    acc.calc_averages(10)

    stats = acc.into_stats()
    assert stats.total == 30.0
    assert stats.per_day == pytest.approx(3.0)
    assert stats.average_transaction == pytest.approx(15.0)
    assert stats.transaction_count == 2
    assert stats.period_days == 10
    # Descending by amount.
    assert stats.by_category == (("Rent", 20.0), ("Food", 10.0))


def test_breakdown_ties_keep_insertion_order():
    acc = Accumulator()
    acc.update(_tx(100, "B"))
    acc.update(_tx(100, "A"))
    acc.update(_tx(300, "C"))
    acc.calc_averages(1)
    assert [k for k, _ in acc.into_stats().by_category] == ["C", "B", "A"]


@pytest.mark.parametrize("days", [0, -3])
def test_calc_averages_rejects_non_positive_period(days):
    acc = Accumulator()
    acc.update(_tx(100))
    with pytest.raises(InvalidPeriodError):
        acc.calc_averages(days)


def test_calc_averages_rejects_empty_bucket():
    with pytest.raises(EmptyBucketError):
        Accumulator().calc_averages(5)


def test_into_stats_requires_finalization():
    acc = Accumulator()
    acc.update(_tx(100))
    with pytest.raises(StatsError):
        acc.into_stats()


def test_merge_matches_sequential_updates():
    txs = [_tx(100, "A", "x", "n1"), _tx(250, "B", "y"), _tx(-50, "A", "y", "n1")]

    whole = Accumulator()
    for tx in txs:
        whole.update(tx)

    left, right = Accumulator(), Accumulator()
    left.update(txs[0])
    right.update(txs[1])
    right.update(txs[2])
    left.merge(right)

    assert left.total == whole.total
    assert left.count == whole.count
    assert left.by_category == whole.by_category
    assert left.by_payment_method == whole.by_payment_method
    assert left.by_note == whole.by_note
