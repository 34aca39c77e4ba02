from datetime import date

import pytest

from battista.budget import (
    Severity,
    evaluate,
    evaluate_bucket,
    monthly_allowance,
    overview,
)
from battista.models import Budget, Stats


def _stats(total: float, by_category, period_days: int) -> Stats:
    return Stats(
        per_day=total / period_days,
        total=total,
        by_category=tuple(by_category),
        by_payment_method=(),
        by_note=(),
        average_transaction=total,
        transaction_count=1,
        period_days=period_days,
    )


@pytest.mark.parametrize(
    ("total", "severity"),
    [
        (0.0, Severity.ON_TRACK),
        (70.0, Severity.ON_TRACK),  # 30 of 100 remaining
        (80.0, Severity.WARNING),  # 20 of 100 remaining
        (100.0, Severity.WARNING),  # nothing left, not over
        (100.01, Severity.OVER),
    ],
)
def test_evaluate_severity_thresholds(total, severity):
    status = evaluate(total, 10.0, 10)
    assert status is not None
    assert status.allowance == pytest.approx(100.0)
    assert status.remaining == pytest.approx(100.0 - total)
    assert status.severity is severity


def test_evaluate_without_allowance_is_none():
    assert evaluate(50.0, 0.0, 30) is None
    assert evaluate(50.0, 10.0, 0) is None


def test_evaluate_bucket_per_category():
    budget = Budget.from_allowances({"Food": 10.0, "Rent": 20.0})
    stats = _stats(450.0, [("Rent", 400.0), ("Food", 40.0), ("Misc", 10.0)], 30)

    result = evaluate_bucket(stats, budget)

    assert result.overall is not None
    assert result.overall.allowance == pytest.approx(900.0)
    assert result.overall.severity is Severity.ON_TRACK
    rent = result.for_category("Rent")
    assert rent is not None and rent.severity is Severity.ON_TRACK
    food = result.for_category("Food")
    assert food is not None and food.severity is Severity.ON_TRACK
    # Unbudgeted categories carry no status.
    assert result.for_category("Misc") is None


def test_budget_total_defaults_to_sum_of_categories():
    budget = Budget.from_allowances({"Food": 10.0, "Rent": 20.0})
    assert budget.total == pytest.approx(30.0)
    explicit = Budget.from_allowances({"Food": 10.0}, total=50.0)
    assert explicit.total == pytest.approx(50.0)
    assert not Budget().is_configured


def test_monthly_allowance_prorates_current_month():
    budget = Budget.from_allowances({}, total=10.0)
    today = date(2024, 2, 15)
    assert monthly_allowance(2024, 2, budget, today=today) == pytest.approx(150.0)
    assert monthly_allowance(2024, 1, budget, today=today) == pytest.approx(310.0)


def test_overview_normalizes_to_thirty_days():
    budget = Budget.from_allowances({}, total=10.0)
    monthly = [
        ((2024, 1), _stats(310.0, [], 31)),
        ((2024, 2), _stats(145.0, [], 29)),
    ]

    result = overview(monthly, budget)

    assert result is not None
    assert result.months == 2
    assert result.days == 60
    assert result.average_per_30_days == pytest.approx(455.0 * 30 / 60)
    assert result.percentage == pytest.approx(75.83, rel=1e-3)
    assert result.severity is Severity.WARNING
    assert result.balance == pytest.approx(600.0 - 455.0)


def test_overview_only_uses_recent_months():
    budget = Budget.from_allowances({}, total=1.0)
    monthly = [((2023, m), _stats(100.0, [], 30)) for m in range(1, 13)]
    monthly.append(((2024, 1), _stats(1000.0, [], 31)))

    result = overview(monthly, budget, months=1)

    assert result is not None
    assert result.months == 1
    assert result.total == pytest.approx(1000.0)
    assert result.severity is Severity.OVER


def test_overview_without_budget_or_data():
    assert overview([], Budget()) is None
    result = overview([((2024, 1), _stats(31.0, [], 31))], Budget())
    assert result is not None
    assert result.percentage is None
    assert result.severity is None
    assert result.balance is None
