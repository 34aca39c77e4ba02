import pytest

from battista.money import AmountError, format_cents, parse_amount_cents, to_major


@pytest.mark.parametrize(
    ("raw", "cents"),
    [
        ("12", 1200),
        ("12.5", 1250),
        ("12.05", 1205),
        (" 7.30 ", 730),
        ("-3.05", -305),
        ("+0.99", 99),
        ("0", 0),
    ],
)
def test_parse_amount_cents_accepts_up_to_two_decimals(raw, cents):
    assert parse_amount_cents(raw) == cents


@pytest.mark.parametrize("raw", ["", "   ", "abc", "1.234", "1e-5", "NaN", "inf", None])
def test_parse_amount_cents_rejects_invalid_input(raw):
    with pytest.raises(AmountError):
        parse_amount_cents(raw)


def test_parse_amount_cents_is_exact_for_long_amounts():
    assert parse_amount_cents("1234567890123456789012345678.91") == 123456789012345678901234567891
    assert parse_amount_cents("-99999999999999999999999999999999.99") == -9999999999999999999999999999999999


def test_amount_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_amount_cents("12,50")


def test_format_cents_is_exact():
    assert format_cents(1205) == "12.05"
    assert format_cents(-1205) == "-12.05"
    assert format_cents(5) == "0.05"
    assert format_cents(0) == "0.00"


def test_to_major():
    assert to_major(1250) == 12.5
    assert to_major(-5) == -0.05
