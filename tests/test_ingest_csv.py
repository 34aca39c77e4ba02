import csv
import textwrap
from datetime import date

import pytest

from battista.ingest import LedgerError, load_ledger
from battista.ingest.adapters.csv_ledger import parse_csv_ledger


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_parse_csv_ledger_rows_in_file_order():
    ledger = parse_csv_ledger(
        _dedent(
            """
            date,amount,category,payment-method,note
            03/02/2025,12.50,Food,Card,Lunch
            04/02/2025,7,Transport,Cash,
            ,,,,
            05/02/2025,1.05,Food,Card,"Comma, inside"
            """
        )
    )

    assert [r.date for r in ledger.records] == ["03/02/2025", "04/02/2025", "05/02/2025"]
    txs = ledger.transactions
    assert txs[0].amount == 1250
    assert txs[1].note == ""
    assert txs[2].date == date(2025, 2, 5)
    assert txs[2].note == "Comma, inside"
    # CSV ledgers carry no budget lines.
    assert ledger.budgets == ()
    assert not ledger.budget.is_configured


def test_note_column_is_optional():
    ledger = parse_csv_ledger("date,amount,category,payment-method\n01/01/2024,3,Food,Card\n")
    assert ledger.records[0].note == ""


def test_missing_columns_raise_csv_error():
    with pytest.raises(csv.Error, match="payment-method"):
        parse_csv_ledger("date,amount,category\n01/01/2024,3,Food\n")


def test_empty_file_raises_csv_error():
    with pytest.raises(csv.Error):
        parse_csv_ledger("")


def test_invalid_row_reports_its_position():
    text = "date,amount,category,payment-method\n01/01/2024,3,Food,Card\n01/01/2024,x,Food,Card\n"
    with pytest.raises(LedgerError, match="#2"):
        parse_csv_ledger(text)


def test_load_ledger_dispatches_on_suffix(tmp_path):
    path = tmp_path / "spending.CSV"
    path.write_text("date,amount,category,payment-method\n01/01/2024,3,Food,Card\n", encoding="utf-8")
    ledger = load_ledger(path)
    assert len(ledger.records) == 1
