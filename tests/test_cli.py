from datetime import date

import pytest
from typer.testing import CliRunner

import battista.entry as entry_mod
from battista.cli import app

runner = CliRunner()


def test_report_writes_typst_next_to_ledger(sample_ledger):
    result = runner.invoke(app, ["report", str(sample_ledger), "--today", "15/02/2024"])

    assert result.exit_code == 0, result.output
    report = sample_ledger.with_suffix(".typ")
    assert report.exists()
    assert "== Last 365 days" in report.read_text(encoding="utf-8")
    assert "Rolling windows" in result.output
    assert "Last 7 days" in result.output


def test_report_custom_out_and_windows(sample_ledger, tmp_path):
    out = tmp_path / "custom.typ"
    result = runner.invoke(
        app,
        ["report", str(sample_ledger), "--today", "15/02/2024", "--out", str(out), "-w", "10"],
    )

    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert "== Last 10 days" in text
    assert "== Last 7 days" not in text


def test_report_path_with_brackets_is_printed_verbatim(sample_ledger, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app, ["report", str(sample_ledger), "--today", "15/02/2024", "--out", "[bold]r.typ"]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "[bold]r.typ").exists()
    assert "saved in [bold]r.typ." in result.output


def test_report_windows_from_dotenv(sample_ledger, tmp_path):
    (tmp_path / ".env").write_text("BATTISTA_WINDOWS=3\n", encoding="utf-8")
    result = runner.invoke(app, ["report", str(sample_ledger), "--today", "15/02/2024"])

    assert result.exit_code == 0, result.output
    assert "== Last 3 days" in sample_ledger.with_suffix(".typ").read_text(encoding="utf-8")


def test_report_missing_file(tmp_path):
    result = runner.invoke(app, ["report", str(tmp_path / "nope.xml")])
    assert result.exit_code == 1
    assert "Error: File not found" in result.output


def test_report_invalid_ledger(tmp_path):
    path = tmp_path / "bad.xml"
    path.write_text('<transaction amount="x" category="A" date="01/01/2024" payment-method="C"/>')
    result = runner.invoke(app, ["report", str(path)])
    assert result.exit_code == 1
    assert "Error: invalid transaction #1" in result.output


def test_report_invalid_today(sample_ledger):
    result = runner.invoke(app, ["report", str(sample_ledger), "--today", "2024-02-15"])
    assert result.exit_code == 1
    assert "--today must be dd/mm/yyyy" in result.output


def test_report_empty_ledger(tmp_path):
    path = tmp_path / "empty.xml"
    path.write_text('<budget amount="10" duration="1"/>\n', encoding="utf-8")
    result = runner.invoke(app, ["report", str(path)])
    assert result.exit_code == 0
    assert "no transactions" in result.output
    assert not path.with_suffix(".typ").exists()


@pytest.fixture
def scripted(monkeypatch):
    """Replace the terminal prompter with scripted answers for one transaction."""

    answers = [None, "Books", "20.00", "", "", False]
    seen: list[tuple] = []

    class _Prompter:
        def date(self, *, default, today):
            seen.append(("date", default, today))
            answers.pop(0)
            return default

        def text(self, label, *, default, completions):
            return answers.pop(0) or default

        def amount(self):
            return answers.pop(0)

        def note(self):
            return answers.pop(0)

        def confirm(self, message):
            return answers.pop(0)

        def echo(self, message=""):
            seen.append(("echo", message))

    monkeypatch.setattr(entry_mod, "TerminalPrompter", _Prompter)
    return seen


def test_add_runs_entry_flow_then_report(sample_ledger, scripted):
    result = runner.invoke(app, ["add", str(sample_ledger), "--today", "16/02/2024"])

    assert result.exit_code == 0, result.output
    assert ("date", date(2024, 2, 15), date(2024, 2, 16)) in scripted
    assert (sample_ledger.parent / "ledger.xml.bak").exists()
    assert 'category="Books"' in sample_ledger.read_text(encoding="utf-8")
    assert "1 added" in result.output
    assert sample_ledger.with_suffix(".typ").exists()


def test_add_missing_file(tmp_path, scripted):
    result = runner.invoke(app, ["add", str(tmp_path / "nope.xml")])
    assert result.exit_code == 1
    assert "Error: File not found" in result.output


def test_add_interrupted(sample_ledger, monkeypatch):
    class _Interrupting:
        def date(self, *, default, today):
            raise EOFError

        def echo(self, message=""):
            pass

    monkeypatch.setattr(entry_mod, "TerminalPrompter", _Interrupting)
    original = sample_ledger.read_text(encoding="utf-8")

    result = runner.invoke(app, ["add", str(sample_ledger)])

    assert result.exit_code == 1
    assert "Entry aborted" in result.output
    assert sample_ledger.read_text(encoding="utf-8") == original


def test_log_level_option_is_accepted(sample_ledger):
    result = runner.invoke(
        app, ["--log-level", "WARNING", "report", str(sample_ledger), "--today", "15/02/2024"]
    )
    assert result.exit_code == 0, result.output
