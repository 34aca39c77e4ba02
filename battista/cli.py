"""CLI for the ``battista`` package.

This module exposes callable command handlers (``cmd_report``, ``cmd_add``)
returning process exit codes, and a Typer-based console interface wrapping
them. Environment variables (``BATTISTA_*``) are loaded from a local ``.env``
using ``python-dotenv`` before any command runs. Business logic lives in
``battista.api`` and related modules.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.models import ArgumentInfo, OptionInfo

from .logging_setup import configure_logging

console = Console(highlight=False)


# ---- Small module-level helpers used by CLI commands -------------------------


def _resolve_today(raw: str | None) -> date:
    """Parse ``--today`` (``dd/mm/yyyy``) or fall back to the local date."""

    from .ingest.records import parse_ledger_date

    if raw is None:
        return date.today()
    try:
        return parse_ledger_date(raw)
    except ValueError as e:
        raise ValueError(f"--today must be dd/mm/yyyy, got {raw!r}") from e


def _summary_table(analysis) -> Table:
    from .budget import evaluate_bucket

    table = Table(title="Rolling windows")
    table.add_column("Window")
    table.add_column("Transactions", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Per day", justify="right")
    table.add_column("Remaining", justify="right")

    styles = {"on-track": "green", "warning": "yellow", "over": "red"}
    for n_days in analysis.stats.windows():
        w_stats = analysis.stats.window(n_days)
        if w_stats is None:
            continue
        overall = evaluate_bucket(w_stats, analysis.budget).overall
        remaining = (
            ""
            if overall is None
            else f"[{styles[overall.severity.value]}]{overall.remaining:.2f}[/]"
        )
        table.add_row(
            f"Last {n_days} days",
            str(w_stats.transaction_count),
            f"{w_stats.total:.2f}",
            f"{w_stats.per_day:.2f}",
            remaining,
        )
    return table


def cmd_report(
    ledger_path: str,
    *,
    out: str | None = None,
    today: str | None = None,
    windows: list[int] | None = None,
) -> int:
    """Aggregate ``ledger_path`` and write its Typst report.

    Behavior
    --------
    - Loads the ledger (XML, or CSV for ``.csv`` files) and computes yearly,
      monthly and rolling-window statistics as of ``today``.
    - Writes the report next to the ledger with a ``.typ`` suffix unless
      ``out`` is given, then prints a summary of the rolling windows.
    - A ledger without transactions prints a notice and succeeds.

    Errors are written to stderr and the function returns ``1``. On success,
    returns ``0``.
    """

    import csv

    from . import __version__
    from .api import analyze_ledger
    from .report import default_report_path, write_report

    try:
        ref_date = _resolve_today(today)
        analysis = analyze_ledger(ledger_path, today=ref_date, windows=windows or None)
    except FileNotFoundError:
        print(f"Error: File not found: {ledger_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {ledger_path}", file=sys.stderr)
        return 1
    except csv.Error as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # LedgerError, StatsError and bad options are all ValueErrors.
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not analysis.ledger.records:
        console.print("Provided file has no transactions. Nothing to report.")
        return 0

    target = Path(out) if out else default_report_path(ledger_path)
    try:
        write_report(
            target,
            analysis.stats,
            analysis.budget,
            source=str(ledger_path),
            today=ref_date,
            version=__version__,
        )
    except OSError as e:
        print(f"Error: Failed to write report '{target}': {e}", file=sys.stderr)
        return 1

    console.print(_summary_table(analysis))
    console.print(f"Detailed report saved in [cyan]{escape(str(target))}[/cyan].")
    return 0


def cmd_add(ledger_path: str, *, today: str | None = None) -> int:
    """Interactively append transactions to ``ledger_path``, then report.

    The ledger is copied to ``<ledger>.bak`` before anything is asked.
    Interrupting a prompt leaves the ledger unchanged and returns ``1``.
    """

    import csv

    from .entry import run_add_flow

    try:
        ref_date = _resolve_today(today)
        _updated, added = run_add_flow(ledger_path, today=ref_date)
    except (KeyboardInterrupt, EOFError):
        print("Error: Entry aborted; ledger left unchanged.", file=sys.stderr)
        return 1
    except FileNotFoundError:
        print(f"Error: File not found: {ledger_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {ledger_path}", file=sys.stderr)
        return 1
    except csv.Error as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    console.print(f"Transaction addition completed ({len(added)} added).")
    return cmd_report(ledger_path, today=today)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Spending statistics and budget reports from a battista ledger. "
        "Loads BATTISTA_* settings from a local .env before running."
    ),
)

# Module-level argument/option objects to satisfy ruff B008 (no calls in
# parameter defaults).
LEDGER_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to the ledger file (XML, or CSV with a .csv suffix)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
TODAY_OPTION: OptionInfo = typer.Option(
    "--today", help="Reference date as dd/mm/yyyy (defaults to the local date)."
)


@app.command("report")
def report_cmd(
    ledger: Annotated[Path, LEDGER_ARGUMENT],
    *,
    out: Path | None = typer.Option(
        None, "--out", "-o", help="Report path (defaults to the ledger path with .typ)."
    ),
    today: Annotated[str | None, TODAY_OPTION] = None,
    window: list[int] | None = typer.Option(
        None, "--window", "-w", help="Rolling window size in days; repeatable."
    ),
) -> None:
    """Compute statistics and write the Typst report."""

    code = cmd_report(
        str(ledger),
        out=str(out) if out else None,
        today=today,
        windows=list(window) if window else None,
    )
    raise typer.Exit(code)


@app.command("add")
def add_cmd(
    ledger: Annotated[Path, LEDGER_ARGUMENT],
    *,
    today: Annotated[str | None, TODAY_OPTION] = None,
) -> None:
    """Add transactions interactively, then write the report."""

    raise typer.Exit(cmd_add(str(ledger), today=today))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override BATTISTA_LOG_LEVEL (e.g. DEBUG, INFO)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
