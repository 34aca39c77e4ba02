"""Typst spending report.

Renders a :class:`~battista.models.StatsCollection` and its
:class:`~battista.models.Budget` into a Typst source document: a title page,
an outline, the monthly budget table, a twelve month overview with a stacked
column chart (via the ``cetz``/``cetz-plot`` packages) and one table per
rolling window. Compiling the document is left to ``typst compile``.
"""

from __future__ import annotations

from datetime import date
from os import PathLike
from pathlib import Path

from .budget import (
    DAYS_PER_MONTH_NORM,
    BudgetStatus,
    Severity,
    evaluate_bucket,
    monthly_allowance,
    overview,
)
from .logging_setup import get_logger
from .models import Budget, Stats, StatsCollection
from .writer import write_text_atomic

PROJECT_URL = "https://www.github.com/MichaelObvious/battista"

# Windows longer than this also list their biggest notes.
BIGGEST_EXPENSES_MIN_WINDOW = 31
BIGGEST_EXPENSES_LIMIT = 10
BIGGEST_EXPENSES_MIN_AMOUNT = 50.0

OVERVIEW_MONTHS = 12
SAVED_BELOW_PERCENT = 95.0

_COLORS: dict[Severity | None, str] = {
    Severity.ON_TRACK: "green",
    Severity.WARNING: "orange",
    Severity.OVER: "red",
    None: "black",
}

_TYPST_SPECIAL = set("\\#[]*_`$@<>~/")

_logger = get_logger("battista.report")


def escape_content(text: str) -> str:
    """Escape ``text`` for use inside a Typst content block (``[...]``)."""

    return "".join("\\" + ch if ch in _TYPST_SPECIAL else ch for ch in text)


def _money(value: float) -> str:
    return f"{value:.2f}"


def _status_cell(status: BudgetStatus | None) -> str:
    remaining = "" if status is None else _money(status.remaining)
    color = _COLORS[None if status is None else status.severity]
    return f"align(right, text([`{remaining}`], fill: {color}))"


# ----------------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------------


def _preamble(*, source: str, today: date, version: str) -> list[str]:
    shown = escape_content(source)
    return [
        '#import "@preview/cetz:0.3.2"',
        '#import "@preview/cetz-plot:0.1.1"',
        "",
        f"#set document(title: [Spending report from {shown} ({today.day} {today:%B %Y})])",
        '#set page(width: 320mm, height: 200mm, numbering: "1 of 1")',
        "#set text(12pt)",
        "#show heading.where(level: 3): it => pagebreak() + align(center, "
        "box(inset: (top: 2em, bottom: 0.25em), text(it, 16pt)))",
        "#show heading.where(level: 2): it => pagebreak() + align(center, "
        "box(inset: (top: 1em, bottom: 0.25em), text(it, 18pt)))",
        "#show heading.where(level: 1): it => pagebreak() + align(center, "
        "box(inset: (top: 2em, bottom: 0.5em), text(it, 24pt)))",
        '#set heading(numbering: "1.")',
        "",
        "#v(1fr)",
        f"#align(center, text([*Spending report from* {shown}], 28pt))",
        f"#align(center, text([{today:%B} {today.day}, {today.year}], 20pt))",
        "#v(1.25fr)",
        f'#align(center, link("{PROJECT_URL}", text([`battista {version}`], 16pt)))',
        "",
        "#v(3em)",
        "",
        "#pagebreak(weak: true)",
        "",
        "#outline()",
        "",
    ]


def _monthly_budget(budget: Budget) -> list[str]:
    lines = [
        "= Monthly Budget",
        "#align(center, table(columns: 3, stroke: 0pt, align: (left, right, right), ",
        "    table.hline(stroke: 1pt),",
        "[*Category*], align(left, [*Allowed amount*]), align(left, [*% of Total*]), ",
        "    table.hline(stroke: 1pt),",
    ]
    for category in sorted(budget.per_category):
        allowance = budget.per_category[category]
        share = f"{allowance / budget.total * 100.0:.0f}%" if budget.is_configured else ""
        lines.append(
            f"[{escape_content(category)}], "
            f"[`{_money(allowance * DAYS_PER_MONTH_NORM)}`], [`{share}`],"
        )
        lines.append("    table.hline(stroke: 0.5pt),")
    lines += [
        "    table.hline(stroke: 1pt),",
        f"[*Total*], [`{_money(budget.total * DAYS_PER_MONTH_NORM)}`], ",
        "    table.hline(stroke: 1pt),",
        "))",
    ]
    return lines


def _month_chart(stats: StatsCollection, budget: Budget, *, today: date) -> list[str]:
    lines = [
        "#align(center)[#cetz.canvas({",
        "import cetz.draw: *",
        "import cetz-plot: *",
        "chart.columnchart((",
    ]
    for (year, month), m_stats in stats.monthly[-OVERVIEW_MONTHS:]:
        label = f"{month:02d}/{year % 100:02d}"
        if budget.is_configured:
            allowed = monthly_allowance(year, month, budget, today=today)
            within = min(m_stats.total, allowed)
            over = max(m_stats.total - allowed, 0.0)
        else:
            within, over = m_stats.total, 0.0
        lines.append(f"([{label}], ({_money(within)}, {_money(over)})),")
    lines += [
        '), mode: "stacked", size: (auto, 7.5), '
        "bar-style: cetz.palette.new(colors: (black.lighten(85%), red.lighten(50%))), "
        "x-label: [Month], y-label: [Amount spent])",
        "})]",
    ]
    return lines


def _overview(stats: StatsCollection, budget: Budget, *, today: date) -> list[str]:
    lines = ["= 12 Month Overview", ""]
    summary = overview(stats.monthly, budget, months=OVERVIEW_MONTHS)
    if summary is None:
        lines.append("#align(center, [_No monthly data._])")
        return lines

    color = _COLORS[summary.severity]
    head = (
        f"#align(center, [#text([`{_money(summary.average_per_30_days)}`], fill: {color}) "
        "in average per 30 days"
    )
    if summary.percentage is None or summary.balance is None:
        lines.append(head + "])")
    else:
        budget_30 = _money(budget.total * DAYS_PER_MONTH_NORM)
        line = f"{head}\\ _{summary.percentage:.0f}% of_ `{budget_30}` _(budget)_\\ "
        if summary.percentage < SAVED_BELOW_PERCENT:
            line += f"#text(8pt, [You saved #text([`{_money(summary.balance)}`], fill: {color})!])])"
        elif summary.severity is Severity.OVER:
            line += f"#text(8pt, [You lost #text([`{_money(-summary.balance)}`], fill: {color})!])])"
        else:
            line += "#text(8pt, [You are on budget])])"
        lines.append(line)

    lines += ["", "#v(1em)", ""]
    lines += _month_chart(stats, budget, today=today)
    return lines


def _window_table(n_days: int, w_stats: Stats, budget: Budget) -> list[str]:
    evaluation = evaluate_bucket(w_stats, budget)
    # Category allowances are only meaningful while the overall budget holds.
    show_categories = (
        evaluation.overall is not None and evaluation.overall.severity is not Severity.OVER
    )

    lines = [
        f"== Last {n_days} days",
        "",
        "#align(center, table(columns: 4, align: left, stroke: 0pt, column-gutter: 5pt, "
        "table.hline(stroke: 1pt), [*Category*], [*Amount*], [*% of Total*], "
        "[*Allowed spending*],",
        "    table.hline(stroke: 1pt),",
    ]
    for category, amount in w_stats.by_category:
        share = f"{amount / w_stats.total * 100.0:.2f}%" if w_stats.total else "-"
        status = evaluation.for_category(category) if show_categories else None
        lines.append(
            f"    [{escape_content(category)}], align(right, [`{_money(amount)}`]), "
            f"align(right, [`{share}`]), {_status_cell(status)}, "
        )
        lines.append("    table.hline(stroke: 0.5pt),")
    lines += [
        "    table.hline(stroke: 1pt),",
        f"    [*Total*], align(right, [`{_money(w_stats.total)}`]), "
        f"align(right, [`100.00%`]), {_status_cell(evaluation.overall)}, ",
        "    table.hline(stroke: 1pt),",
        "))",
        "",
    ]

    if n_days > BIGGEST_EXPENSES_MIN_WINDOW:
        biggest = [
            (note, amount)
            for note, amount in w_stats.by_note
            if note and amount > BIGGEST_EXPENSES_MIN_AMOUNT
        ][:BIGGEST_EXPENSES_LIMIT]
        lines += [
            "#v(2em)",
            "",
            f"=== Biggest expenses (last {n_days} days)",
            "#align(center, table(columns: 3, stroke: 0pt, align: (right, left, right), ",
        ]
        for i, (note, amount) in enumerate(biggest, start=1):
            lines.append(f'[{i}.], [_"{escape_content(note)}"_], [`{_money(amount)}`], ')
        lines.append("))")
    return lines


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------


def render_report(
    stats: StatsCollection,
    budget: Budget,
    *,
    source: str,
    today: date,
    version: str,
) -> str:
    """Render the full Typst document.

    Parameters
    ----------
    stats, budget:
        Output of :func:`battista.stats.compute_stats` and the ledger budget.
    source:
        Ledger path (or any label) shown on the title page.
    today:
        Report date; also prorates the current month's allowance in the chart.
    version:
        Tool version printed on the title page.
    """

    lines = _preamble(source=source, today=today, version=version)
    lines += _monthly_budget(budget)
    lines += [""]
    lines += _overview(stats, budget, today=today)
    lines += ["", "= Data", ""]
    for n_days in stats.windows():
        w_stats = stats.window(n_days)
        if w_stats is not None:
            lines += _window_table(n_days, w_stats, budget)
    lines.append("")
    return "\n".join(lines) + "\n"


def default_report_path(ledger_path: str | PathLike[str]) -> Path:
    return Path(ledger_path).with_suffix(".typ")


def write_report(
    path: str | PathLike[str],
    stats: StatsCollection,
    budget: Budget,
    *,
    source: str,
    today: date,
    version: str,
) -> Path:
    """Render the report and write it atomically to ``path``."""

    p = Path(path)
    text = render_report(stats, budget, source=source, today=today, version=version)
    write_text_atomic(p, text)
    _logger.info("Wrote report to %s", p)
    return p


__all__ = [
    "default_report_path",
    "escape_content",
    "render_report",
    "write_report",
]
