"""Adapter for the XML ledger format.

A ledger is a flat sequence of elements; no single root element is required
and a leading XML declaration is allowed::

    <budget amount="900" duration="30"/>
    <budget category="Food" amount="300" duration="30"/>
    <transaction amount="12.50" category="Food" date="03/02/2025"
                 payment-method="Card" note="Lunch"/>

Elements may also sit inside a wrapper element; every ``<budget>`` and
``<transaction>`` at any depth is read, and any other tag is logged and
skipped.

Older ledgers were written with unterminated start tags
(``<transaction ...>`` with no matching end tag). Those are accepted by
rewriting them to self-closing form before parsing.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import TextIO

from ...logging_setup import get_logger
from ..records import (
    BudgetRecord,
    Ledger,
    LedgerError,
    TransactionRecord,
    make_budget_record,
    make_transaction_record,
)

SYNTHETIC_ROOT = "battista-ledger"

_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")
# Start tags of ledger elements that are not already self-closing.
_OPEN_TAG_RE = re.compile(r"<(budget|transaction)\b((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)(?<!/)>")
_CLOSE_TAG_RE = re.compile(r"</(?:budget|transaction)\s*>")

_logger = get_logger("battista.ingest.xml")


def _self_close(text: str) -> str:
    text = _CLOSE_TAG_RE.sub("", text)
    return _OPEN_TAG_RE.sub(lambda m: f"<{m.group(1)}{m.group(2)}/>", text)


def parse_xml_ledger(text: str) -> Ledger:
    """Parse ledger text into validated budget and transaction records.

    Raises
    ------
    LedgerError
        When the text is not well-formed XML or a record fails validation.
    """

    body = _self_close(_DECLARATION_RE.sub("", text, count=1))
    try:
        root = ET.fromstring(f"<{SYNTHETIC_ROOT}>{body}</{SYNTHETIC_ROOT}>")
    except ET.ParseError as exc:
        raise LedgerError(f"malformed XML ledger: {exc}") from exc

    budgets: list[BudgetRecord] = []
    records: list[TransactionRecord] = []
    for el in root.iter():
        if el is root:
            continue
        if el.tag == "budget":
            budgets.append(make_budget_record(el.attrib, position=len(budgets)))
        elif el.tag == "transaction":
            records.append(make_transaction_record(el.attrib, position=len(records)))
        else:
            _logger.warning("Unknown tag <%s> skipped", el.tag)

    return Ledger(budgets=tuple(budgets), records=tuple(records))


def read_xml_ledger(file: TextIO) -> Ledger:
    return parse_xml_ledger(file.read())


__all__ = ["parse_xml_ledger", "read_xml_ledger"]
