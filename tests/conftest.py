"""Pytest configuration for test isolation.

The package logger is configured at most once per process and the settings
loader reads ``BATTISTA_*`` variables from the environment (the CLI also pulls
them from a local ``.env``). Either can leak between tests, so an autouse
fixture resets logging, clears the variables and runs every test from its own
temporary working directory.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from battista.logging_setup import reset_logging

_ENV_VARS = (
    "BATTISTA_LOG_LEVEL",
    "BATTISTA_WINDOWS",
    "BATTISTA_MIN_PERIOD_DAYS",
    "BATTISTA_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_logging()
    yield
    reset_logging()
    # ``load_dotenv`` writes straight to os.environ; monkeypatch restores any
    # pre-existing values after this.
    for name in _ENV_VARS:
        os.environ.pop(name, None)


SAMPLE_LEDGER = """\
<budget amount="900" duration="30"/>
<budget category="Food" amount="300" duration="30"/>
<budget category="Rent" amount="600" duration="30"/>
<transaction amount="12.50" category="Food" date="14/02/2024" payment-method="Card" note="Lunch">
<transaction amount="600" category="Rent" date="01/02/2024" payment-method="Bank"/>
<transaction amount="80.00" category="Food" date="20/01/2024" payment-method="Card" note="Groceries"/>
<transaction amount="5.05" category="Transport" date="15/02/2024" payment-method="Cash"/>
"""


@pytest.fixture
def sample_ledger(tmp_path: Path) -> Path:
    path = tmp_path / "ledger.xml"
    path.write_text(SAMPLE_LEDGER, encoding="utf-8")
    return path
