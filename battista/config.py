"""Environment-driven settings.

Values come from the process environment (the CLI loads a local ``.env``
first without overriding existing variables). Unparseable values fall back to
the defaults rather than failing, matching how the other env knobs behave.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .logging_setup import get_logger
from .stats import DEFAULT_WINDOWS

WINDOWS_ENV = "BATTISTA_WINDOWS"
MIN_PERIOD_DAYS_ENV = "BATTISTA_MIN_PERIOD_DAYS"
CONCURRENCY_ENV = "BATTISTA_CONCURRENCY"

MAX_CONCURRENCY = 32

_logger = get_logger("battista.config")


@dataclass(frozen=True, slots=True)
class Settings:
    windows: tuple[int, ...] = DEFAULT_WINDOWS
    min_period_days: int = 1
    concurrency: int = 1


def _parse_windows(raw: str | None) -> tuple[int, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_WINDOWS
    try:
        values = tuple(sorted({int(part) for part in raw.split(",") if part.strip()}))
    except ValueError:
        _logger.warning("Ignoring invalid %s=%r", WINDOWS_ENV, raw)
        return DEFAULT_WINDOWS
    if not values or any(v <= 0 for v in values):
        _logger.warning("Ignoring invalid %s=%r", WINDOWS_ENV, raw)
        return DEFAULT_WINDOWS
    return values


def _parse_positive_int(raw: str | None, *, default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("Ignoring invalid %s=%r", name, raw)
        return default
    if value <= 0:
        _logger.warning("Ignoring invalid %s=%r", name, raw)
        return default
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Resolve :class:`Settings` from ``env`` (defaults to ``os.environ``)."""

    source = os.environ if env is None else env
    concurrency = _parse_positive_int(
        source.get(CONCURRENCY_ENV), default=1, name=CONCURRENCY_ENV
    )
    return Settings(
        windows=_parse_windows(source.get(WINDOWS_ENV)),
        min_period_days=_parse_positive_int(
            source.get(MIN_PERIOD_DAYS_ENV), default=1, name=MIN_PERIOD_DAYS_ENV
        ),
        concurrency=min(concurrency, MAX_CONCURRENCY),
    )


__all__ = [
    "CONCURRENCY_ENV",
    "MIN_PERIOD_DAYS_ENV",
    "Settings",
    "WINDOWS_ENV",
    "load_settings",
]
