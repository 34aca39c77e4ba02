"""Logging for battista.

Everything logs under the ``"battista"`` logger: ingest reports skipped
elements, the stats engine warns when a period is clamped, and the writer and
report modules note the files they touch. The ``battista`` CLI calls
:func:`configure_logging` once from its root callback (``--log-level``, or
``BATTISTA_LOG_LEVEL`` from the environment or a ``.env`` file). Used as a
library, battista stays silent until the host configures logging.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "battista"
_CONFIGURED = False

LOG_LEVEL_ENV = "BATTISTA_LOG_LEVEL"


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        # "10" and "debug" both work.
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.INFO
    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send battista's log records to ``stream`` (stderr by default).

    Later calls are no-ops until :func:`reset_logging`. Records stop at the
    ``battista`` logger so a host's root handlers do not print them twice.

    Parameters
    ----------
    level:
        ``--log-level`` value; a level name or number. ``None`` falls back to
        ``BATTISTA_LOG_LEVEL``, then ``INFO``. Unknown names mean ``INFO``.
    fmt:
        Record format; timestamp, logger, level and message by default.
    stream:
        Destination; resolved at call time so test capture sees it.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # The NullHandler from get_logger is no longer needed.
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Undo :func:`configure_logging` (used by tests and re-entrant CLIs)."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Logger for a battista module (``"battista.stats"`` and so on)."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "LOG_LEVEL_ENV"]
