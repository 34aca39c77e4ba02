import io
import logging

from battista.logging_setup import LOG_LEVEL_ENV, configure_logging, get_logger


def test_unconfigured_package_logger_is_silent():
    get_logger("battista.test")
    handlers = logging.getLogger("battista").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_configure_logging_attaches_one_stream_handler():
    stream = io.StringIO()
    configure_logging("DEBUG", fmt="%(name)s %(levelname)s %(message)s", stream=stream)
    configure_logging("ERROR", stream=io.StringIO())  # second call is a no-op

    get_logger("battista.test").debug("hello %s", "there")

    pkg = logging.getLogger("battista")
    assert len(pkg.handlers) == 1
    assert pkg.level == logging.DEBUG
    assert stream.getvalue() == "battista.test DEBUG hello there\n"


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    configure_logging(stream=io.StringIO())
    assert logging.getLogger("battista").level == logging.WARNING


def test_unknown_level_name_defaults_to_info():
    configure_logging("chatty", stream=io.StringIO())
    assert logging.getLogger("battista").level == logging.INFO
