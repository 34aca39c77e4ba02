import pytest

from battista.config import (
    CONCURRENCY_ENV,
    MAX_CONCURRENCY,
    MIN_PERIOD_DAYS_ENV,
    WINDOWS_ENV,
    Settings,
    load_settings,
)


def test_defaults_from_empty_environment():
    assert load_settings({}) == Settings()
    assert Settings().windows == (7, 14, 30, 365)


def test_values_are_read_from_environment():
    settings = load_settings(
        {WINDOWS_ENV: "30, 7,30", MIN_PERIOD_DAYS_ENV: "2", CONCURRENCY_ENV: "4"}
    )
    assert settings.windows == (7, 30)
    assert settings.min_period_days == 2
    assert settings.concurrency == 4


def test_concurrency_is_capped():
    assert load_settings({CONCURRENCY_ENV: "500"}).concurrency == MAX_CONCURRENCY


@pytest.mark.parametrize(
    "env",
    [
        {WINDOWS_ENV: "7,abc"},
        {WINDOWS_ENV: "0,7"},
        {MIN_PERIOD_DAYS_ENV: "-1"},
        {CONCURRENCY_ENV: "many"},
    ],
)
def test_invalid_values_fall_back_to_defaults(env, caplog):
    with caplog.at_level("WARNING", logger="battista"):
        assert load_settings(env) == Settings()
    assert any("Ignoring invalid" in r.getMessage() for r in caplog.records)


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv(WINDOWS_ENV, "90")
    assert load_settings().windows == (90,)
