import logging
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.utils.sentry import init_sentry, parse_sample_rate

ENV_VAR = "SENTRY_TRACES_SAMPLE_RATE"


@pytest.mark.parametrize(
    "raw, message",
    [
        ("abc", "is not a valid float"),
        ("-1", "must be between 0 and 1"),
        ("1.5", "must be between 0 and 1"),
    ],
)
def test_invalid_sample_rate_falls_back_with_warning(monkeypatch, caplog, raw, message):
    monkeypatch.setenv(ENV_VAR, raw)
    with caplog.at_level(logging.WARNING):
        assert parse_sample_rate(ENV_VAR) == 0.0
        assert parse_sample_rate(ENV_VAR, default=0.5) == 0.5
    assert message in caplog.text
    assert ENV_VAR in caplog.text


def test_valid_sample_rate_is_used(monkeypatch, caplog):
    monkeypatch.setenv(ENV_VAR, "0.25")
    with caplog.at_level(logging.WARNING):
        assert parse_sample_rate(ENV_VAR) == 0.25
    assert caplog.text == ""


def test_missing_sample_rate_uses_default(monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    assert parse_sample_rate(ENV_VAR, default=0.1) == 0.1


def test_init_sentry_skips_without_dsn(monkeypatch, caplog):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    with caplog.at_level(logging.INFO):
        assert init_sentry() is False
    assert "SENTRY_DSN not provided" in caplog.text
