"""Pytest configuration and fixtures for test suite."""

import os

import pytest

# Set test environment BEFORE any other imports
os.environ.setdefault("APP_ENVIRONMENT", "test")

ENV_PREFIXES = ("MAIL_", "DISTRIBUTION_", "SENDER_")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Strip mail/distribution/sender variables and reset cached settings around each test."""
    from config.settings import get_settings

    for name in list(os.environ):
        if name.startswith(ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def report_file(tmp_path):
    """An exported report ready to be attached."""
    path = tmp_path / "weekly_report.csv"
    path.write_text("region,total\nnorth,10\nsouth,12\n", encoding="utf-8")
    return path
