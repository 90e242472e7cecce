"""
Tests for application settings.

Tests:
- Defaults
- Environment overrides
- Validators
"""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from config.settings import (
    DistributionSettings,
    MailSettings,
    SenderSettings,
    get_settings,
)


class TestMailSettings:
    """Tests for mail transport settings."""

    def test_defaults(self):
        settings = MailSettings()

        assert settings.provider == "auto"
        assert settings.smtp_host is None
        assert settings.smtp_port == 587
        assert settings.smtp_use_tls is True
        assert settings.smtp_use_ssl is False
        assert settings.smtp_timeout == 30.0

    def test_environment(self, monkeypatch):
        """Test that MAIL_ variables are read."""
        monkeypatch.setenv("MAIL_PROVIDER", "SMTP")
        monkeypatch.setenv("MAIL_SMTP_HOST", "relay.example.com")
        monkeypatch.setenv("MAIL_SMTP_PORT", "2525")
        monkeypatch.setenv("MAIL_SMTP_USE_TLS", "false")

        settings = MailSettings()

        assert settings.provider == "smtp"
        assert settings.smtp_host == "relay.example.com"
        assert settings.smtp_port == 2525
        assert settings.smtp_use_tls is False

    def test_unknown_provider_rejected(self):
        with pytest.raises(PydanticValidationError):
            MailSettings(provider="pigeon")

    def test_port_range(self):
        with pytest.raises(PydanticValidationError):
            MailSettings(smtp_port=70000)


class TestDistributionSettings:
    """Tests for distribution list settings."""

    def test_defaults(self):
        settings = DistributionSettings()

        assert settings.list_path is None
        assert settings.role_column == "role"
        assert settings.address_column == "address"
        assert settings.delimiter is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DISTRIBUTION_LIST_PATH", "/data/recipients.csv")
        monkeypatch.setenv("DISTRIBUTION_ROLE_COLUMN", "kind")

        settings = DistributionSettings()

        assert settings.list_path == Path("/data/recipients.csv")
        assert settings.role_column == "kind"

    @pytest.mark.parametrize("value,expected", [("", None), ("\\t", "\t"), (";", ";")])
    def test_delimiter_values(self, value, expected):
        assert DistributionSettings(delimiter=value).delimiter == expected

    def test_multi_character_delimiter_rejected(self):
        with pytest.raises(PydanticValidationError):
            DistributionSettings(delimiter="::")


class TestSenderSettings:
    """Tests for sender defaults."""

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SENDER_FROM_ADDRESS", "reports@example.com")
        monkeypatch.setenv("SENDER_SENDER_NAME", "Reporting Team")

        settings = SenderSettings()

        assert settings.from_address == "reports@example.com"
        assert settings.sender_name == "Reporting Team"


class TestSettings:
    """Tests for the aggregate settings object."""

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_nested_sections(self, monkeypatch):
        monkeypatch.setenv("SENDER_FROM_ADDRESS", "reports@example.com")

        settings = get_settings()

        assert isinstance(settings.mail, MailSettings)
        assert settings.sender.from_address == "reports@example.com"
        assert settings.distribution.role_column == "role"
