"""Configuration module for report distribution."""

from .settings import (
    DistributionSettings,
    MailSettings,
    SenderSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DistributionSettings",
    "MailSettings",
    "SenderSettings",
    "Settings",
    "get_settings",
]
