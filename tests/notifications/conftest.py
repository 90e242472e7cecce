"""
Pytest fixtures for notification tests.

Provides:
- A recording email provider
- Distribution lists
- Notification requests
"""

from typing import List, Optional

import pytest

from distribution import DistributionList
from notifications.email_provider import (
    DeliveryResult,
    DeliveryStatus,
    EmailProvider,
    Envelope,
)
from notifications.notifier import NotificationRequest, Notifier, NotifierConfig


class RecordingProvider(EmailProvider):
    """Email provider that records envelopes instead of sending them."""

    def __init__(self, result: Optional[DeliveryResult] = None, error: Optional[Exception] = None):
        self.sent: List[Envelope] = []
        self._result = result
        self._error = error

    @property
    def provider_name(self) -> str:
        return "recording"

    def is_configured(self) -> bool:
        return True

    def send(self, envelope: Envelope) -> DeliveryResult:
        self.sent.append(envelope)
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result
        return DeliveryResult(
            success=True,
            status=DeliveryStatus.SENT,
            message_id=f"rec-{len(self.sent)}",
            provider=self.provider_name,
        )


@pytest.fixture
def recording_provider():
    """Create a provider that accepts everything."""
    return RecordingProvider()


@pytest.fixture
def rejecting_provider():
    """Create a provider whose relay rejects the sender."""
    return RecordingProvider(result=DeliveryResult(
        success=False,
        status=DeliveryStatus.FAILED,
        provider="recording",
        error_message="Sender refused: 550 not allowed",
        error_code="SENDER_REFUSED",
    ))


@pytest.fixture
def raising_provider():
    """Create a provider that raises while sending."""
    return RecordingProvider(error=RuntimeError("relay exploded"))


@pytest.fixture
def sample_list():
    """One recipient per role."""
    return DistributionList.from_pairs([
        ("TO", "a@x.com"),
        ("CC", "b@x.com"),
        ("BCC", "c@x.com"),
    ])


@pytest.fixture
def sample_request():
    """A complete request without attachment."""
    return NotificationRequest(
        from_address="s@x.com",
        sender_name="S",
        subject="Hi",
        body_text="Body.",
        attachment_path=None,
    )


@pytest.fixture
def make_notifier(recording_provider):
    """Build a Notifier for a distribution list."""

    def _make(distribution_list, provider=None, **defaults):
        return Notifier(NotifierConfig(
            distribution_list=distribution_list,
            provider=provider or recording_provider,
            **defaults,
        ))

    return _make
