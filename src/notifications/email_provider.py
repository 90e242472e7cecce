"""
Email Provider Abstraction

Unified transport boundary for report distribution emails.

Supports:
- SMTP (any mail relay reachable from the host)
- SendGrid (HTTP API)
- Null provider (dry runs, logs only)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from config.settings import MailSettings

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    """Email delivery status."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class Envelope:
    """
    A fully composed email handed to a transport.

    ``to``, ``cc`` and ``bcc`` hold already quoted addresses. ``attachment``
    is a file path that is only opened by the transport at send time.
    """
    from_address: str
    subject: str
    body: str
    to: List[str] = field(default_factory=list)
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    from_name: Optional[str] = None
    attachment: Optional[Path] = None

    @property
    def recipients(self) -> List[str]:
        """Every envelope recipient: To, then Cc, then Bcc."""
        return [*self.to, *self.cc, *self.bcc]

    @property
    def has_attachment(self) -> bool:
        return self.attachment is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (body excluded)."""
        return {
            "from": self.from_address,
            "from_name": self.from_name,
            "to": list(self.to),
            "cc": list(self.cc),
            "bcc": list(self.bcc),
            "subject": self.subject,
            "attachment": str(self.attachment) if self.attachment else None,
        }


@dataclass
class DeliveryResult:
    """Result of an email delivery attempt."""
    success: bool
    status: DeliveryStatus
    message_id: Optional[str] = None
    provider: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    raw_response: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "status": self.status.value,
            "message_id": self.message_id,
            "provider": self.provider,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "timestamp": self.timestamp.isoformat(),
        }


class EmailProvider(ABC):
    """Abstract base class for email transports."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name for logging."""
        pass

    @abstractmethod
    def send(self, envelope: Envelope) -> DeliveryResult:
        """
        Send a composed envelope.

        Transports report delivery problems through the returned result
        instead of raising.

        Args:
            envelope: Envelope to send

        Returns:
            DeliveryResult with success/failure status
        """
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if provider is properly configured."""
        pass

    def failure(self, error_message: str, error_code: str, **extra: Any) -> DeliveryResult:
        """Build a failed DeliveryResult for this provider."""
        return DeliveryResult(
            success=False,
            status=DeliveryStatus.FAILED,
            provider=self.provider_name,
            error_message=error_message,
            error_code=error_code,
            **extra,
        )


def read_attachment(envelope: Envelope) -> Optional[bytes]:
    """
    Read the envelope attachment, if any.

    Raises:
        OSError: If the attachment cannot be read
    """
    if envelope.attachment is None:
        return None
    return Path(envelope.attachment).read_bytes()


class NullEmailProvider(EmailProvider):
    """
    Null provider for dry runs and testing.

    Logs emails but doesn't send them.
    """

    @property
    def provider_name(self) -> str:
        return "null"

    def send(self, envelope: Envelope) -> DeliveryResult:
        """Log email without sending."""
        logger.info(
            f"[NULL PROVIDER] Would send '{envelope.subject}' to "
            f"{len(envelope.recipients)} recipient(s)"
            + (f" with attachment {envelope.attachment}" if envelope.attachment else "")
        )
        return DeliveryResult(
            success=True,
            status=DeliveryStatus.SENT,
            message_id=f"null-{datetime.now(timezone.utc).timestamp()}",
            provider=self.provider_name,
        )

    def is_configured(self) -> bool:
        """Always configured (it's a null provider)."""
        return True


def create_email_provider(settings: Optional["MailSettings"] = None) -> EmailProvider:
    """
    Create the email provider described by mail settings.

    Provider selection for ``provider="auto"``:
    1. MAIL_SENDGRID_API_KEY → SendGrid
    2. MAIL_SMTP_HOST → SMTP
    3. None → Null provider (logging only)

    Args:
        settings: Mail settings (loaded from the environment when omitted)

    Returns:
        EmailProvider instance
    """
    if settings is None:
        from config.settings import MailSettings
        settings = MailSettings()

    provider = settings.provider
    if provider == "auto":
        if settings.sendgrid_api_key:
            provider = "sendgrid"
        elif settings.smtp_host:
            provider = "smtp"
        else:
            provider = "null"

    if provider == "sendgrid":
        from .sendgrid_provider import SendGridProvider
        logger.info("Email provider: SendGrid")
        return SendGridProvider(api_key=settings.sendgrid_api_key)

    if provider == "smtp":
        from .smtp_provider import SMTPProvider
        logger.info("Email provider: SMTP")
        return SMTPProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
        )

    logger.warning(
        "No email provider configured. Emails will be logged but not sent. "
        "Set MAIL_SENDGRID_API_KEY or MAIL_SMTP_HOST to enable email delivery."
    )
    return NullEmailProvider()
