"""
Report Notification Delivery

Composes report emails for a distribution list and hands them to a mail
transport.

Provides:
- Multi-provider email delivery (SMTP, SendGrid, null/dry run)
- To/Cc/Bcc classification of distribution list entries
- Fixed plain-text body with an optional report attachment

Usage:
    from notifications import Notifier, NotifierConfig, create_email_provider

    notifier = Notifier(NotifierConfig(
        distribution_list=distribution_list,
        provider=create_email_provider(),
        default_from_address="reports@example.com",
        default_sender_name="Reporting Team",
    ))
    result = notifier.notify(
        subject="Monthly report",
        body_text="The monthly report is attached.",
        attachment_path="exports/monthly.csv",
    )
"""

from .email_provider import (
    EmailProvider,
    Envelope,
    DeliveryResult,
    DeliveryStatus,
    NullEmailProvider,
    create_email_provider,
)

from .smtp_provider import SMTPProvider
from .sendgrid_provider import SendGridProvider

from .notifier import (
    Notifier,
    NotifierConfig,
    NotificationRequest,
    RecipientGroups,
    build_envelope,
    classify_recipients,
    compose_body,
    quote_address,
)

__all__ = [
    # Core interfaces
    "EmailProvider",
    "Envelope",
    "DeliveryResult",
    "DeliveryStatus",
    "create_email_provider",
    # Providers
    "NullEmailProvider",
    "SMTPProvider",
    "SendGridProvider",
    # Notifier
    "Notifier",
    "NotifierConfig",
    "NotificationRequest",
    "RecipientGroups",
    "build_envelope",
    "classify_recipients",
    "compose_body",
    "quote_address",
]
