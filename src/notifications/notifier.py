"""
Report Notifier

Sends a report email to everyone on a distribution list.

Steps for each send:
1. Validate the NotificationRequest
2. Partition the distribution list into To/Cc/Bcc (unknown roles are skipped)
3. Quote each address for the mail headers
4. Build the envelope and the fixed plain-text body
5. Log the resolved addresses and hand the envelope to the transport once

Usage:
    from distribution import load_distribution_list
    from notifications import Notifier, NotifierConfig, NotificationRequest, SMTPProvider

    config = NotifierConfig(
        distribution_list=load_distribution_list("recipients.csv"),
        provider=SMTPProvider(host="relay.example.com"),
    )
    result = Notifier(config).send(NotificationRequest(
        from_address="reports@example.com",
        sender_name="Reporting Team",
        subject="Weekly report",
        body_text="Please find the weekly report attached.",
        attachment_path="out/weekly.xlsx",
    ))
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from distribution.exceptions import DispatchError, ValidationError
from distribution.models import DistributionList, Role

from .email_provider import DeliveryResult, EmailProvider, Envelope

logger = logging.getLogger(__name__)

GREETING = "Hi,"
SIGN_OFF = "Best regards,"

_ATEXT = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+"
_DOT_ATOM = re.compile(rf"^{_ATEXT}(?:\.{_ATEXT})*$")


@dataclass
class NotificationRequest:
    """Parameters for one report email. A blank attachment path means no attachment."""
    from_address: str
    sender_name: str
    subject: str
    body_text: str
    attachment_path: Optional[Union[str, Path]] = None

    def __post_init__(self):
        if isinstance(self.attachment_path, str) and not self.attachment_path.strip():
            self.attachment_path = None

    def validate(self) -> None:
        """
        Check that every required field is present.

        Raises:
            ValidationError: If a required field is empty
        """
        for name in ("from_address", "sender_name", "subject", "body_text"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise ValidationError(f"Notification field '{name}' is required")


@dataclass
class RecipientGroups:
    """Addresses partitioned by role, each group in source order."""
    to: List[str] = field(default_factory=list)
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)

    @property
    def all_recipients(self) -> List[str]:
        return [*self.to, *self.cc, *self.bcc]

    @property
    def is_empty(self) -> bool:
        return not (self.to or self.cc or self.bcc)


@dataclass
class NotifierConfig:
    """
    Everything a Notifier needs, built explicitly by the caller.

    The sender defaults are used by Notifier.notify when the caller does
    not pass a from-address or sender name.
    """
    distribution_list: DistributionList
    provider: EmailProvider
    default_from_address: Optional[str] = None
    default_sender_name: Optional[str] = None


def quote_address(address: str) -> str:
    """
    Quote an address for use in mail headers.

    Expects a bare addr-spec. A local part that is not a plain dot-atom
    (spaces, commas, parentheses and so on) is wrapped in double quotes.
    Other values, including display-name forms such as "Name <a@x.com>",
    are returned stripped but otherwise unchanged.
    """
    address = address.strip()
    if "<" in address:
        return address
    local, sep, domain = address.rpartition("@")
    if not sep or not local:
        return address
    if len(local) >= 2 and local.startswith('"') and local.endswith('"'):
        return address
    if _DOT_ATOM.match(local):
        return address
    escaped = local.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"@{domain}'


def classify_recipients(distribution_list: DistributionList) -> RecipientGroups:
    """
    Partition a distribution list into To/Cc/Bcc groups.

    Role matching is case-insensitive. Entries with any other role are left
    out of every group; this is logged but not an error.
    """
    groups = RecipientGroups()
    targets = {Role.TO: groups.to, Role.CC: groups.cc, Role.BCC: groups.bcc}

    for entry in distribution_list:
        role = entry.recipient_role
        if role is None:
            logger.warning(f"Skipping {entry.address}: unrecognized role '{entry.role}'")
            continue
        targets[role].append(entry.address)

    return groups


def compose_body(body_text: str, sender_name: str) -> str:
    """Wrap the body text in the fixed greeting and signature."""
    return f"{GREETING}\n\n{body_text}\n\n{SIGN_OFF}\n{sender_name}"


def build_envelope(request: NotificationRequest, groups: RecipientGroups) -> Envelope:
    """Build the envelope for a request; the attachment is carried only when set."""
    attachment = request.attachment_path
    return Envelope(
        from_address=request.from_address,
        from_name=request.sender_name,
        to=[quote_address(a) for a in groups.to],
        cc=[quote_address(a) for a in groups.cc],
        bcc=[quote_address(a) for a in groups.bcc],
        subject=request.subject,
        body=compose_body(request.body_text, request.sender_name),
        attachment=Path(attachment) if attachment else None,
    )


class Notifier:
    """Sends report emails to a fixed distribution list."""

    def __init__(self, config: NotifierConfig):
        self.config = config

    @property
    def provider(self) -> EmailProvider:
        return self.config.provider

    def prepare(self, request: NotificationRequest) -> Envelope:
        """
        Validate a request and build its envelope without sending.

        Raises:
            ValidationError: If a field is empty or no recipients resolve
        """
        request.validate()

        groups = classify_recipients(self.config.distribution_list)
        if groups.is_empty:
            raise ValidationError("No To, Cc or Bcc recipients resolved from the distribution list")

        return build_envelope(request, groups)

    def send(self, request: NotificationRequest) -> DeliveryResult:
        """
        Send one report email.

        Args:
            request: Notification parameters

        Returns:
            DeliveryResult of the accepted hand-off to the transport

        Raises:
            ValidationError: Before any transport call, for bad input
            DispatchError: If the transport did not accept the message
        """
        envelope = self.prepare(request)

        logger.info(f"To: {', '.join(envelope.to)}")
        logger.info(f"Cc: {', '.join(envelope.cc)}")
        logger.info(f"Bcc: {', '.join(envelope.bcc)}")
        logger.info(f"From: {envelope.from_address}")
        if envelope.attachment:
            logger.info(f"Attachment: {envelope.attachment}")

        try:
            result = self.provider.send(envelope)
        except Exception as e:
            logger.exception(f"Transport {self.provider.provider_name} raised during send")
            raise DispatchError(f"Transport {self.provider.provider_name} failed: {e}") from e

        if not result.success:
            raise DispatchError(
                f"Transport {result.provider or self.provider.provider_name} rejected the message: "
                f"{result.error_message or result.error_code or 'unknown error'}",
                result=result,
            )

        logger.info(
            f"Report '{envelope.subject}' handed to {self.provider.provider_name} "
            f"for {len(envelope.recipients)} recipient(s)"
        )
        return result

    def notify(
        self,
        subject: str,
        body_text: str,
        attachment_path: Optional[Union[str, Path]] = None,
        from_address: Optional[str] = None,
        sender_name: Optional[str] = None,
    ) -> DeliveryResult:
        """Build a request from keyword arguments and the configured sender defaults, then send it."""
        request = NotificationRequest(
            from_address=from_address or self.config.default_from_address or "",
            sender_name=sender_name or self.config.default_sender_name or "",
            subject=subject,
            body_text=body_text,
            attachment_path=attachment_path,
        )
        return self.send(request)
