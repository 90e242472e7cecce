"""
SendGrid Email Provider

SendGrid HTTP API integration for report delivery.
Useful where no SMTP relay is reachable from the host.

Configuration (see config.settings.MailSettings):
    MAIL_SENDGRID_API_KEY: Your SendGrid API key (required)
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional, Tuple

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import (
    Attachment,
    Bcc,
    Cc,
    Content,
    Disposition,
    Email,
    FileContent,
    FileName,
    FileType,
    Mail,
    Personalization,
    To,
)

from .email_provider import (
    DeliveryResult,
    DeliveryStatus,
    EmailProvider,
    Envelope,
    read_attachment,
)

logger = logging.getLogger(__name__)

DEFAULT_ATTACHMENT_TYPE = "application/octet-stream"


def unique_recipients(envelope: Envelope) -> Tuple[List[str], List[str], List[str]]:
    """
    Drop repeated addresses so each appears once per personalization.

    SendGrid rejects a personalization that names the same address twice
    across to/cc/bcc. The first occurrence wins in To, Cc, Bcc order and
    every dropped copy is logged.
    """
    seen = set()
    groups: Tuple[List[str], List[str], List[str]] = ([], [], [])
    for label, addresses, kept in zip(("To", "Cc", "Bcc"), (envelope.to, envelope.cc, envelope.bcc), groups):
        for address in addresses:
            key = address.lower()
            if key in seen:
                logger.warning(f"SendGrid: dropping duplicate recipient {address} from {label}")
                continue
            seen.add(key)
            kept.append(address)
    return groups


class SendGridProvider(EmailProvider):
    """
    SendGrid email provider.

    All To/Cc/Bcc recipients go into a single personalization so that the
    report is sent as one message.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[SendGridAPIClient] = None,
    ):
        """
        Initialize SendGrid provider.

        Args:
            api_key: SendGrid API key
            client: Preconfigured API client (built from api_key when omitted)
        """
        self.api_key = api_key
        self._client = client

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    def _get_client(self) -> SendGridAPIClient:
        """Lazy-load SendGrid client."""
        if self._client is None:
            self._client = SendGridAPIClient(api_key=self.api_key)
        return self._client

    def is_configured(self) -> bool:
        """Check if SendGrid is properly configured."""
        return bool(self.api_key) or self._client is not None

    def build_mail(self, envelope: Envelope, attachment_data: Optional[bytes] = None) -> Mail:
        """Build the SendGrid Mail object for an envelope."""
        mail = Mail()
        mail.from_email = Email(envelope.from_address, envelope.from_name)
        mail.subject = envelope.subject

        to, cc, bcc = unique_recipients(envelope)
        personalization = Personalization()
        for address in to:
            personalization.add_to(To(address))
        for address in cc:
            personalization.add_cc(Cc(address))
        for address in bcc:
            personalization.add_bcc(Bcc(address))
        mail.add_personalization(personalization)

        mail.add_content(Content("text/plain", envelope.body))

        if envelope.attachment is not None and attachment_data is not None:
            filename = Path(envelope.attachment).name
            mime_type, _ = mimetypes.guess_type(filename)
            mail.attachment = Attachment(
                FileContent(base64.b64encode(attachment_data).decode()),
                FileName(filename),
                FileType(mime_type or DEFAULT_ATTACHMENT_TYPE),
                Disposition("attachment"),
            )

        return mail

    def send(self, envelope: Envelope) -> DeliveryResult:
        """
        Send email via SendGrid.

        Args:
            envelope: Envelope to send

        Returns:
            DeliveryResult with SendGrid message ID
        """
        if not self.is_configured():
            return self.failure("SendGrid API key not configured", "NOT_CONFIGURED")

        try:
            attachment_data = read_attachment(envelope)
        except OSError as e:
            logger.error(f"SendGrid: cannot read attachment {envelope.attachment}: {e}")
            return self.failure(f"Attachment unreadable: {e}", "ATTACHMENT_UNREADABLE")

        mail = self.build_mail(envelope, attachment_data)

        try:
            response = self._get_client().send(mail)
        except HTTPError as e:
            logger.error(f"SendGrid error: status={e.status_code}, body={e.body}")
            return self.failure(
                f"SendGrid returned status {e.status_code}",
                str(e.status_code),
                raw_response={"status_code": e.status_code},
            )
        except Exception as e:
            logger.exception(f"SendGrid send error: {e}")
            return self.failure(str(e), "SEND_ERROR")

        if response.status_code in (200, 201, 202):
            message_id = response.headers.get("X-Message-Id", "")
            logger.info(
                f"SendGrid: Email sent to {len(envelope.recipients)} recipient(s), "
                f"message_id={message_id}"
            )
            return DeliveryResult(
                success=True,
                status=DeliveryStatus.SENT,
                message_id=message_id,
                provider=self.provider_name,
                raw_response={"status_code": response.status_code},
            )

        error_msg = f"SendGrid returned status {response.status_code}"
        logger.error(f"SendGrid error: {error_msg}, body={response.body}")
        return self.failure(
            error_msg,
            str(response.status_code),
            raw_response={"status_code": response.status_code},
        )
