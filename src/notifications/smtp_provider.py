"""
SMTP Email Provider

Standard SMTP integration for report delivery through a mail relay.

Configuration (see config.settings.MailSettings):
    MAIL_SMTP_HOST: SMTP server hostname
    MAIL_SMTP_PORT: SMTP server port (default: 587)
    MAIL_SMTP_USERNAME: SMTP authentication username
    MAIL_SMTP_PASSWORD: SMTP authentication password
    MAIL_SMTP_USE_TLS: Use STARTTLS (default: True)
    MAIL_SMTP_USE_SSL: Use implicit SSL (default: False)
    MAIL_SMTP_TIMEOUT: Socket timeout in seconds (default: 30)
"""

import logging
import mimetypes
import smtplib
import ssl
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid
from pathlib import Path
from typing import Optional

from .email_provider import (
    DeliveryResult,
    DeliveryStatus,
    EmailProvider,
    Envelope,
    read_attachment,
)

logger = logging.getLogger(__name__)

DEFAULT_ATTACHMENT_TYPE = "application/octet-stream"


class SMTPProvider(EmailProvider):
    """
    SMTP email provider.

    Features:
    - Works with any SMTP server
    - TLS/SSL support
    - Basic authentication
    - Single file attachment
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        use_ssl: bool = False,
        timeout: float = 30.0,
    ):
        """
        Initialize SMTP provider.

        Args:
            host: SMTP server hostname
            port: SMTP server port
            username: Authentication username
            password: Authentication password
            use_tls: Use STARTTLS (port 587)
            use_ssl: Use SSL/TLS (port 465)
            timeout: Socket timeout in seconds
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return "smtp"

    def is_configured(self) -> bool:
        """Check if SMTP is properly configured."""
        return bool(self.host)

    def build_message(
        self,
        envelope: Envelope,
        attachment_data: Optional[bytes] = None,
    ) -> MIMEMultipart:
        """Build the MIME message. Bcc recipients never appear in the headers."""
        msg = MIMEMultipart()

        if envelope.from_name:
            msg["From"] = formataddr((envelope.from_name, envelope.from_address))
        else:
            msg["From"] = envelope.from_address
        if envelope.to:
            msg["To"] = ", ".join(envelope.to)
        if envelope.cc:
            msg["Cc"] = ", ".join(envelope.cc)
        msg["Subject"] = envelope.subject
        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = make_msgid()

        msg.attach(MIMEText(envelope.body, "plain", "utf-8"))

        if envelope.attachment is not None and attachment_data is not None:
            filename = Path(envelope.attachment).name
            mime_type, _ = mimetypes.guess_type(filename)
            main_type, sub_type = (mime_type or DEFAULT_ATTACHMENT_TYPE).split("/", 1)

            part = MIMEBase(main_type, sub_type)
            part.set_payload(attachment_data)
            encoders.encode_base64(part)
            part.add_header("Content-Disposition", "attachment", filename=filename)
            msg.attach(part)

        return msg

    def send(self, envelope: Envelope) -> DeliveryResult:
        """
        Send email via SMTP.

        Args:
            envelope: Envelope to send

        Returns:
            DeliveryResult with status
        """
        if not self.is_configured():
            return self.failure("SMTP not configured (missing MAIL_SMTP_HOST)", "NOT_CONFIGURED")

        try:
            attachment_data = read_attachment(envelope)
        except OSError as e:
            logger.error(f"SMTP: cannot read attachment {envelope.attachment}: {e}")
            return self.failure(f"Attachment unreadable: {e}", "ATTACHMENT_UNREADABLE")

        msg = self.build_message(envelope, attachment_data)
        recipients = envelope.recipients

        try:
            if self.use_ssl:
                # SSL connection (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context) as server:
                    if self.username and self.password:
                        server.login(self.username, self.password)
                    refused = server.sendmail(envelope.from_address, recipients, msg.as_string())
            else:
                # STARTTLS connection (port 587) or plain
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    if self.use_tls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self.username and self.password:
                        server.login(self.username, self.password)
                    refused = server.sendmail(envelope.from_address, recipients, msg.as_string())

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP auth error: {e}")
            return self.failure(f"SMTP authentication failed: {e}", "AUTH_ERROR")
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP recipients refused: {e}")
            return self.failure(f"Recipients refused: {e}", "RECIPIENTS_REFUSED")
        except smtplib.SMTPSenderRefused as e:
            logger.error(f"SMTP sender refused: {e}")
            return self.failure(f"Sender refused: {e}", "SENDER_REFUSED")
        except smtplib.SMTPException as e:
            logger.error(f"SMTP error: {e}")
            return self.failure(str(e), "SMTP_ERROR")
        except OSError as e:
            logger.error(f"SMTP connection to {self.host}:{self.port} failed: {e}")
            return self.failure(f"Cannot reach SMTP relay {self.host}:{self.port}: {e}", "CONNECTION_ERROR")

        if refused:
            logger.warning(f"SMTP: relay refused {len(refused)} recipient(s): {sorted(refused)}")

        logger.info(f"SMTP: Email sent to {len(recipients) - len(refused)} recipient(s) via {self.host}")

        return DeliveryResult(
            success=True,
            status=DeliveryStatus.SENT,
            message_id=msg["Message-ID"],
            provider=self.provider_name,
            raw_response={"refused": {addr: reply[0] for addr, reply in refused.items()}} if refused else None,
        )
