"""
MailService Module

This module relays validated contact submissions over SMTP using aiosmtplib.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from app.core.config import Settings, settings
from app.core.exceptions import ContactRelayError, TransportError
from app.models.contact import ContactSubmission, MailMessage
from app.services.html_sanitizer import sanitize_html
from app.services.mail_composer import compose_message
from app.services.mail_transport import (
    TransportConfig,
    get_test_message_url,
    resolve_recipient,
    resolve_sender,
    select_transport,
)

logger = logging.getLogger(__name__)

SEND_FAILURE = "Failed to sanitize or send email"


@dataclass(frozen=True)
class ContactResult:
    ok: bool
    preview_url: Optional[str] = None


class MailService:
    """Mail service relaying contact submissions."""

    def __init__(self, config: Settings = settings):
        self.config = config

    def create_email_multipart_message(self, message: MailMessage) -> MIMEMultipart:
        """
        Creates a multipart/alternative MIME message with plain text and HTML parts.

        Args:
            message (MailMessage): The composed message with a sanitized HTML body.

        Returns:
            MIMEMultipart: The constructed email message ready to be sent.
        """
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = message.from_email
        mime["To"] = message.to_email

        mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    async def send_mail(self, transport: TransportConfig, message: MailMessage) -> str:
        """
        Sends a composed message through the selected SMTP transport.

        Args:
            transport (TransportConfig): Configured SMTP server or test mailbox.
            message (MailMessage): The message to send.

        Returns:
            str: The server's reply to the DATA command.
        """
        mime = self.create_email_multipart_message(message)
        logger.info(f"Sending contact email via {transport.host}:{transport.port}")
        _, reply = await aiosmtplib.send(
            mime,
            hostname=transport.host,
            port=transport.port,
            username=transport.user or None,
            password=transport.password or None,
            use_tls=transport.secure,
        )
        return reply

    async def send_contact(
        self,
        submission: ContactSubmission,
        remote_addr: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ContactResult:
        """
        Compose, sanitize and dispatch a validated contact submission.

        Args:
            submission: The validated submission
            remote_addr: Address of the submitting client, shown in the HTML body
            now: Time of submission, defaults to the current UTC time

        Returns:
            ContactResult with a preview URL when a test mailbox was used

        Raises:
            TransportError: If provisioning, sanitizing or sending fails
        """
        try:
            transport = await select_transport(self.config)
        except ContactRelayError:
            raise
        except Exception as e:
            logger.error(f"Error selecting mail transport: {str(e)}")
            raise TransportError("Failed to send", details=str(e)) from e

        to_email = resolve_recipient(self.config, transport)
        from_email = resolve_sender(self.config, to_email)

        message = compose_message(
            submission,
            to_email=to_email,
            from_email=from_email,
            now=now or datetime.now(timezone.utc),
            remote_addr=remote_addr,
        )

        try:
            message = message.model_copy(update={"html": sanitize_html(message.html)})
            reply = await self.send_mail(transport, message)
        except TransportError:
            raise
        except Exception as e:
            logger.error(f"Failed to send contact email to {to_email}: {str(e)}")
            raise TransportError(SEND_FAILURE, details=str(e)) from e

        preview_url = get_test_message_url(transport, reply)
        if preview_url:
            logger.info(f"Preview URL: {preview_url}")

        logger.info(f"Contact email sent successfully to {to_email}")
        return ContactResult(ok=True, preview_url=preview_url)


mail_service = MailService()
