"""
DiagnoCenter HR - Email Service

Handles transactional email sending over SMTP.
Without an SMTP server configured, messages are logged (mock provider).
"""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from app.config import settings

logger = logging.getLogger(__name__)


class EmailProvider:
    """Email provider types."""
    SMTP = "smtp"
    MOCK = "mock"


@dataclass
class EmailMessage:
    """
    Email message data structure.

    Attachments are dicts with ``filename``, ``content`` (bytes) and an
    optional ``mime_type`` such as ``application/pdf``.
    """
    to: List[str]
    subject: str
    body_text: str
    body_html: Optional[str] = None
    cc: Optional[List[str]] = None
    reply_to: Optional[str] = None
    attachments: Optional[List[Dict[str, Any]]] = None


class EmailService:
    """Service for sending transactional emails."""

    def __init__(self):
        self.from_email = settings.email_from
        self.from_name = settings.mail_from_name

        # SMTP settings
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.mail_port
        self.smtp_username = settings.mail_username or None
        self.smtp_password = settings.mail_password or None
        self.smtp_use_tls = settings.mail_use_tls

    def _determine_provider(self) -> str:
        """Determine which email provider to use based on configuration."""
        if self.smtp_host:
            return EmailProvider.SMTP
        return EmailProvider.MOCK

    async def send_email(self, message: EmailMessage) -> bool:
        """
        Send an email using the configured provider.

        Returns False instead of raising when delivery fails.
        """
        provider = self._determine_provider()

        try:
            if provider == EmailProvider.SMTP:
                return await self._send_via_smtp(message)
            return await self._send_mock(message)
        except Exception as e:
            logger.error(f"Failed to send email via {provider}: {e}")
            return False

    def _build_mime(self, message: EmailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("mixed" if message.attachments else "alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = ", ".join(message.to)

        if message.cc:
            msg["Cc"] = ", ".join(message.cc)

        if message.reply_to:
            msg["Reply-To"] = message.reply_to

        msg.attach(MIMEText(message.body_text, "plain"))

        if message.body_html:
            msg.attach(MIMEText(message.body_html, "html"))

        for attachment in message.attachments or []:
            maintype, _, subtype = attachment.get("mime_type", "application/octet-stream").partition("/")
            part = MIMEBase(maintype, subtype or "octet-stream")
            part.set_payload(attachment["content"])
            encoders.encode_base64(part)
            part.add_header(
                "Content-Disposition",
                f'attachment; filename="{attachment["filename"]}"'
            )
            msg.attach(part)

        return msg

    async def _send_via_smtp(self, message: EmailMessage) -> bool:
        """Send email via SMTP."""
        try:
            msg = self._build_mime(message)

            all_recipients = message.to.copy()
            if message.cc:
                all_recipients.extend(message.cc)

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.smtp_use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.smtp_username and self.smtp_password:
                    server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.from_email, all_recipients, msg.as_string())

            logger.info(f"Email sent via SMTP to {message.to}")
            return True

        except Exception as e:
            logger.error(f"SMTP send failed: {e}")
            return False

    async def _send_mock(self, message: EmailMessage) -> bool:
        """Mock email sending for development."""
        attached = [a["filename"] for a in message.attachments or []]
        logger.info(f"[MOCK EMAIL] To: {message.to} | Subject: {message.subject} | Attachments: {attached}")
        logger.debug(f"[MOCK EMAIL] Body: {message.body_text[:200]}...")
        return True
