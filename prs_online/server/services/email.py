"""
Outgoing email.

Messages are built with ``email.message.EmailMessage`` and delivered over
SMTP in a worker thread so the event loop never blocks on the socket.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage
from html import escape

from prs_online.core.errors import EmailDeliveryError
from prs_online.core.logging_config import get_logger
from prs_online.server.core.config import SMTPConfig

logger = get_logger(__name__)

FORGOT_PASSWORD_SUBJECT = "Reset your PRS Online password"


def render_forgot_password_email(url: str) -> str:
    """Render the HTML body of the password reset email."""
    link = escape(url, quote=True)
    return (
        "<p>We received a request to reset the password of your PRS Online account.</p>"
        f'<p><a href="{link}">Reset password</a></p>'
        "<p>If you did not ask for this, you can ignore this email.</p>"
    )


class EmailSender:
    """Send HTML emails through an SMTP relay."""

    def __init__(self, config: SMTPConfig) -> None:
        self.config = config

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout_seconds) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.username:
                smtp.login(self.config.username, self.config.password or "")
            smtp.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one email.

        Raises:
            EmailDeliveryError: When the SMTP relay cannot be reached or rejects the message
        """
        message = self.build_message(to, subject, html)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send email to {to}: {e}") from e
        logger.info(f"Sent email '{subject}' to {to}")

    async def send_forgot_password(self, to: str, url: str) -> None:
        await self.send(to, FORGOT_PASSWORD_SUBJECT, render_forgot_password_email(url))
