"""
SMTP mail relay sender.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate

from ordertracker.providers.base import (
    MailSender,
    ProviderNotConfigured,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)


class SmtpMailSender(MailSender):
    """Sends multipart (plain + HTML) mail through an SMTP relay."""

    def __init__(
        self,
        host: str | None,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        from_email: str | None = None,
        from_name: str = "Order Tracker",
        timeout: int = 10,
    ):
        """
        Args:
            host: SMTP relay hostname
            port: SMTP port (STARTTLS is used on anything but 465)
            user: Login user; no login when omitted
            password: Login password
            from_email: Sender address
            from_name: Sender display name
            timeout: Seconds for the whole connection before giving up
        """
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.from_email)

    def _build_message(self, to_email: str, subject: str, html: str, text: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email
        msg["Date"] = formatdate(localtime=True)
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    def send(self, to_email: str, subject: str, html: str, text: str) -> None:
        if not self.enabled:
            raise ProviderNotConfigured("Email not configured (set SMTP_HOST and SMTP_FROM_EMAIL)")

        msg = self._build_message(to_email, subject, html, text)

        try:
            if self.port == 465:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

            with server:
                if self.port != 465:
                    server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Failed to send email to %s: %s", to_email, e)
            raise ProviderUnavailable(f"Email send failed: {e}") from e

        logger.info("Email sent to %s: %s", to_email, subject)
