"""SMTP Email Client — sends plain-text announcement mail, one message per recipient.

Invariants:
    - is_configured() is False when smtp_host is empty; callers skip dispatch entirely
    - Every failure is raised as EmailDeliveryError naming the recipient
    - One connection per message: a broken recipient never poisons the next send

Design Decisions:
    - smtplib (blocking) called from a worker thread by the outbox, as the facility
      backend's EmailClient does
"""

import logging
import smtplib
from email.mime.text import MIMEText

from shelterhub.config import Settings
from shelterhub.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class SMTPEmailClient:
    """EmailSender backed by an SMTP relay."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.sender = settings.smtp_sender
        self.use_tls = settings.smtp_use_tls
        self.timeout = settings.smtp_timeout_seconds

    def is_configured(self) -> bool:
        return bool(self.host)

    def _build_message(self, address: str, title: str, body: str) -> MIMEText:
        msg = MIMEText(body, "plain", "utf-8")
        msg["From"] = self.sender
        msg["To"] = address
        msg["Subject"] = title
        return msg

    def send_announcement_email(self, address: str, title: str, body: str) -> None:
        if not self.is_configured():
            raise EmailDeliveryError(address, "email service not configured")
        msg = self._build_message(address, title, body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(self.sender, [address], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(address, str(e))
        logger.debug(f"Announcement email sent to {address}")
