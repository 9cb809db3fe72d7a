"""Email notification sender implementations."""

from dataclasses import dataclass
from email.message import EmailMessage

import aiosmtplib
import logfire

from posty.config import EmailSettings
from posty.domain.error import NotificationError
from posty.domain.service.notification import NotificationSender


class SmtpNotificationSender(NotificationSender):
    """Sends plain-text mail through an SMTP relay."""

    def __init__(self, settings: EmailSettings) -> None:
        """Initialize SMTP sender.

        Args:
            settings: SMTP connection and sender settings
        """
        self.settings = settings

    def _build_message(self, to_address: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f"{self.settings.from_name} <{self.settings.from_address}>"
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body, charset="utf-8")
        return message

    async def send(self, to_address: str, subject: str, body: str) -> None:
        """Send a plain-text email.

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        message = self._build_message(to_address, subject, body)

        with logfire.span("smtp.send", to_address=to_address, subject=subject):
            try:
                await aiosmtplib.send(
                    message,
                    hostname=self.settings.smtp_host,
                    port=self.settings.smtp_port,
                    username=self.settings.smtp_username,
                    password=self.settings.smtp_password,
                    use_tls=self.settings.use_tls,
                    start_tls=self.settings.start_tls,
                    timeout=self.settings.timeout_seconds,
                )
            except (aiosmtplib.SMTPException, OSError) as e:
                logfire.error(
                    "Email delivery failed",
                    to_address=to_address,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise NotificationError(f"Failed to send email: {e}") from e

            logfire.info("Email sent", to_address=to_address, subject=subject)


@dataclass
class SentNotification:
    """A message captured by the mock sender."""

    to_address: str
    subject: str
    body: str


class MockNotificationSender(NotificationSender):
    """Mock sender for testing.

    Records messages instead of sending them. Set ``fail`` to make every
    send raise NotificationError.
    """

    def __init__(self) -> None:
        self.sent: list[SentNotification] = []
        self.fail = False

    async def send(self, to_address: str, subject: str, body: str) -> None:
        """Record the message, or fail if configured to."""
        if self.fail:
            raise NotificationError("Mock delivery failure")
        self.sent.append(SentNotification(to_address, subject, body))

    def last_to(self, to_address: str) -> SentNotification | None:
        """Return the most recent message sent to an address."""
        for notification in reversed(self.sent):
            if notification.to_address == to_address:
                return notification
        return None
