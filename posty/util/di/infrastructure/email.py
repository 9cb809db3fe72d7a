"""Email infrastructure providers."""

from dishka import Scope, provide

from posty.adapter.email import SmtpNotificationSender
from posty.config import EmailSettings
from posty.domain.service import NotificationSender
from posty.util.di.base import ProviderBase
from posty.util.error import ConfigurationError


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider using SMTP."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notification_sender(self, settings: EmailSettings) -> NotificationSender:
        """Provide SMTP notification sender.

        Raises:
            ConfigurationError: If no SMTP host or sender address is configured
        """
        if not settings.smtp_host:
            raise ConfigurationError("SMTP host must be configured")
        if not settings.from_address:
            raise ConfigurationError("Sender address must be configured")
        return SmtpNotificationSender(settings)
