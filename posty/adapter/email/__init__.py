"""Email notification adapter."""

from .client import MockNotificationSender, SentNotification, SmtpNotificationSender

__all__ = ["SmtpNotificationSender", "MockNotificationSender", "SentNotification"]
