"""Notification sender interface."""


class NotificationSender:
    """Outbound notification channel (email) used by the identity service."""

    async def send(self, to_address: str, subject: str, body: str) -> None:
        """Deliver a plain-text message.

        Args:
            to_address: Recipient address
            subject: Message subject
            body: Plain-text body

        Raises:
            NotificationError: If the message could not be delivered
        """
        raise NotImplementedError
