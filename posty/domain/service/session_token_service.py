"""Session token domain service."""

from uuid import UUID

import logfire

from posty.config import AuthSettings
from posty.domain.value import UserId
from posty.util.jwt import JWTError, create_token, verify_token

from .base import Service


class SessionTokenService(Service):
    """Issues and verifies stateless signed session tokens.

    Tokens are never stored server-side. There is no revocation: logging
    out means the client drops the cookie.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize session token service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue(self, user_id: UserId | str) -> str:
        """Create a session token for a user.

        Args:
            user_id: User ID to embed

        Returns:
            Signed JWT
        """
        with logfire.span("session_token_service.issue", user_id=str(user_id)):
            token = create_token(str(user_id), self.auth_settings)
            logfire.info("Session token issued", user_id=str(user_id))
            return token

    def verify(self, token: str | None) -> UserId | None:
        """Verify a session token and extract the user ID.

        Invalid, expired, tampered and missing tokens all yield None so
        callers treat the request as anonymous.

        Args:
            token: JWT from the session cookie (optional)

        Returns:
            User ID if the token is valid, None otherwise
        """
        if not token:
            return None

        try:
            payload = verify_token(token, self.auth_settings)
            return UserId(UUID(payload.user_id))
        except (JWTError, ValueError) as e:
            logfire.debug(
                "Session token rejected, treating as anonymous", error=str(e)
            )
            return None
