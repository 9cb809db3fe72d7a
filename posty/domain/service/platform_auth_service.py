"""Platform authentication domain service."""

from posty.domain.value import Platform, PlatformProfile

from .base import Service


class PlatformOAuthClient:
    """Generic OAuth client interface for all login platforms."""

    async def initiate_authorization(self, state: str) -> str:
        """Initiate OAuth authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> PlatformProfile:
        """Complete OAuth authorization flow.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Platform user profile
        """
        raise NotImplementedError


class PlatformAuthService(Service):
    """Routes OAuth login steps to the client for each platform."""

    def __init__(self, oauth_clients: dict[Platform, PlatformOAuthClient]) -> None:
        """Initialize platform auth service.

        Args:
            oauth_clients: Map of platform to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    def _client_for(self, platform: Platform) -> PlatformOAuthClient:
        client = self.oauth_clients.get(platform)
        if not client:
            raise ValueError(f"Unsupported platform: {platform}")
        return client

    async def initiate_login(self, platform: Platform, state: str) -> str:
        """Initiate OAuth login flow for a platform.

        Raises:
            ValueError: If platform not supported
        """
        return await self._client_for(platform).initiate_authorization(state)

    async def complete_login(
        self, platform: Platform, code: str, state: str
    ) -> PlatformProfile:
        """Complete OAuth login flow for a platform.

        Raises:
            ValueError: If platform not supported
        """
        return await self._client_for(platform).complete_authorization(code, state)
