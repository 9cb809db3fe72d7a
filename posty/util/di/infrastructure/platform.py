"""Login platform infrastructure providers."""

from dishka import Scope, provide

from posty.adapter.platform import RealPlatformOAuthClient
from posty.config import Settings
from posty.domain.service import PlatformOAuthClient
from posty.domain.value import Platform
from posty.util.di.base import ProviderBase
from posty.util.error import ConfigurationError


class PlatformProvider(ProviderBase):
    """Login platform component base."""

    __mock_component__ = "platform"


class ProdPlatformProvider(PlatformProvider):
    """Production platform provider with real OAuth clients."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self, settings: Settings
    ) -> dict[Platform, PlatformOAuthClient]:
        """Provide OAuth clients for every platform, keyed by platform.

        Callback URLs are derived from the API base URL:
        {base_url}/auth/callback/{platform}

        Raises:
            ConfigurationError: If a platform has no client ID configured
        """
        clients: dict[Platform, PlatformOAuthClient] = {}
        for platform in Platform:
            platform_settings = getattr(settings.auth, platform.value)
            if not platform_settings.client_id:
                raise ConfigurationError(
                    f"{platform.value} OAuth client ID must be configured"
                )
            clients[platform] = RealPlatformOAuthClient(
                platform=platform,
                settings=platform_settings,
                redirect_uri=f"{settings.auth.platform_callback_base_url}/{platform.value}",
            )
        return clients
