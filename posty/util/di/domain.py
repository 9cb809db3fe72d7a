"""Domain layer DI providers."""

from dishka import Scope, provide

from posty.config import AuthSettings, Settings
from posty.domain.repository import UserRepository
from posty.domain.service import (
    IdentityService,
    NotificationSender,
    OneTimeCodeRegistry,
    PasswordCipher,
    PlatformAuthService,
    PlatformOAuthClient,
    SessionTokenService,
)
from posty.domain.value import Platform
from posty.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Stateless primitives are APP-scoped. Services that hold a repository are
    REQUEST-scoped to align with the repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_password_cipher(self, auth_settings: AuthSettings) -> PasswordCipher:
        """Provide password hashing primitive."""
        return PasswordCipher(rounds=auth_settings.bcrypt_rounds)

    @provide(scope=Scope.APP)
    def get_session_token_service(
        self, auth_settings: AuthSettings
    ) -> SessionTokenService:
        """Provide session token issuer."""
        return SessionTokenService(auth_settings=auth_settings)

    @provide
    def get_platform_auth_service(
        self, oauth_clients: dict[Platform, PlatformOAuthClient]
    ) -> PlatformAuthService:
        """Provide multi-platform OAuth domain service.

        Args:
            oauth_clients: Dictionary mapping platforms to their OAuth clients

        Returns:
            PlatformAuthService configured with all available OAuth clients
        """
        return PlatformAuthService(oauth_clients=oauth_clients)

    @provide
    def get_one_time_code_registry(
        self, user_repository: UserRepository
    ) -> OneTimeCodeRegistry:
        """Provide one-time code registry."""
        return OneTimeCodeRegistry(user_repository=user_repository)

    @provide
    def get_identity_service(
        self,
        user_repository: UserRepository,
        cipher: PasswordCipher,
        token_service: SessionTokenService,
        code_registry: OneTimeCodeRegistry,
        notification_sender: NotificationSender,
        settings: Settings,
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(
            user_repository=user_repository,
            cipher=cipher,
            token_service=token_service,
            code_registry=code_registry,
            notification_sender=notification_sender,
            confirmation_base_url=settings.api.base_url,
        )
