"""Application layer DI providers."""

from dishka import Scope, provide

from posty.application.usecase.auth import GetCurrentUserUseCase, PlatformLoginUseCase
from posty.application.usecase.user import UpdateUserProfileUseCase
from posty.domain.service import IdentityService, PlatformAuthService
from posty.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_platform_login_use_case(
        self,
        platform_auth_service: PlatformAuthService,
        identity_service: IdentityService,
    ) -> PlatformLoginUseCase:
        """Provide platform login use case."""
        return PlatformLoginUseCase(
            platform_auth_service=platform_auth_service,
            identity_service=identity_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, identity_service: IdentityService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(identity_service=identity_service)

    @provide(scope=Scope.REQUEST)
    def get_update_user_profile_use_case(
        self, identity_service: IdentityService
    ) -> UpdateUserProfileUseCase:
        """Provide update user profile use case."""
        return UpdateUserProfileUseCase(identity_service=identity_service)
