"""Platform login use case."""

import logfire
from pydantic import BaseModel

from posty.domain.service import IdentityService, PlatformAuthService
from posty.domain.value import Platform


class PlatformLoginRequest(BaseModel):
    """Login request from an OAuth callback.

    These parameters come from the platform in the callback URL.
    """

    platform: Platform
    code: str  # OAuth authorization code
    state: str  # State parameter for CSRF verification


class PlatformLoginResponse(BaseModel):
    """Platform login response."""

    token: str
    user_id: str


class PlatformLoginUseCase:
    """Use case for logging in through an external platform."""

    def __init__(
        self,
        platform_auth_service: PlatformAuthService,
        identity_service: IdentityService,
    ) -> None:
        """Initialize platform login use case.

        Args:
            platform_auth_service: Platform OAuth domain service
            identity_service: Identity domain service
        """
        self.platform_auth_service = platform_auth_service
        self.identity_service = identity_service

    async def execute(self, request: PlatformLoginRequest) -> PlatformLoginResponse:
        """Execute platform login flow.

        Steps:
        1. Complete OAuth with the platform and get the user's profile
        2. Log in the linked user, creating it on first login
        3. Return the session token

        Args:
            request: Login request with OAuth callback parameters

        Returns:
            Login response with session token and user ID

        Raises:
            PlatformOAuthError: If the OAuth exchange fails
            ValueError: If the platform is not supported
        """
        profile = await self.platform_auth_service.complete_login(
            request.platform, request.code, request.state
        )

        logfire.info(
            "OAuth completed",
            platform=profile.platform.value,
            platform_user_id=profile.platform_user_id,
        )

        grant = await self.identity_service.login_or_create_by_platform(
            platform=profile.platform,
            platform_user_id=profile.platform_user_id,
            nickname=profile.nickname,
            profile_image_url=profile.profile_image_url,
        )
        return PlatformLoginResponse(token=grant.token, user_id=grant.user_id)
