"""Update user profile use case."""

from pydantic import BaseModel, Field

from posty.application.usecase.auth.get_current_user import CurrentUserResponse
from posty.domain.error import NotFoundError
from posty.domain.service import IdentityService


class UpdateUserProfileRequest(BaseModel):
    """Update user profile request."""

    token: str | None  # Session token from cookie
    nickname: str | None = Field(default=None, min_length=1, max_length=255)
    profile_image_url: str | None = Field(default=None, max_length=2048)


class NotAuthenticatedError(Exception):
    """Raised when a protected use case runs without a valid session."""

    pass


class UpdateUserProfileUseCase:
    """Use case for updating the signed-in user's display metadata.

    Only verified accounts may edit their profile.
    """

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize update user profile use case.

        Args:
            identity_service: Identity domain service
        """
        self.identity_service = identity_service

    async def execute(self, request: UpdateUserProfileRequest) -> CurrentUserResponse:
        """Execute update user profile flow.

        Steps:
        1. Resolve the session to a user
        2. Require a verified account
        3. Apply the changed fields

        Raises:
            NotAuthenticatedError: If the session is missing or invalid
            AccountNotVerifiedError: If the account is not verified
        """
        user = await self.identity_service.authenticate(request.token)
        if user is None:
            raise NotAuthenticatedError("Not authenticated")

        self.identity_service.require_verified(user)

        try:
            updated = await self.identity_service.update_profile(
                user.id,
                nickname=request.nickname,
                profile_image_url=request.profile_image_url,
            )
        except NotFoundError:
            raise NotAuthenticatedError("Not authenticated")

        return CurrentUserResponse.from_user(updated)
