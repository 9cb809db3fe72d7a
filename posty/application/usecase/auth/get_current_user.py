"""Get current user use case."""

from datetime import datetime

from pydantic import BaseModel

from posty.domain.model import User
from posty.domain.service import IdentityService
from posty.domain.value import Platform


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str | None  # Session token from cookie


class CurrentUserResponse(BaseModel):
    """Public view of the signed-in user."""

    user_id: str
    platform: Platform | None
    email: str | None
    nickname: str | None
    profile_image_url: str | None
    verified: bool
    password_reset_pending: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "CurrentUserResponse":
        """Build the response from a user, leaving out credentials and codes."""
        return cls(
            user_id=str(user.id),
            platform=user.platform,
            email=user.email,
            nickname=user.nickname,
            profile_image_url=user.profile_image_url,
            verified=user.verified,
            password_reset_pending=user.pending_password_hash is not None,
            created_at=user.created_at,
        )


class GetCurrentUserUseCase:
    """Use case for getting current authenticated user."""

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize get current user use case.

        Args:
            identity_service: Identity domain service
        """
        self.identity_service = identity_service

    async def execute(self, request: GetCurrentUserRequest) -> CurrentUserResponse | None:
        """Resolve the session token to the current user.

        Returns:
            User information, or None for anonymous requests
        """
        user = await self.identity_service.authenticate(request.token)
        if user is None:
            return None
        return CurrentUserResponse.from_user(user)
