"""User profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from posty.application.usecase.auth.get_current_user import CurrentUserResponse
from posty.application.usecase.user import (
    NotAuthenticatedError,
    UpdateUserProfileUseCase,
)
from posty.application.usecase.user.update_user_profile import (
    UpdateUserProfileRequest,
)
from posty.config import Settings
from posty.domain.error import AccountNotVerifiedError

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class UpdateUserProfileAPIRequest(BaseModel):
    """API request for updating user profile."""

    nickname: str | None = Field(None, min_length=1, max_length=255)
    profile_image_url: str | None = Field(None, max_length=2048)


@router.patch("/me", response_model=CurrentUserResponse)
async def update_my_profile(
    request: UpdateUserProfileAPIRequest,
    http_request: Request,
    update_user_profile_use_case: FromDishka[UpdateUserProfileUseCase],
    settings: FromDishka[Settings],
) -> CurrentUserResponse:
    """Update current user's profile.

    Only nickname and profile image can be changed, and only by a verified
    account.

    Raises:
        HTTPException: 401 without a valid session, 403 if the account
            is not verified

    Example:
        PATCH /users/me
        Cookie: access_token=...

        Request:
        {"nickname": "alice", "profile_image_url": "https://example.com/a.jpg"}
    """
    try:
        return await update_user_profile_use_case.execute(
            UpdateUserProfileRequest(
                token=http_request.cookies.get(settings.auth.session_cookie_name),
                nickname=request.nickname,
                profile_image_url=request.profile_image_url,
            )
        )
    except NotAuthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    except AccountNotVerifiedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Verify your email before editing your profile",
        )
