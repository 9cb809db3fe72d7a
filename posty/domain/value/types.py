"""Domain value objects for Posty.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from posty.domain.value.common import ValueObject


class Platform(str, Enum):
    """External identity platforms users can log in with."""

    KAKAO = "kakao"
    FACEBOOK = "facebook"
    NAVER = "naver"


class CodePurpose(str, Enum):
    """What a one-time code proves when it is confirmed."""

    EMAIL_VERIFY = "email_verify"
    PASSWORD_RESET = "password_reset"

    @property
    def field(self) -> str:
        """User record field holding the outstanding code for this purpose."""
        if self is CodePurpose.EMAIL_VERIFY:
            return "email_verification_code"
        return "password_reset_code"


class PlatformProfile(ValueObject):
    """User info returned by an external platform after OAuth.

    Generic structure shared by all platforms.
    """

    platform: Platform
    platform_user_id: str  # Permanent ID on the platform
    nickname: str | None = None
    profile_image_url: str | None = None
    email: str | None = None


class SessionGrant(ValueObject):
    """A user id paired with a freshly issued session token."""

    user_id: str
    token: str
