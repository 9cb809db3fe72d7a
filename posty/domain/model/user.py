"""User aggregate root.

Users sign in either through an external platform (Kakao, Facebook,
Naver) or with an email and password. The record also carries the
outstanding one-time codes for email verification and password reset.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from posty.domain.model.common import DomainModel
from posty.domain.value import CodePurpose, Platform, UserId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """User aggregate root.

    A user has a platform identity, an email/password pair, or both.
    ``verified`` must be true before the account can perform protected
    actions such as editing its profile.
    """

    id: UserId

    # External platform identity (unique together)
    platform: Optional[Platform] = None
    platform_user_id: Optional[str] = None

    # Password account (email unique)
    email: Optional[str] = None
    password_hash: Optional[str] = None

    nickname: Optional[str] = None
    profile_image_url: Optional[str] = None
    verified: bool = False

    # Outstanding one-time codes, at most one per purpose
    email_verification_code: Optional[str] = None
    password_reset_code: Optional[str] = None
    pending_password_hash: Optional[str] = None  # Staged until reset is confirmed

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def check_identity_invariants(self) -> "User":
        """Enforce that the record is reachable by some login method."""
        if (self.platform is None) != (self.platform_user_id is None):
            raise ValueError("platform and platform_user_id must be set together")
        if self.platform is None and self.email is None:
            raise ValueError("User needs a platform identity or an email")
        if self.pending_password_hash is not None and self.password_reset_code is None:
            raise ValueError("pending_password_hash requires a password_reset_code")
        return self

    def code_for(self, purpose: CodePurpose) -> Optional[str]:
        """Return the outstanding code for ``purpose``, if any."""
        return getattr(self, purpose.field)

    @property
    def has_password(self) -> bool:
        """Whether the account can sign in with email and password."""
        return self.email is not None and self.password_hash is not None
