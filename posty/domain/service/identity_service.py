"""Identity domain service.

Owns the account lifecycle: platform login, password signup and signin,
email verification and password reset. Each account moves through
unregistered -> registered (unverified) -> registered (verified), with an
independent password-reset sub-state (nothing pending / reset pending).
"""

from typing import Optional
from uuid import uuid4

import logfire

from posty.domain.error import (
    AccountNotVerifiedError,
    AuthenticationError,
    ConflictError,
    InvalidCodeError,
    InvalidOrExpiredCodeError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from posty.domain.model import User
from posty.domain.repository import UserRepository
from posty.domain.value import CodePurpose, Platform, SessionGrant, UserId

from .base import Service
from .notification import NotificationSender
from .one_time_code_registry import OneTimeCodeRegistry
from .password_cipher import PasswordCipher
from .session_token_service import SessionTokenService

VERIFY_EMAIL_PATH = "/auth/verify-email"
RESET_PASSWORD_PATH = "/auth/reset-password"


class IdentityService(Service):
    """Domain service orchestrating identity and credential operations."""

    def __init__(
        self,
        user_repository: UserRepository,
        cipher: PasswordCipher,
        token_service: SessionTokenService,
        code_registry: OneTimeCodeRegistry,
        notification_sender: NotificationSender,
        confirmation_base_url: str,
    ) -> None:
        """Initialize identity service.

        Args:
            user_repository: User repository
            cipher: Password hashing primitive
            token_service: Session token issuer
            code_registry: One-time code registry
            notification_sender: Outbound email sender
            confirmation_base_url: Public API URL that mailed links point at
        """
        self.user_repository = user_repository
        self.cipher = cipher
        self.token_service = token_service
        self.code_registry = code_registry
        self.notification_sender = notification_sender
        self.confirmation_base_url = confirmation_base_url.rstrip("/")

    def _grant(self, user_id: UserId) -> SessionGrant:
        return SessionGrant(user_id=str(user_id), token=self.token_service.issue(user_id))

    def _confirmation_link(self, path: str, code: str) -> str:
        return f"{self.confirmation_base_url}{path}?code={code}"

    @staticmethod
    def _require_credentials(
        email: Optional[str], password: Optional[str]
    ) -> tuple[str, str]:
        # Addresses are matched case-insensitively
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Please enter both an email and a password.")
        return email, password

    async def login_or_create_by_platform(
        self,
        platform: Platform,
        platform_user_id: str,
        nickname: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> SessionGrant:
        """Log in with a platform identity, creating the user on first login.

        Existing identities are not modified. New users are created verified
        because the platform already vouched for them.

        Args:
            platform: Login platform
            platform_user_id: User ID on that platform
            nickname: Display name from the platform
            profile_image_url: Avatar URL from the platform

        Returns:
            User ID and session token

        Raises:
            ValidationError: If platform_user_id is empty
        """
        if not platform_user_id:
            raise ValidationError("Platform user ID is required.")

        with logfire.span(
            "identity_service.login_or_create_by_platform",
            platform=platform.value,
            platform_user_id=platform_user_id,
        ):
            existing = await self.user_repository.find_by_platform_identity(
                platform, platform_user_id
            )
            if existing:
                logfire.info(
                    "Existing platform user logged in",
                    user_id=str(existing.id),
                    platform=platform.value,
                )
                return self._grant(existing.id)

            user = User(
                id=UserId(uuid4()),
                platform=platform,
                platform_user_id=platform_user_id,
                nickname=nickname,
                profile_image_url=profile_image_url,
                verified=True,
            )
            try:
                await self.user_repository.insert(user)
            except ConflictError:
                # Lost a race against a concurrent first login
                existing = await self.user_repository.find_by_platform_identity(
                    platform, platform_user_id
                )
                if existing is None:
                    raise
                return self._grant(existing.id)

            logfire.info(
                "New platform user created",
                user_id=str(user.id),
                platform=platform.value,
            )
            return self._grant(user.id)

    async def signup(self, email: Optional[str], password: Optional[str]) -> SessionGrant:
        """Register an email/password account.

        The account starts unverified and a verification link is mailed.
        A session is granted right away; protected actions stay locked
        until the email is confirmed.

        Returns:
            User ID and session token

        Raises:
            ValidationError: If email or password is missing
            ConflictError: If the email is already registered
            CipherError: If hashing fails
            NotificationError: If the verification email cannot be sent
        """
        email, password = self._require_credentials(email, password)

        with logfire.span("identity_service.signup", email=email):
            if await self.user_repository.find_by_email(email):
                logfire.info("Signup rejected - email taken", email=email)
                raise ConflictError("A user with this email already exists.")

            user = User(
                id=UserId(uuid4()),
                email=email,
                password_hash=await self.cipher.hash(password),
                verified=False,
            )
            await self.user_repository.insert(user)

            try:
                code = await self.code_registry.issue_code(
                    user.id, CodePurpose.EMAIL_VERIFY
                )
                await self.notification_sender.send(
                    email,
                    "Verify your email",
                    "Follow this link to verify your email address: "
                    f"{self._confirmation_link(VERIFY_EMAIL_PATH, code)}",
                )
            except NotificationError:
                logfire.error(
                    "Verification email failed, removing new user",
                    user_id=str(user.id),
                )
                await self.user_repository.delete(user.id)
                raise

            logfire.info("User signed up", user_id=str(user.id))
            return self._grant(user.id)

    async def signin(self, email: Optional[str], password: Optional[str]) -> SessionGrant:
        """Sign in with email and password.

        Unknown email and wrong password raise the same error.

        Returns:
            User ID and session token

        Raises:
            ValidationError: If email or password is missing
            AuthenticationError: If the credentials do not match
        """
        email, password = self._require_credentials(email, password)

        with logfire.span("identity_service.signin", email=email):
            user = await self.user_repository.find_by_email(email)
            matched = user is not None and await self.cipher.verify(
                password, user.password_hash
            )
            if not matched:
                logfire.info("Signin rejected", email=email)
                raise AuthenticationError()

            logfire.info("User signed in", user_id=str(user.id))
            return self._grant(user.id)

    async def request_password_reset(
        self, email: Optional[str], new_password: Optional[str]
    ) -> None:
        """Stage a new password and mail a confirmation link.

        The active password keeps working until the link is followed. A
        newer request replaces the staged password and the code.

        Raises:
            ValidationError: If email or password is missing
            NotFoundError: If no user has this email
            CipherError: If hashing fails
            NotificationError: If the reset email cannot be sent
        """
        email, new_password = self._require_credentials(email, new_password)

        with logfire.span("identity_service.request_password_reset", email=email):
            user = await self.user_repository.find_by_email(email)
            if user is None:
                logfire.info("Password reset requested for unknown email", email=email)
                raise NotFoundError("User", email)

            previous = {
                CodePurpose.PASSWORD_RESET.field: user.password_reset_code,
                "pending_password_hash": user.pending_password_hash,
            }
            code = await self.code_registry.issue_code(
                user.id,
                CodePurpose.PASSWORD_RESET,
                {"pending_password_hash": await self.cipher.hash(new_password)},
            )

            try:
                await self.notification_sender.send(
                    email,
                    "Reset your password",
                    "Follow this link to reset your password: "
                    f"{self._confirmation_link(RESET_PASSWORD_PATH, code)}",
                )
            except NotificationError:
                logfire.error(
                    "Password reset email failed, withdrawing code",
                    user_id=str(user.id),
                )
                await self.code_registry.revoke(
                    user.id, CodePurpose.PASSWORD_RESET, code, restore=previous
                )
                raise

            logfire.info("Password reset requested", user_id=str(user.id))

    async def confirm_password_reset(self, code: Optional[str]) -> UserId:
        """Make the staged password active.

        Returns:
            The user whose password changed

        Raises:
            InvalidOrExpiredCodeError: If the code is unknown, already used,
                or there is no staged password
        """
        with logfire.span("identity_service.confirm_password_reset"):
            owner = await self.code_registry.find_owner(
                code or "", CodePurpose.PASSWORD_RESET
            )
            if owner is None or owner.pending_password_hash is None:
                raise InvalidOrExpiredCodeError()

            user_id = await self.code_registry.consume_code(
                code or "",
                CodePurpose.PASSWORD_RESET,
                extra_changes={
                    "password_hash": owner.pending_password_hash,
                    "pending_password_hash": None,
                },
                expected={"pending_password_hash": owner.pending_password_hash},
            )
            if user_id is None:
                raise InvalidOrExpiredCodeError()

            logfire.info("Password reset completed", user_id=str(user_id))
            return user_id

    async def confirm_email_verification(self, code: Optional[str]) -> UserId:
        """Mark the code owner's account as verified.

        Returns:
            The verified user's ID

        Raises:
            InvalidCodeError: If the code is unknown or already used
        """
        with logfire.span("identity_service.confirm_email_verification"):
            user_id = await self.code_registry.consume_code(
                code or "",
                CodePurpose.EMAIL_VERIFY,
                extra_changes={"verified": True},
            )
            if user_id is None:
                raise InvalidCodeError()

            logfire.info("Email verified", user_id=str(user_id))
            return user_id

    async def authenticate(self, token: Optional[str]) -> Optional[User]:
        """Resolve a session token to its user.

        Returns:
            The user, or None for anonymous requests (missing or invalid
            token, or a token for a user that no longer exists)
        """
        user_id = self.token_service.verify(token)
        if user_id is None:
            return None
        user = await self.user_repository.find_by_id(user_id)
        if user is None:
            logfire.warn("Session token for missing user", user_id=str(user_id))
        return user

    def require_verified(self, user: User) -> User:
        """Gate a protected action on a verified account.

        Raises:
            AccountNotVerifiedError: If the account is not verified
        """
        if not user.verified:
            raise AccountNotVerifiedError(str(user.id))
        return user

    async def update_profile(
        self,
        user_id: UserId,
        nickname: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """Change display metadata. Fields left as None are kept.

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span("identity_service.update_profile", user_id=str(user_id)):
            changes = {
                field: value
                for field, value in (
                    ("nickname", nickname),
                    ("profile_image_url", profile_image_url),
                )
                if value is not None
            }
            if changes:
                user = await self.user_repository.update(user_id, changes)
            else:
                user = await self.user_repository.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User", str(user_id))

            logfire.info("Profile updated", user_id=str(user_id), fields=sorted(changes))
            return user
