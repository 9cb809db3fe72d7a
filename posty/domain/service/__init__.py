"""Domain services."""

from .base import Service
from .identity_service import IdentityService
from .notification import NotificationSender
from .one_time_code_registry import OneTimeCodeRegistry
from .password_cipher import PasswordCipher
from .platform_auth_service import PlatformAuthService, PlatformOAuthClient
from .session_token_service import SessionTokenService

__all__ = [
    "IdentityService",
    "NotificationSender",
    "OneTimeCodeRegistry",
    "PasswordCipher",
    "PlatformAuthService",
    "PlatformOAuthClient",
    "Service",
    "SessionTokenService",
]
