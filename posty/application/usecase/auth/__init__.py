"""Authentication use cases."""

from .get_current_user import GetCurrentUserUseCase
from .login import PlatformLoginUseCase

__all__ = ["PlatformLoginUseCase", "GetCurrentUserUseCase"]
