"""User use cases."""

from .update_user_profile import NotAuthenticatedError, UpdateUserProfileUseCase

__all__ = ["NotAuthenticatedError", "UpdateUserProfileUseCase"]
