"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from posty.domain.model.user import User
from posty.domain.value import CodePurpose, Platform, UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations. Every write
    touches a single row, and implementations must apply each call
    atomically; the identity service relies on that for its
    check-then-set sequences instead of taking locks.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: The user's email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_platform_identity(
        self, platform: Platform, platform_user_id: str
    ) -> Optional[User]:
        """Find a user by their external platform identity.

        Args:
            platform: The login platform
            platform_user_id: The user's ID on that platform

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_code(self, purpose: CodePurpose, code: str) -> Optional[User]:
        """Find the user holding an outstanding one-time code.

        Args:
            purpose: Which code field to match
            code: Exact code value

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The inserted user

        Raises:
            ConflictError: If the email or platform identity is taken
        """
        pass

    @abstractmethod
    async def update(
        self,
        user_id: UserId,
        changes: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        """Apply a partial update to one user.

        The update only happens if every field in ``expected`` still holds
        the given value (compare-and-set).

        Args:
            user_id: The user to update
            changes: Field name to new value
            expected: Field name to value that must match before writing

        Returns:
            The updated user, or None if no row matched
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        """Delete a user.

        Args:
            user_id: The user to delete
        """
        pass
