"""In-memory user repository for testing."""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from posty.domain.error import ConflictError
from posty.domain.model.user import User
from posty.domain.repository.user import UserRepository
from posty.domain.value import CodePurpose, Platform, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    def _find(self, **criteria: Any) -> Optional[User]:
        for user in self._users.values():
            if all(getattr(user, key) == value for key, value in criteria.items()):
                return user
        return None

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        return self._find(email=email)

    async def find_by_platform_identity(
        self, platform: Platform, platform_user_id: str
    ) -> Optional[User]:
        """Find a user by their external platform identity."""
        return self._find(platform=platform, platform_user_id=platform_user_id)

    async def find_by_code(self, purpose: CodePurpose, code: str) -> Optional[User]:
        """Find the user holding an outstanding one-time code."""
        return self._find(**{purpose.field: code})

    async def insert(self, user: User) -> User:
        """Insert a new user, enforcing the unique fields."""
        if user.id in self._users:
            raise ConflictError("User already exists")
        if user.email is not None and self._find(email=user.email):
            raise ConflictError("User already exists")
        if user.platform is not None and self._find(
            platform=user.platform, platform_user_id=user.platform_user_id
        ):
            raise ConflictError("User already exists")
        self._users[user.id] = user
        return user

    async def update(
        self,
        user_id: UserId,
        changes: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        """Apply a conditional partial update to one user."""
        unknown = (set(changes) | set(expected or {})) - set(User.model_fields)
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        user = self._users.get(user_id)
        if user is None:
            return None
        for field, value in (expected or {}).items():
            if getattr(user, field) != value:
                return None

        updated = user.model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        self._users[user_id] = updated
        return updated

    async def delete(self, user_id: UserId) -> None:
        """Delete a user."""
        self._users.pop(user_id, None)
