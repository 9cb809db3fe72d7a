"""PostgreSQL implementation of User repository."""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import logfire
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from posty.domain.error import ConflictError
from posty.domain.model import User
from posty.domain.repository import UserRepository
from posty.domain.value import CodePurpose, Platform, UserId
from posty.persistence.mappers import changes_to_columns, row_to_user, user_to_dict
from posty.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository.

    Conditional updates are a single ``UPDATE ... WHERE ... RETURNING``
    statement, so compare-and-set is atomic per row.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _find_one(self, *conditions) -> Optional[User]:
        stmt = select(users_table).where(*conditions)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(row) if row else None

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return await self._find_one(users_table.c.id == user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        return await self._find_one(users_table.c.email == email)

    async def find_by_platform_identity(
        self, platform: Platform, platform_user_id: str
    ) -> Optional[User]:
        """Find a user by their external platform identity."""
        return await self._find_one(
            users_table.c.platform == platform.value,
            users_table.c.platform_user_id == platform_user_id,
        )

    async def find_by_code(self, purpose: CodePurpose, code: str) -> Optional[User]:
        """Find the user holding an outstanding one-time code."""
        return await self._find_one(users_table.c[purpose.field] == code)

    async def insert(self, user: User) -> User:
        """Insert a new user.

        Runs inside a savepoint so a unique violation leaves the request
        transaction usable.

        Raises:
            ConflictError: If the email or platform identity is taken
        """
        stmt = users_table.insert().values(**user_to_dict(user))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            logfire.warn("User insert violated a constraint", error=str(e.orig))
            raise ConflictError("User already exists") from e
        return user

    async def update(
        self,
        user_id: UserId,
        changes: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        """Apply a conditional partial update to one user.

        Returns:
            The updated user, or None if no row matched
        """
        unknown = (set(changes) | set(expected or {})) - set(users_table.c.keys())
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        stmt = users_table.update().where(users_table.c.id == user_id)
        for field, value in changes_to_columns(expected or {}).items():
            column = users_table.c[field]
            stmt = stmt.where(column.is_(None) if value is None else column == value)

        values = {**changes_to_columns(changes), "updated_at": datetime.now(timezone.utc)}
        stmt = stmt.values(**values).returning(*users_table.c)

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_user(row) if row else None

    async def delete(self, user_id: UserId) -> None:
        """Delete a user."""
        stmt = users_table.delete().where(users_table.c.id == user_id)
        await self.session.execute(stmt)
        await self.session.flush()
