"""One-time code domain service."""

import secrets
from typing import Any, Mapping, Optional

import logfire

from posty.domain.error import NotFoundError
from posty.domain.model import User
from posty.domain.repository import UserRepository
from posty.domain.value import CodePurpose, UserId

from .base import Service


class OneTimeCodeRegistry(Service):
    """Issues and consumes single-use codes stored on the user record.

    Each user holds at most one outstanding code per purpose; issuing a
    new one replaces the old one. Consumption is a compare-and-set on the
    code column, so two concurrent confirmations of the same code cannot
    both succeed.
    """

    CODE_BYTES = 32

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize one-time code registry.

        Args:
            user_repository: User repository holding the codes
        """
        self.user_repository = user_repository

    @classmethod
    def generate_code(cls) -> str:
        """Return a new URL-safe, unguessable code."""
        return secrets.token_urlsafe(cls.CODE_BYTES)

    async def issue_code(
        self,
        user_id: UserId,
        purpose: CodePurpose,
        extra_changes: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Issue a code for a user, replacing any outstanding one.

        Args:
            user_id: Owner of the code
            purpose: What the code will confirm
            extra_changes: Other fields written in the same update

        Returns:
            The new code

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span(
            "one_time_code_registry.issue_code",
            user_id=str(user_id),
            purpose=purpose.value,
        ):
            code = self.generate_code()
            changes = {purpose.field: code, **(extra_changes or {})}
            updated = await self.user_repository.update(user_id, changes)
            if updated is None:
                logfire.warn("Cannot issue code for missing user", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            logfire.info("One-time code issued", user_id=str(user_id), purpose=purpose.value)
            return code

    async def find_owner(self, code: str, purpose: CodePurpose) -> Optional[User]:
        """Look up the user holding a code without consuming it.

        Args:
            code: Code value, matched exactly
            purpose: Which code field to search

        Returns:
            The owning user, or None
        """
        if not code:
            return None
        return await self.user_repository.find_by_code(purpose, code)

    async def consume_code(
        self,
        code: str,
        purpose: CodePurpose,
        extra_changes: Optional[Mapping[str, Any]] = None,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[UserId]:
        """Consume a code so it can never be used again.

        The code is cleared with a conditional update that only matches
        while the code is still present; ``extra_changes`` are written in
        the same update and ``expected`` adds further conditions.

        Args:
            code: Code value, matched exactly
            purpose: Which code field to search
            extra_changes: Other fields written together with the clear
            expected: Other field values that must still hold

        Returns:
            The owner's user ID, or None when the code is unknown,
            already consumed, or was superseded concurrently
        """
        with logfire.span("one_time_code_registry.consume_code", purpose=purpose.value):
            owner = await self.find_owner(code, purpose)
            if owner is None:
                logfire.info("One-time code not found", purpose=purpose.value)
                return None

            changes = {purpose.field: None, **(extra_changes or {})}
            conditions = {purpose.field: code, **(expected or {})}
            updated = await self.user_repository.update(owner.id, changes, conditions)
            if updated is None:
                logfire.warn(
                    "One-time code lost a concurrent consume",
                    user_id=str(owner.id),
                    purpose=purpose.value,
                )
                return None

            logfire.info(
                "One-time code consumed", user_id=str(owner.id), purpose=purpose.value
            )
            return owner.id

    async def revoke(
        self,
        user_id: UserId,
        purpose: CodePurpose,
        code: str,
        restore: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Undo an issued code, e.g. when its notification was not sent.

        Only applies while ``code`` is still the outstanding one, so a newer
        request is never clobbered.

        Args:
            user_id: Owner of the code
            purpose: Purpose the code was issued for
            code: The code being withdrawn
            restore: Field values to write back (defaults to clearing the code)
        """
        with logfire.span(
            "one_time_code_registry.revoke", user_id=str(user_id), purpose=purpose.value
        ):
            changes = {purpose.field: None, **(restore or {})}
            await self.user_repository.update(user_id, changes, {purpose.field: code})
            logfire.info("One-time code revoked", user_id=str(user_id), purpose=purpose.value)
