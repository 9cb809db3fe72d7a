"""Unit tests for OneTimeCodeRegistry."""

from uuid import uuid4

import pytest

from posty.domain.error import NotFoundError
from posty.domain.model import User
from posty.domain.service import OneTimeCodeRegistry
from posty.domain.value import CodePurpose, UserId
from posty.persistence.repository.inmemory import InMemoryUserRepository


async def _make_user(repo: InMemoryUserRepository, email: str = "a@example.com") -> User:
    user = User(id=UserId(uuid4()), email=email, password_hash="digest")
    await repo.insert(user)
    return user


class TestGenerateCode:
    """Tests for OneTimeCodeRegistry.generate_code()."""

    def test_codes_are_unique_and_url_safe(self):
        """Should produce distinct codes usable in a query string."""
        codes = {OneTimeCodeRegistry.generate_code() for _ in range(100)}

        assert len(codes) == 100
        for code in codes:
            assert len(code) >= 40
            assert all(c.isalnum() or c in "-_" for c in code)


class TestIssueCode:
    """Tests for OneTimeCodeRegistry.issue_code()."""

    @pytest.mark.asyncio
    async def test_issue_stores_code_on_user(self):
        """Issued code should be the user's outstanding code."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)

        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        stored = await repo.find_by_id(user.id)
        assert stored.email_verification_code == code
        assert stored.password_reset_code is None

    @pytest.mark.asyncio
    async def test_reissue_replaces_previous_code(self):
        """Only the latest code per purpose is outstanding."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)

        first = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)
        second = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        assert first != second
        assert await registry.find_owner(first, CodePurpose.EMAIL_VERIFY) is None
        owner = await registry.find_owner(second, CodePurpose.EMAIL_VERIFY)
        assert owner.id == user.id

    @pytest.mark.asyncio
    async def test_issue_writes_extra_changes(self):
        """Extra fields should be written with the code."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)

        code = await registry.issue_code(
            user.id,
            CodePurpose.PASSWORD_RESET,
            {"pending_password_hash": "staged"},
        )

        stored = await repo.find_by_id(user.id)
        assert stored.password_reset_code == code
        assert stored.pending_password_hash == "staged"

    @pytest.mark.asyncio
    async def test_issue_for_missing_user_raises(self):
        """Should raise NotFoundError for an unknown user."""
        registry = OneTimeCodeRegistry(InMemoryUserRepository())

        with pytest.raises(NotFoundError):
            await registry.issue_code(UserId(uuid4()), CodePurpose.EMAIL_VERIFY)


class TestConsumeCode:
    """Tests for OneTimeCodeRegistry.consume_code()."""

    @pytest.mark.asyncio
    async def test_consume_returns_owner_and_clears_code(self):
        """A consumed code should be gone from the user record."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        owner_id = await registry.consume_code(code, CodePurpose.EMAIL_VERIFY)

        assert owner_id == user.id
        stored = await repo.find_by_id(user.id)
        assert stored.email_verification_code is None

    @pytest.mark.asyncio
    async def test_code_cannot_be_consumed_twice(self):
        """Second consumption of the same code should fail."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        assert await registry.consume_code(code, CodePurpose.EMAIL_VERIFY) == user.id
        assert await registry.consume_code(code, CodePurpose.EMAIL_VERIFY) is None

    @pytest.mark.asyncio
    async def test_code_only_matches_its_purpose(self):
        """A verification code must not confirm a password reset."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        assert await registry.consume_code(code, CodePurpose.PASSWORD_RESET) is None
        stored = await repo.find_by_id(user.id)
        assert stored.email_verification_code == code

    @pytest.mark.asyncio
    async def test_unknown_and_empty_codes_match_nothing(self):
        """Should return None for codes nobody holds."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        await _make_user(repo)

        assert await registry.consume_code("nope", CodePurpose.EMAIL_VERIFY) is None
        assert await registry.consume_code("", CodePurpose.EMAIL_VERIFY) is None

    @pytest.mark.asyncio
    async def test_codes_are_matched_exactly(self):
        """Case or whitespace variants of a code must not match."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        assert await registry.consume_code(f" {code}", CodePurpose.EMAIL_VERIFY) is None
        assert await registry.consume_code(code.swapcase(), CodePurpose.EMAIL_VERIFY) is None
        assert await registry.consume_code(code, CodePurpose.EMAIL_VERIFY) == user.id

    @pytest.mark.asyncio
    async def test_consume_writes_extra_changes(self):
        """Extra changes should be applied together with the clear."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        await registry.consume_code(
            code, CodePurpose.EMAIL_VERIFY, extra_changes={"verified": True}
        )

        stored = await repo.find_by_id(user.id)
        assert stored.verified is True

    @pytest.mark.asyncio
    async def test_consume_fails_when_expected_value_changed(self):
        """Should leave the record untouched if a condition no longer holds."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(
            user.id, CodePurpose.PASSWORD_RESET, {"pending_password_hash": "new"}
        )

        owner_id = await registry.consume_code(
            code,
            CodePurpose.PASSWORD_RESET,
            extra_changes={"password_hash": "old", "pending_password_hash": None},
            expected={"pending_password_hash": "old"},
        )

        assert owner_id is None
        stored = await repo.find_by_id(user.id)
        assert stored.password_reset_code == code
        assert stored.pending_password_hash == "new"


class TestRevoke:
    """Tests for OneTimeCodeRegistry.revoke()."""

    @pytest.mark.asyncio
    async def test_revoke_clears_code(self):
        """Revoked code should no longer be outstanding."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        await registry.revoke(user.id, CodePurpose.EMAIL_VERIFY, code)

        assert await registry.find_owner(code, CodePurpose.EMAIL_VERIFY) is None

    @pytest.mark.asyncio
    async def test_revoke_restores_previous_values(self):
        """Restore values should be written back."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        old_code = await registry.issue_code(
            user.id, CodePurpose.PASSWORD_RESET, {"pending_password_hash": "first"}
        )
        new_code = await registry.issue_code(
            user.id, CodePurpose.PASSWORD_RESET, {"pending_password_hash": "second"}
        )

        await registry.revoke(
            user.id,
            CodePurpose.PASSWORD_RESET,
            new_code,
            restore={"password_reset_code": old_code, "pending_password_hash": "first"},
        )

        stored = await repo.find_by_id(user.id)
        assert stored.password_reset_code == old_code
        assert stored.pending_password_hash == "first"

    @pytest.mark.asyncio
    async def test_revoke_ignores_superseded_code(self):
        """Revoking an old code must not clear a newer one."""
        repo = InMemoryUserRepository()
        registry = OneTimeCodeRegistry(repo)
        user = await _make_user(repo)
        old_code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)
        new_code = await registry.issue_code(user.id, CodePurpose.EMAIL_VERIFY)

        await registry.revoke(user.id, CodePurpose.EMAIL_VERIFY, old_code)

        stored = await repo.find_by_id(user.id)
        assert stored.email_verification_code == new_code
