"""Unit tests for the User model invariants."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from posty.domain.model import User
from posty.domain.value import CodePurpose, Platform, UserId


class TestUserInvariants:
    """Tests for User model validation."""

    def test_platform_user(self):
        """Platform identity alone is a valid user."""
        user = User(id=UserId(uuid4()), platform=Platform.NAVER, platform_user_id="n1")

        assert user.has_password is False
        assert user.verified is False

    def test_password_user(self):
        """Email and password alone is a valid user."""
        user = User(id=UserId(uuid4()), email="a@example.com", password_hash="h")

        assert user.has_password is True

    def test_user_needs_a_login_method(self):
        """Neither platform nor email is rejected."""
        with pytest.raises(ValidationError):
            User(id=UserId(uuid4()))

    def test_platform_pair_must_be_complete(self):
        """Platform without a platform user ID is rejected."""
        with pytest.raises(ValidationError):
            User(id=UserId(uuid4()), platform=Platform.KAKAO, email="a@example.com")

    def test_pending_password_requires_reset_code(self):
        """A staged password cannot exist without its reset code."""
        with pytest.raises(ValidationError):
            User(
                id=UserId(uuid4()),
                email="a@example.com",
                password_hash="h",
                pending_password_hash="p",
            )

    def test_code_for_reads_purpose_field(self):
        """code_for() should return the code stored for each purpose."""
        user = User(
            id=UserId(uuid4()),
            email="a@example.com",
            email_verification_code="v",
            password_reset_code="r",
            pending_password_hash="p",
        )

        assert user.code_for(CodePurpose.EMAIL_VERIFY) == "v"
        assert user.code_for(CodePurpose.PASSWORD_RESET) == "r"

    def test_user_is_immutable(self):
        """Changes must go through model_copy."""
        user = User(id=UserId(uuid4()), email="a@example.com")

        with pytest.raises(ValidationError):
            user.verified = True
