"""Test configuration and fixtures."""

import os

# Settings are read from the environment when first built, so these must be
# in place before any container is created
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__JWT_SECRET", "test-secret-key-at-least-32-bytes-long")
os.environ.setdefault("AUTH__BCRYPT_ROUNDS", "4")  # Minimum bcrypt cost

import logfire  # noqa: E402
import pytest  # noqa: E402

from posty.config import AuthSettings  # noqa: E402

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def auth_settings() -> AuthSettings:
    """Auth settings with a fixed secret and cheap hashing."""
    return AuthSettings(
        jwt_secret="test-secret-key-at-least-32-bytes-long",
        bcrypt_rounds=4,
    )
