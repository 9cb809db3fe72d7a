"""Mock providers for testing."""

from .email import MockEmailProvider
from .persistence import MockPersistenceProvider
from .platform import MockPlatformProvider
from .container import build_test_container

__all__ = [
    "MockEmailProvider",
    "MockPersistenceProvider",
    "MockPlatformProvider",
    "build_test_container",
]
