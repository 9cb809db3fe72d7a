"""Platform OAuth adapter."""

from .client import (
    MockPlatformOAuthClient,
    RealPlatformOAuthClient,
)

__all__ = ["RealPlatformOAuthClient", "MockPlatformOAuthClient"]
