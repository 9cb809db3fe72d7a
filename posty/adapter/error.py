"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class PlatformOAuthError(ProviderError):
    """Login platform OAuth exchange failed."""

    pass
