"""Infrastructure providers."""

# Import bases
from .email import EmailProvider
from .persistence import PersistenceProvider
from .platform import PlatformProvider

# Import implementations (needed for __subclasses__())
from .email import ProdEmailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .platform import ProdPlatformProvider  # noqa: F401

__all__ = [
    "EmailProvider",
    "PersistenceProvider",
    "PlatformProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
    "ProdPlatformProvider",
]
