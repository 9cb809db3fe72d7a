"""Domain model entities for Posty."""

from posty.domain.model.user import User

__all__ = [
    "User",
]
