"""Domain value objects for Posty."""

from posty.domain.value.identifiers import UserId
from posty.domain.value.types import (
    CodePurpose,
    Platform,
    PlatformProfile,
    SessionGrant,
)

__all__ = [
    # Identifiers
    "UserId",
    # Types
    "CodePurpose",
    "Platform",
    "PlatformProfile",
    "SessionGrant",
]
