"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Mapping
from uuid import UUID

from posty.domain.model import User
from posty.domain.value import Platform, UserId


def row_to_user(row: Mapping[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row mapping

    Returns:
        User domain model
    """
    raw_id = row["id"]
    platform = row.get("platform")
    return User(
        id=UserId(UUID(raw_id) if isinstance(raw_id, str) else raw_id),
        platform=Platform(platform) if platform else None,
        platform_user_id=row.get("platform_user_id"),
        email=row.get("email"),
        password_hash=row.get("password_hash"),
        nickname=row.get("nickname"),
        profile_image_url=row.get("profile_image_url"),
        verified=row["verified"],
        email_verification_code=row.get("email_verification_code"),
        password_reset_code=row.get("password_reset_code"),
        pending_password_hash=row.get("pending_password_hash"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion
    """
    data = user.model_dump()
    data["platform"] = user.platform.value if user.platform else None
    return data


def changes_to_columns(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a partial domain update to column values."""
    return {
        key: value.value if isinstance(value, Platform) else value
        for key, value in changes.items()
    }
