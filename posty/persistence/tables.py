"""SQLAlchemy table definitions for Posty.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("platform", String(50), nullable=True),  # 'kakao', 'facebook', 'naver'
    Column("platform_user_id", String(255), nullable=True),
    Column("email", String(255), nullable=True),
    Column("password_hash", String(255), nullable=True),
    Column("nickname", String(255), nullable=True),
    Column("profile_image_url", Text, nullable=True),
    Column("verified", Boolean, nullable=False, server_default="false"),
    Column("email_verification_code", String(255), nullable=True),
    Column("password_reset_code", String(255), nullable=True),
    Column("pending_password_hash", String(255), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("platform", "platform_user_id", name="uq_users_platform_identity"),
    UniqueConstraint("email", name="uq_users_email"),
    CheckConstraint(
        "(platform IS NULL) = (platform_user_id IS NULL)",
        name="platform_identity_complete",
    ),
    CheckConstraint(
        "platform IS NOT NULL OR email IS NOT NULL",
        name="has_login_method",
    ),
    CheckConstraint(
        "pending_password_hash IS NULL OR password_reset_code IS NOT NULL",
        name="pending_password_requires_code",
    ),
)

Index("idx_users_email_verification_code", users_table.c.email_verification_code)
Index("idx_users_password_reset_code", users_table.c.password_reset_code)
