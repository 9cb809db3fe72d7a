"""initial_schema

Create the users table. A user has a platform login (Kakao, Facebook,
Naver), an email/password login, or both, plus the one-time codes for
email verification and password reset.

Revision ID: 3c1d9e0a7b42
Revises:
Create Date: 2026-10-19 10:12:04.518220

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1d9e0a7b42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("platform", sa.String(50), nullable=True),  # 'kakao', 'facebook', 'naver'
        sa.Column("platform_user_id", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("nickname", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("email_verification_code", sa.String(255), nullable=True),
        sa.Column("password_reset_code", sa.String(255), nullable=True),
        sa.Column("pending_password_hash", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "platform", "platform_user_id", name="uq_users_platform_identity"
        ),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "(platform IS NULL) = (platform_user_id IS NULL)",
            name="platform_identity_complete",
        ),
        sa.CheckConstraint(
            "platform IS NOT NULL OR email IS NOT NULL",
            name="has_login_method",
        ),
        sa.CheckConstraint(
            "pending_password_hash IS NULL OR password_reset_code IS NOT NULL",
            name="pending_password_requires_code",
        ),
    )
    op.create_index(
        "idx_users_email_verification_code", "users", ["email_verification_code"]
    )
    op.create_index(
        "idx_users_password_reset_code", "users", ["password_reset_code"]
    )

    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    op.execute("""
        CREATE TRIGGER update_users_updated_at
        BEFORE UPDATE ON users
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS update_users_updated_at ON users")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    op.drop_index("idx_users_password_reset_code", table_name="users")
    op.drop_index("idx_users_email_verification_code", table_name="users")
    op.drop_table("users")
