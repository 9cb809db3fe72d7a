"""Unit tests for row mappers."""

from datetime import datetime, timezone
from uuid import uuid4

from posty.domain.model import User
from posty.domain.value import Platform, UserId
from posty.persistence.mappers import changes_to_columns, row_to_user, user_to_dict


class TestUserMappers:
    """Tests for converting users to and from rows."""

    def test_row_to_user_parses_platform_and_id(self):
        now = datetime.now(timezone.utc)
        user_id = uuid4()

        user = row_to_user(
            {
                "id": str(user_id),
                "platform": "naver",
                "platform_user_id": "nv1",
                "email": None,
                "password_hash": None,
                "nickname": "park",
                "profile_image_url": None,
                "verified": True,
                "email_verification_code": None,
                "password_reset_code": None,
                "pending_password_hash": None,
                "created_at": now,
                "updated_at": now,
            }
        )

        assert user.id == user_id
        assert user.platform is Platform.NAVER
        assert user.verified is True

    def test_user_to_dict_stores_platform_value(self):
        user = User(id=UserId(uuid4()), platform=Platform.KAKAO, platform_user_id="k")

        data = user_to_dict(user)

        assert data["platform"] == "kakao"
        assert data["platform_user_id"] == "k"

    def test_changes_to_columns_converts_enums(self):
        assert changes_to_columns({"platform": Platform.FACEBOOK, "nickname": "n"}) == {
            "platform": "facebook",
            "nickname": "n",
        }
