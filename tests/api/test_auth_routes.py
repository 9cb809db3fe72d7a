"""API tests for the authentication routes."""

import pytest
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from posty.adapter.email import MockNotificationSender
from posty.domain.error import ConflictError
from posty.domain.service import IdentityService
from posty.interface.api.app import create_app
from tests.api.helpers import mailed_code, redirect_target
from tests.di import build_test_container


def _signup(client: TestClient, email: str = "a@example.com", password: str = "pw1"):
    return client.post("/auth/signup", json={"email": email, "password": password})


class TestPlatformLogin:
    """Tests for /auth/login and /auth/callback/{platform}."""

    def test_initiate_login_returns_authorization_url(self, client: TestClient):
        """Should return the platform authorization URL."""
        response = client.post("/auth/login", json={"platform": "kakao"})

        assert response.status_code == 200
        url = response.json()["authorization_url"]
        assert url.startswith("https://kakao.example.com/oauth/authorize")
        assert "mock=true" in url

    def test_initiate_login_rejects_unknown_platform(self, client: TestClient):
        """Unsupported platforms fail validation."""
        response = client.post("/auth/login", json={"platform": "twitter"})

        assert response.status_code == 422

    def test_callback_sets_cookie_and_redirects_home(self, client: TestClient):
        """Successful callback should log the user in."""
        response = client.get(
            "/auth/callback/naver", params={"code": "u1", "state": "s1"}
        )

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/"
        assert "info" in params
        assert "access_token" in response.cookies

        me = client.get("/auth/me").json()
        assert me["authenticated"] is True
        assert me["user"]["platform"] == "naver"
        assert me["user"]["verified"] is True

    def test_callback_failure_redirects_with_error(self, client: TestClient):
        """Rejected authorization should not set a cookie."""
        response = client.get(
            "/auth/callback/kakao", params={"code": "invalid", "state": "s1"}
        )

        assert response.status_code == 303
        _, params = redirect_target(response)
        assert "error" in params
        assert "access_token" not in response.cookies

    def test_callback_domain_error_redirects_with_error(
        self, client: TestClient, monkeypatch
    ):
        """An account that cannot be created should not surface as a 500."""

        async def conflicting_login(self, *args, **kwargs):
            raise ConflictError("User already exists")

        monkeypatch.setattr(
            IdentityService, "login_or_create_by_platform", conflicting_login
        )

        response = client.get(
            "/auth/callback/facebook", params={"code": "u1", "state": "s1"}
        )

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/"
        assert params["error"] == "Login failed. Please try again."
        assert "access_token" not in response.cookies


class TestSignup:
    """Tests for POST /auth/signup."""

    def test_signup_sets_cookie_and_mails_verification(
        self, client: TestClient, mailbox: MockNotificationSender
    ):
        """Signup should log in right away and send the verification link."""
        response = _signup(client)

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/"
        assert "info" in params
        assert "access_token" in response.cookies
        assert mailbox.last_to("a@example.com").subject == "Verify your email"

        me = client.get("/auth/me").json()
        assert me["authenticated"] is True
        assert me["user"]["email"] == "a@example.com"
        assert me["user"]["verified"] is False

    def test_session_cookie_attributes(self, client: TestClient):
        """Session cookie should be HTTP-only with the configured lifetime."""
        response = _signup(client)

        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("access_token=")
        assert "httponly" in cookie
        assert "samesite=lax" in cookie
        assert f"max-age={30 * 24 * 60 * 60}" in cookie
        assert "path=/" in cookie

    @pytest.mark.parametrize(
        "body", [{}, {"email": "a@example.com"}, {"password": "pw"}, {"email": "", "password": ""}]
    )
    def test_missing_credentials_redirect_to_signup(self, client: TestClient, body):
        """Missing fields should redirect back with an error."""
        response = client.post("/auth/signup", json=body)

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/signup"
        assert "error" in params
        assert "access_token" not in response.cookies

    def test_duplicate_email_redirects_to_signup(self, client: TestClient):
        """A taken email should redirect back with an error."""
        _signup(client)
        client.cookies.clear()

        response = _signup(client, password="other")

        path, params = redirect_target(response)
        assert path == "/signup"
        assert "already exists" in params["error"]

    def test_mail_failure_redirects_with_generic_error(
        self, client: TestClient, mailbox: MockNotificationSender, user_repository
    ):
        """Infrastructure failures should not leak details or leave a user."""
        mailbox.fail = True

        response = _signup(client)

        path, params = redirect_target(response)
        assert path == "/signup"
        assert params["error"] == "Something went wrong. Please try again later."
        assert client.portal.call(user_repository.find_by_email, "a@example.com") is None


class TestVerifyEmail:
    """Tests for GET /auth/verify-email."""

    def test_verify_marks_user_verified(
        self, client: TestClient, mailbox: MockNotificationSender
    ):
        """Following the link should verify the account."""
        _signup(client)
        code = mailed_code(mailbox, "a@example.com")

        response = client.get("/auth/verify-email", params={"code": code})

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/"
        assert "info" in params
        assert client.get("/auth/me").json()["user"]["verified"] is True

    def test_replayed_code_is_bad_request(
        self, client: TestClient, mailbox: MockNotificationSender
    ):
        """A consumed code should give a bare 400."""
        _signup(client)
        code = mailed_code(mailbox, "a@example.com")
        client.get("/auth/verify-email", params={"code": code})

        response = client.get("/auth/verify-email", params={"code": code})

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.parametrize("params", [{}, {"code": ""}, {"code": "nope"}])
    def test_missing_or_unknown_code_is_bad_request(self, client: TestClient, params):
        response = client.get("/auth/verify-email", params=params)

        assert response.status_code == 400


class TestSignin:
    """Tests for POST /auth/signin."""

    def test_signin_sets_cookie(self, client: TestClient):
        """Correct credentials should log in."""
        _signup(client)
        client.cookies.clear()

        response = client.post(
            "/auth/signin", json={"email": "a@example.com", "password": "pw1"}
        )

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/"
        assert "info" in params
        assert "access_token" in response.cookies

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient):
        """Both failures should give the same error redirect."""
        _signup(client)
        client.cookies.clear()

        wrong_password = client.post(
            "/auth/signin", json={"email": "a@example.com", "password": "nope"}
        )
        unknown_email = client.post(
            "/auth/signin", json={"email": "b@example.com", "password": "pw1"}
        )

        assert redirect_target(wrong_password) == redirect_target(unknown_email)
        assert redirect_target(wrong_password)[1]["error"]
        assert "access_token" not in wrong_password.cookies

    def test_missing_credentials_redirect_home_with_error(self, client: TestClient):
        response = client.post("/auth/signin", json={"email": "a@example.com"})

        path, params = redirect_target(response)
        assert path == "/"
        assert "error" in params


class TestPasswordReset:
    """Tests for the password reset routes."""

    def test_full_reset_flow(self, client: TestClient, mailbox: MockNotificationSender):
        """Request, confirm, then sign in with the new password."""
        _signup(client, password="old")
        client.cookies.clear()

        response = client.post(
            "/auth/request-reset-password",
            json={"email": "a@example.com", "password": "new"},
        )
        path, params = redirect_target(response)
        assert path == "/"
        assert "info" in params
        assert mailbox.last_to("a@example.com").subject == "Reset your password"

        code = mailed_code(mailbox, "a@example.com")
        response = client.get("/auth/reset-password", params={"code": code})
        assert response.status_code == 303
        assert "info" in redirect_target(response)[1]

        signin = client.post(
            "/auth/signin", json={"email": "a@example.com", "password": "new"}
        )
        assert "access_token" in signin.cookies

        replay = client.get("/auth/reset-password", params={"code": code})
        assert replay.status_code == 400

    def test_unknown_email_is_not_disclosed(
        self, client: TestClient, mailbox: MockNotificationSender
    ):
        """Unknown emails get the same answer as known ones."""
        _signup(client)

        known = client.post(
            "/auth/request-reset-password",
            json={"email": "a@example.com", "password": "new"},
        )
        unknown = client.post(
            "/auth/request-reset-password",
            json={"email": "ghost@example.com", "password": "new"},
        )

        assert redirect_target(known) == redirect_target(unknown)
        assert mailbox.last_to("ghost@example.com") is None

    def test_missing_fields_redirect_to_request_page(self, client: TestClient):
        response = client.post(
            "/auth/request-reset-password", json={"email": "a@example.com"}
        )

        path, params = redirect_target(response)
        assert path == "/request-reset-password"
        assert "error" in params

    @pytest.mark.parametrize("params", [{}, {"code": "nope"}])
    def test_missing_or_unknown_code_is_bad_request(self, client: TestClient, params):
        response = client.get("/auth/reset-password", params=params)

        assert response.status_code == 400
        assert response.content == b""


class TestDisclosedResetErrors:
    """Reset requests with ``auth.disclose_unknown_reset_email`` enabled."""

    @pytest.fixture
    def disclosing_client(self, monkeypatch):
        monkeypatch.setenv("AUTH__DISCLOSE_UNKNOWN_RESET_EMAIL", "true")
        container = build_test_container(None, FastapiProvider())
        with TestClient(create_app(container), follow_redirects=False) as test_client:
            yield test_client

    def test_unknown_email_is_reported(self, disclosing_client: TestClient):
        response = disclosing_client.post(
            "/auth/request-reset-password",
            json={"email": "ghost@example.com", "password": "new"},
        )

        path, params = redirect_target(response)
        assert path == "/request-reset-password"
        assert params["error"] == "No account exists with this email."


class TestSessionRoutes:
    """Tests for /auth/me and /auth/logout."""

    def test_me_without_cookie_is_anonymous(self, client: TestClient):
        assert client.get("/auth/me").json() == {
            "authenticated": False,
            "user": None,
        }

    def test_me_with_invalid_cookie_is_anonymous(self, client: TestClient):
        client.cookies.set("access_token", "garbage")

        assert client.get("/auth/me").json()["authenticated"] is False

    def test_me_never_exposes_credentials(self, client: TestClient):
        _signup(client)

        user = client.get("/auth/me").json()["user"]

        assert "password_hash" not in user
        assert "email_verification_code" not in user
        assert "pending_password_hash" not in user

    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_logout_clears_cookie(self, client: TestClient, method: str):
        _signup(client)

        response = client.request(method, "/auth/logout")

        assert response.status_code == 303
        assert redirect_target(response)[0] == "/"
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("access_token=")
        assert "max-age=0" in cookie
        assert client.get("/auth/me").json()["authenticated"] is False


class TestCredentialBodies:
    """Signup, signin and reset accept form posts and never answer with 422."""

    def test_form_signup_and_signin(self, client: TestClient):
        """The HTML forms post urlencoded fields."""
        signup = client.post(
            "/auth/signup", data={"email": "f@example.com", "password": "pw"}
        )

        assert signup.status_code == 303
        assert redirect_target(signup)[0] == "/"
        assert "access_token" in signup.cookies

        client.cookies.clear()
        signin = client.post(
            "/auth/signin", data={"email": "f@example.com", "password": "pw"}
        )

        assert signin.status_code == 303
        assert "info" in redirect_target(signin)[1]
        assert "access_token" in signin.cookies

    def test_form_reset_request(
        self, client: TestClient, mailbox: MockNotificationSender
    ):
        _signup(client, email="f@example.com")

        response = client.post(
            "/auth/request-reset-password",
            data={"email": "f@example.com", "password": "new"},
        )

        assert response.status_code == 303
        assert "info" in redirect_target(response)[1]
        assert mailbox.last_to("f@example.com").subject == "Reset your password"

    @pytest.mark.parametrize(
        ("path", "destination"),
        [
            ("/auth/signup", "/signup"),
            ("/auth/signin", "/"),
            ("/auth/request-reset-password", "/request-reset-password"),
        ],
    )
    def test_missing_body_redirects_with_error(
        self, client: TestClient, path: str, destination: str
    ):
        response = client.post(path)

        assert response.status_code == 303
        redirect_path, params = redirect_target(response)
        assert redirect_path == destination
        assert "error" in params

    @pytest.mark.parametrize(
        "content",
        [b"{not json", b"[1, 2]", b'{"email": 5, "password": "secret-pw"}'],
    )
    def test_unreadable_json_redirects_without_echoing_input(
        self, client: TestClient, content: bytes
    ):
        """Malformed bodies get the same redirect as missing fields."""
        response = client.post(
            "/auth/signup",
            content=content,
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 303
        path, params = redirect_target(response)
        assert path == "/signup"
        assert "error" in params
        assert b"secret-pw" not in response.content
        assert "secret-pw" not in response.headers["location"]

    def test_email_case_does_not_create_second_account(self, client: TestClient):
        _signup(client, email="Case@Example.com")
        client.cookies.clear()

        response = _signup(client, email="case@example.com", password="pw2")

        path, params = redirect_target(response)
        assert path == "/signup"
        assert "error" in params
        assert "access_token" not in response.cookies
