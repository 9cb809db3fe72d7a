"""Platform OAuth 2.0 client implementation.

Implements the authorization code grant shared by Kakao, Facebook and
Naver. Only the shape of the user-info response differs per platform.
"""

from typing import Any, Callable
from urllib.parse import urlencode

import httpx
import logfire

from posty.adapter.error import PlatformOAuthError
from posty.config import PlatformOAuthSettings
from posty.domain.service.platform_auth_service import PlatformOAuthClient
from posty.domain.value import Platform, PlatformProfile


def _parse_kakao(data: dict[str, Any]) -> PlatformProfile:
    account = data.get("kakao_account") or {}
    profile = account.get("profile") or {}
    properties = data.get("properties") or {}
    return PlatformProfile(
        platform=Platform.KAKAO,
        platform_user_id=str(data["id"]),
        nickname=profile.get("nickname") or properties.get("nickname"),
        profile_image_url=profile.get("profile_image_url")
        or properties.get("profile_image"),
        email=account.get("email"),
    )


def _parse_facebook(data: dict[str, Any]) -> PlatformProfile:
    picture = (data.get("picture") or {}).get("data") or {}
    return PlatformProfile(
        platform=Platform.FACEBOOK,
        platform_user_id=str(data["id"]),
        nickname=data.get("name"),
        profile_image_url=picture.get("url"),
        email=data.get("email"),
    )


def _parse_naver(data: dict[str, Any]) -> PlatformProfile:
    response = data.get("response") or {}
    return PlatformProfile(
        platform=Platform.NAVER,
        platform_user_id=str(response["id"]),
        nickname=response.get("nickname"),
        profile_image_url=response.get("profile_image"),
        email=response.get("email"),
    )


PROFILE_PARSERS: dict[Platform, Callable[[dict[str, Any]], PlatformProfile]] = {
    Platform.KAKAO: _parse_kakao,
    Platform.FACEBOOK: _parse_facebook,
    Platform.NAVER: _parse_naver,
}


class RealPlatformOAuthClient(PlatformOAuthClient):
    """OAuth 2.0 authorization code client for one platform."""

    def __init__(
        self,
        platform: Platform,
        settings: PlatformOAuthSettings,
        redirect_uri: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize platform OAuth client.

        Args:
            platform: Platform this client talks to
            settings: Client credentials and endpoint URLs
            redirect_uri: Callback URL registered with the platform
            timeout: HTTP timeout in seconds
        """
        self.platform = platform
        self.settings = settings
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._parse_profile = PROFILE_PARSERS[platform]

        # States handed out by initiate_authorization, checked on callback
        # In production, use Redis or similar for multiple workers
        self._pending_states: set[str] = set()

    async def initiate_authorization(self, state: str) -> str:
        """Build the platform authorization URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        self._pending_states.add(state)

        params = {
            "response_type": "code",
            "client_id": self.settings.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        if self.settings.scope:
            params["scope"] = self.settings.scope

        logfire.info(
            "Platform OAuth authorization initiated",
            platform=self.platform.value,
            redirect_uri=self.redirect_uri,
        )
        return f"{self.settings.authorize_url}?{urlencode(params)}"

    async def complete_authorization(self, code: str, state: str) -> PlatformProfile:
        """Exchange the code and fetch the user's platform profile.

        Raises:
            PlatformOAuthError: If the state is unknown or a request fails
        """
        if state not in self._pending_states:
            raise PlatformOAuthError("Invalid or reused OAuth state")
        self._pending_states.discard(state)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            access_token = await self._exchange_code_for_token(client, code, state)
            user_info = await self._get_user_info(client, access_token)

        try:
            profile = self._parse_profile(user_info)
        except (KeyError, TypeError, ValueError) as e:
            raise PlatformOAuthError(f"Unexpected user info payload: {e}") from e

        logfire.info(
            "Platform OAuth completed",
            platform=self.platform.value,
            platform_user_id=profile.platform_user_id,
        )
        return profile

    async def _exchange_code_for_token(
        self, client: httpx.AsyncClient, code: str, state: str
    ) -> str:
        data = {
            "grant_type": "authorization_code",
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "redirect_uri": self.redirect_uri,
            "code": code,
            "state": state,
        }
        try:
            response = await client.post(
                self.settings.token_url,
                data=data,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Platform token exchange HTTP error",
                platform=self.platform.value,
                error=str(e),
            )
            raise PlatformOAuthError(f"HTTP error during token exchange: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Platform token exchange failed",
                platform=self.platform.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise PlatformOAuthError(f"Token exchange failed: {response.status_code}")

        access_token = response.json().get("access_token")
        if not access_token:
            raise PlatformOAuthError("Token response did not include an access token")
        return access_token

    async def _get_user_info(
        self, client: httpx.AsyncClient, access_token: str
    ) -> dict[str, Any]:
        try:
            response = await client.get(
                self.settings.user_info_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Platform user info HTTP error",
                platform=self.platform.value,
                error=str(e),
            )
            raise PlatformOAuthError(f"HTTP error fetching user info: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Platform user info request failed",
                platform=self.platform.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise PlatformOAuthError(
                f"User info request failed: {response.status_code}"
            )

        return response.json()


class MockPlatformOAuthClient(PlatformOAuthClient):
    """Mock platform OAuth client for testing.

    Returns deterministic profiles without making real API calls. The
    authorization code is used as the platform user ID so tests can log
    in as several distinct users.
    """

    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    async def initiate_authorization(self, state: str) -> str:
        """Return mock authorization URL."""
        return (
            f"https://{self.platform.value}.example.com/oauth/authorize"
            f"?state={state}&mock=true"
        )

    async def complete_authorization(self, code: str, state: str) -> PlatformProfile:
        """Return a mock profile keyed by the authorization code."""
        if code == "invalid":
            raise PlatformOAuthError("Mock authorization rejected")
        return PlatformProfile(
            platform=self.platform,
            platform_user_id=f"{self.platform.value}-{code}",
            nickname=f"mock {self.platform.value} user",
            profile_image_url="https://example.com/avatar.jpg",
        )
