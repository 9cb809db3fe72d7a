"""Authentication routes."""

import logging
import secrets

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from posty.adapter.error import PlatformOAuthError
from posty.application.usecase.auth import GetCurrentUserUseCase, PlatformLoginUseCase
from posty.application.usecase.auth.get_current_user import (
    CurrentUserResponse,
    GetCurrentUserRequest,
)
from posty.application.usecase.auth.login import PlatformLoginRequest
from posty.config import Settings
from posty.domain.error import (
    AuthenticationError,
    CipherError,
    ConflictError,
    DomainError,
    InvalidCodeError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from posty.domain.service import IdentityService, PlatformAuthService
from posty.domain.value import Platform
from posty.interface.api.responder import (
    clear_session_cookie,
    redirect_with_message,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

SIGNED_UP_MESSAGE = "Welcome! Check your email to verify your account."
SIGNED_IN_MESSAGE = "You are now signed in."
LOGGED_IN_MESSAGE = "You are now logged in."
RESET_REQUESTED_MESSAGE = (
    "A password reset link has been sent. Please check your email."
)
PASSWORD_CHANGED_MESSAGE = (
    "Your password has been changed. Please sign in with the new password."
)
EMAIL_VERIFIED_MESSAGE = "Your email has been verified."
UNKNOWN_EMAIL_MESSAGE = "No account exists with this email."
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."
SERVICE_ERROR_MESSAGE = "Something went wrong. Please try again later."


class InitiateLoginRequest(BaseModel):
    """Initiate login request for platform authentication."""

    platform: Platform


class InitiateLoginResponse(BaseModel):
    """Initiate login response."""

    authorization_url: str


class CredentialsRequest(BaseModel):
    """Email and password submitted by signup, signin and reset forms.

    Both fields are optional here so a missing value is answered with a
    redirect message rather than a validation error response. The forms
    post urlencoded data; JSON bodies are accepted as well.
    """

    email: str | None = None
    password: str | None = None


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return current user if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: CurrentUserResponse | None = None


async def _read_credentials(http_request: Request) -> CredentialsRequest:
    """Read credentials from a form or JSON body.

    An unreadable body yields empty credentials, which the identity service
    rejects like any other missing input.
    """
    content_type = http_request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            payload = await http_request.json()
        else:
            payload = dict(await http_request.form())
        return CredentialsRequest.model_validate(payload)
    except (ValueError, StarletteHTTPException):
        # pydantic and json decode errors are both ValueErrors
        logger.info("Ignoring unreadable credentials body")
        return CredentialsRequest()


def _signed_in_redirect(settings: Settings, token: str, info: str) -> RedirectResponse:
    # Cookies must be set on the returned response object, not an injected one
    response = redirect_with_message(settings, "/", info=info)
    set_session_cookie(response, token, settings)
    return response


@router.post("/login", response_model=InitiateLoginResponse)
async def initiate_login(
    request: InitiateLoginRequest,
    platform_auth_service: FromDishka[PlatformAuthService],
) -> InitiateLoginResponse:
    """Initiate platform OAuth login flow.

    Example:
        POST /auth/login
        {"platform": "kakao"}

        Response:
        {"authorization_url": "https://kauth.kakao.com/oauth/authorize?..."}
    """
    logger.info(f"Initiating {request.platform.value} login")

    state = secrets.token_urlsafe(32)
    try:
        auth_url = await platform_auth_service.initiate_login(request.platform, state)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return InitiateLoginResponse(authorization_url=auth_url)


@router.get("/callback/{platform}")
async def platform_callback(
    platform: Platform,
    code: str,
    state: str,
    login_use_case: FromDishka[PlatformLoginUseCase],
    settings: FromDishka[Settings],
) -> RedirectResponse:
    """Handle the platform OAuth callback and complete login.

    Sets the session cookie and redirects to the frontend.

    Example:
        GET /auth/callback/naver?code=abc123&state=xyz789
    """
    logger.info(f"OAuth callback received: platform={platform.value}")

    try:
        login_response = await login_use_case.execute(
            PlatformLoginRequest(platform=platform, code=code, state=state)
        )
    except (PlatformOAuthError, ValueError) as e:
        logger.error(f"OAuth error during {platform.value} callback: {e}")
        return redirect_with_message(settings, "/", error=LOGIN_FAILED_MESSAGE)
    except DomainError as e:
        logger.error(f"Could not sign in {platform.value} user: {e}")
        return redirect_with_message(settings, "/", error=LOGIN_FAILED_MESSAGE)

    logger.info(f"Platform login successful for user: {login_response.user_id}")
    return _signed_in_redirect(settings, login_response.token, LOGGED_IN_MESSAGE)


@router.post("/signup")
async def signup(
    http_request: Request,
    identity_service: FromDishka[IdentityService],
    settings: FromDishka[Settings],
) -> RedirectResponse:
    """Register with email and password.

    On success the session cookie is set and a verification link is mailed.
    Failures redirect back to the signup page with an error message.
    """
    request = await _read_credentials(http_request)
    try:
        grant = await identity_service.signup(request.email, request.password)
    except (ValidationError, ConflictError) as e:
        return redirect_with_message(settings, "/signup", error=str(e))
    except (NotificationError, CipherError):
        logger.exception("Signup failed on an infrastructure error")
        return redirect_with_message(settings, "/signup", error=SERVICE_ERROR_MESSAGE)

    return _signed_in_redirect(settings, grant.token, SIGNED_UP_MESSAGE)


@router.post("/signin")
async def signin(
    http_request: Request,
    identity_service: FromDishka[IdentityService],
    settings: FromDishka[Settings],
) -> RedirectResponse:
    """Sign in with email and password."""
    request = await _read_credentials(http_request)
    try:
        grant = await identity_service.signin(request.email, request.password)
    except (ValidationError, AuthenticationError) as e:
        return redirect_with_message(settings, "/", error=str(e))

    return _signed_in_redirect(settings, grant.token, SIGNED_IN_MESSAGE)


@router.post("/request-reset-password")
async def request_reset_password(
    http_request: Request,
    identity_service: FromDishka[IdentityService],
    settings: FromDishka[Settings],
) -> RedirectResponse:
    """Stage a new password and mail a confirmation link.

    An unknown email gets the same answer as a known one unless
    ``auth.disclose_unknown_reset_email`` is set.
    """
    request = await _read_credentials(http_request)
    try:
        await identity_service.request_password_reset(request.email, request.password)
    except ValidationError as e:
        return redirect_with_message(settings, "/request-reset-password", error=str(e))
    except NotFoundError:
        if settings.auth.disclose_unknown_reset_email:
            return redirect_with_message(
                settings, "/request-reset-password", error=UNKNOWN_EMAIL_MESSAGE
            )
    except (NotificationError, CipherError):
        logger.exception("Password reset request failed on an infrastructure error")
        return redirect_with_message(
            settings, "/request-reset-password", error=SERVICE_ERROR_MESSAGE
        )

    return redirect_with_message(settings, "/", info=RESET_REQUESTED_MESSAGE)


@router.get("/reset-password")
async def reset_password(
    identity_service: FromDishka[IdentityService],
    settings: FromDishka[Settings],
    code: str | None = None,
) -> Response:
    """Confirm a password reset from the mailed link."""
    if not code:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await identity_service.confirm_password_reset(code)
    except InvalidCodeError:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    return redirect_with_message(settings, "/", info=PASSWORD_CHANGED_MESSAGE)


@router.get("/verify-email")
async def verify_email(
    identity_service: FromDishka[IdentityService],
    settings: FromDishka[Settings],
    code: str | None = None,
) -> Response:
    """Confirm an email address from the mailed link."""
    if not code:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await identity_service.confirm_email_verification(code)
    except InvalidCodeError:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    return redirect_with_message(settings, "/", info=EMAIL_VERIFIED_MESSAGE)


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(settings: FromDishka[Settings]) -> RedirectResponse:
    """Logout user by clearing the session cookie."""
    response = redirect_with_message(settings, "/")
    clear_session_cookie(response, settings)
    return response


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    http_request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    settings: FromDishka[Settings],
) -> AuthStatusResponse:
    """Get current user if authenticated, or return unauthenticated status.

    Safe to call without a session: an absent, invalid or expired token
    yields ``authenticated=false`` instead of an error.

    Examples:
        Authenticated:
        {"authenticated": true, "user": {"user_id": "...", "verified": true, ...}}

        Unauthenticated:
        {"authenticated": false, "user": null}
    """
    token = http_request.cookies.get(settings.auth.session_cookie_name)
    user = await get_current_user_use_case.execute(GetCurrentUserRequest(token=token))
    if user is None:
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, user=user)
