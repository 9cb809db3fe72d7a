"""Redirect and session cookie helpers shared by the routes.

Every user-facing auth outcome is a redirect back to the frontend carrying
either an ``info`` or an ``error`` message in the query string.
"""

from urllib.parse import urlencode

from fastapi import Response, status
from fastapi.responses import RedirectResponse

from posty.config import Settings


def redirect_with_message(
    settings: Settings,
    dest: str,
    *,
    info: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Redirect to a frontend path with an optional flash message.

    Args:
        settings: Application settings (for the frontend URL)
        dest: Frontend path, e.g. "/signup"
        info: Success message
        error: Error message

    Returns:
        303 redirect so a POST is followed by a GET
    """
    url = f"{settings.api.frontend_url}{dest}"
    params = {key: value for key, value in (("info", info), ("error", error)) if value}
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token as an HTTP-only cookie.

    The cookie is Secure everywhere except test and development, where the
    frontend runs on plain HTTP.
    """
    response.set_cookie(
        key=settings.auth.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Delete the session cookie with the attributes it was set with."""
    response.delete_cookie(
        key=settings.auth.session_cookie_name,
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
        samesite="lax",
    )
