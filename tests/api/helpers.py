"""Helpers shared by the API tests."""

from urllib.parse import parse_qs, urlparse

from posty.adapter.email import MockNotificationSender


def redirect_target(response) -> tuple[str, dict[str, str]]:
    """Split a redirect Location into path and flash message params."""
    location = urlparse(response.headers["location"])
    params = {key: values[0] for key, values in parse_qs(location.query).items()}
    return location.path or "/", params


def mailed_code(mailbox: MockNotificationSender, email: str) -> str:
    """Extract the code from the latest link mailed to ``email``."""
    link = mailbox.last_to(email).body.split()[-1]
    return parse_qs(urlparse(link).query)["code"][0]
