"""Test helpers - logins and a recording stand-in for the notification dispatcher."""

import time

from octopus.api.dependencies import secure_cookie_for
from octopus.config import get_settings
from octopus.core.sessions import USER_COOKIE_NAME, AuthenticatedUser


class RecordingDispatcher:
    """Stands in for NotificationDispatcher: publish() only records."""

    def __init__(self):
        self.published = []

    async def publish(self, notification) -> None:
        self.published.append(notification)


def login_cookie(user_id: int, address: str, authenticated_at: int | None = None) -> str:
    user = AuthenticatedUser(
        id=user_id,
        address=address,
        authenticated_at=int(time.time()) if authenticated_at is None else authenticated_at,
    )
    return secure_cookie_for(get_settings()).encode(USER_COOKIE_NAME, user.to_dict())


def login_headers(user_id: int, address: str, authenticated_at: int | None = None) -> dict:
    """Cookie header carrying a tru-user login."""
    return {"Cookie": f"{USER_COOKIE_NAME}={login_cookie(user_id, address, authenticated_at)}"}
