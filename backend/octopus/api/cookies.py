"""Cookie Helpers - reading and writing the tru-* cookies on requests and responses.

Invariants:
    - Every cookie is scoped to Path=/ and Domain=host_domain
    - tru-user and tru-session values are encrypted with SecureCookie; sign-up and
      tru-referrer are plain values
    - Reading never raises: an unusable cookie reads as None (treated as anonymous)
"""

import logging
import time
import uuid
from datetime import datetime, timezone

from fastapi import Request, Response

from octopus.config import Settings
from octopus.core.errors import CookieError
from octopus.core.sessions import (
    ANON_SESSION_COOKIE_NAME,
    AUTHENTICATED_SESSION_DURATION,
    REFERRER_COOKIE_DURATION,
    REFERRER_COOKIE_NAME,
    SESSION_DURATION,
    USER_COOKIE_NAME,
    USER_SIGNED_UP_COOKIE_DURATION,
    USER_SIGNED_UP_COOKIE_NAME,
    AnonymousSession,
    AuthenticatedUser,
    validate_anonymous_session,
    validate_authenticated_user,
)
from octopus.infrastructure.secure_cookie import SecureCookie

logger = logging.getLogger(__name__)


def read_authenticated_user(
    request: Request, codec: SecureCookie,
) -> AuthenticatedUser | None:
    value = request.cookies.get(USER_COOKIE_NAME)
    if not value:
        return None
    try:
        user = AuthenticatedUser.from_dict(codec.decode(USER_COOKIE_NAME, value))
        return validate_authenticated_user(user, datetime.now(timezone.utc))
    except CookieError as e:
        logger.debug(f"Ignoring login cookie: {e.message}", extra={"path": request.url.path})
        return None


def read_anonymous_session(
    request: Request, codec: SecureCookie,
) -> AnonymousSession | None:
    value = request.cookies.get(ANON_SESSION_COOKIE_NAME)
    if not value:
        return None
    try:
        session = AnonymousSession.from_dict(codec.decode(ANON_SESSION_COOKIE_NAME, value))
        return validate_anonymous_session(session, datetime.now(timezone.utc))
    except CookieError:
        return None


def read_referrer(request: Request) -> str | None:
    return request.cookies.get(REFERRER_COOKIE_NAME) or None


def set_referrer_cookie(response: Response, settings: Settings, referrer: str) -> None:
    response.set_cookie(
        REFERRER_COOKIE_NAME,
        referrer,
        max_age=int(REFERRER_COOKIE_DURATION.total_seconds()),
        path="/",
        domain=settings.host_domain,
        httponly=True,
    )


def set_login_cookie(
    response: Response, codec: SecureCookie, settings: Settings, user_id: int, address: str,
) -> AuthenticatedUser:
    user = AuthenticatedUser(id=user_id, address=address, authenticated_at=int(time.time()))
    response.set_cookie(
        USER_COOKIE_NAME,
        codec.encode(USER_COOKIE_NAME, user.to_dict()),
        max_age=int(AUTHENTICATED_SESSION_DURATION.total_seconds()),
        path="/",
        domain=settings.host_domain,
        httponly=True,
    )
    return user


def set_logout_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        USER_COOKIE_NAME, "", max_age=0, path="/",
        domain=settings.host_domain, httponly=True,
    )


def set_signed_up_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        USER_SIGNED_UP_COOKIE_NAME,
        "true",
        max_age=int(USER_SIGNED_UP_COOKIE_DURATION.total_seconds()),
        path="/",
        domain=settings.host_domain,
    )


def set_anonymous_session_cookie(
    response: Response, codec: SecureCookie, settings: Settings,
) -> AnonymousSession:
    session = AnonymousSession(session_id=str(uuid.uuid4()), creation_time=int(time.time()))
    response.set_cookie(
        ANON_SESSION_COOKIE_NAME,
        codec.encode(ANON_SESSION_COOKIE_NAME, session.to_dict()),
        max_age=int(SESSION_DURATION.total_seconds()),
        path="/",
        domain=settings.host_domain,
        httponly=True,
    )
    return session


def clear_anonymous_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        ANON_SESSION_COOKIE_NAME, path="/", domain=settings.host_domain, httponly=True,
    )
