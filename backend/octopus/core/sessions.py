"""Session Payloads - what lives inside the encrypted user and anonymous cookies.

Invariants:
    - An authenticated cookie older than AUTHENTICATED_SESSION_DURATION is stale
    - An authenticated cookie with id == 0 is a legacy (pre-user-table) cookie: rejected
    - An anonymous session older than SESSION_DURATION is stale
    - Pure: callers pass `now`, nothing here reads the clock implicitly

Design Decisions:
    - Payloads are dataclasses with to_dict/from_dict so the codec (infrastructure/secure_cookie.py)
      stays ignorant of the payload shape
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone

from octopus.core.errors import CookieError

USER_COOKIE_NAME = "tru-user"
REFERRER_COOKIE_NAME = "tru-referrer"
ANON_SESSION_COOKIE_NAME = "tru-session"
USER_SIGNED_UP_COOKIE_NAME = "sign-up"
WEB_VERSION_COOKIE_NAME = "web_version"

SESSION_DURATION = timedelta(days=365)
AUTHENTICATED_SESSION_DURATION = timedelta(days=30)
REFERRER_COOKIE_DURATION = timedelta(seconds=120)
USER_SIGNED_UP_COOKIE_DURATION = timedelta(minutes=5)


@dataclass
class AuthenticatedUser:
    """Identity carried by the tru-user cookie."""
    id: int
    address: str
    authenticated_at: int  # unix seconds

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AuthenticatedUser":
        try:
            return cls(
                id=int(data.get("id", 0)),
                address=str(data["address"]),
                authenticated_at=int(data["authenticated_at"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CookieError(f"Malformed user cookie: {e}")


@dataclass
class AnonymousSession:
    """Tracking id carried by the tru-session cookie."""
    session_id: str
    creation_time: int  # unix seconds

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AnonymousSession":
        try:
            return cls(
                session_id=str(data["session_id"]),
                creation_time=int(data["creation_time"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CookieError(f"Malformed session cookie: {e}")


def is_stale(user: AuthenticatedUser, now: datetime) -> bool:
    """True when the login is older than the accepted period."""
    authenticated_at = datetime.fromtimestamp(user.authenticated_at, timezone.utc)
    return authenticated_at < now - AUTHENTICATED_SESSION_DURATION


def validate_authenticated_user(
    user: AuthenticatedUser, now: datetime,
) -> AuthenticatedUser:
    """Reject legacy and stale logins."""
    if user.id == 0:
        raise CookieError("Legacy twitter auth cookie found")
    if is_stale(user, now):
        raise CookieError("Stale cookie found")
    return user


def validate_anonymous_session(
    session: AnonymousSession, now: datetime,
) -> AnonymousSession:
    created = datetime.fromtimestamp(session.creation_time, timezone.utc)
    if now > created + SESSION_DURATION:
        raise CookieError("stale cookie found")
    return session
