"""Session payloads - legacy, stale and malformed cookies are rejected."""

from datetime import datetime, timedelta, timezone

import pytest

from octopus.core.errors import CookieError
from octopus.core.sessions import (
    AUTHENTICATED_SESSION_DURATION,
    SESSION_DURATION,
    AnonymousSession,
    AuthenticatedUser,
    is_stale,
    validate_anonymous_session,
    validate_authenticated_user,
)

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _ts(dt: datetime) -> int:
    return int(dt.timestamp())


def test_fresh_login_is_accepted():
    user = AuthenticatedUser(id=1, address="cosmos1x", authenticated_at=_ts(NOW))
    assert validate_authenticated_user(user, NOW) is user


def test_legacy_cookie_without_id_is_rejected():
    user = AuthenticatedUser(id=0, address="cosmos1x", authenticated_at=_ts(NOW))
    with pytest.raises(CookieError, match="Legacy"):
        validate_authenticated_user(user, NOW)


def test_stale_login_is_rejected():
    logged_in = NOW - AUTHENTICATED_SESSION_DURATION - timedelta(seconds=1)
    user = AuthenticatedUser(id=1, address="cosmos1x", authenticated_at=_ts(logged_in))
    assert is_stale(user, NOW)
    with pytest.raises(CookieError, match="Stale"):
        validate_authenticated_user(user, NOW)


def test_from_dict_defaults_missing_id_to_legacy():
    user = AuthenticatedUser.from_dict({"address": "cosmos1x", "authenticated_at": 1})
    assert user.id == 0


def test_from_dict_rejects_malformed_payload():
    with pytest.raises(CookieError):
        AuthenticatedUser.from_dict({"id": "one"})


def test_anonymous_session_expires_after_a_year():
    created = NOW - SESSION_DURATION - timedelta(minutes=1)
    session = AnonymousSession(session_id="s", creation_time=_ts(created))
    with pytest.raises(CookieError):
        validate_anonymous_session(session, NOW)

    fresh = AnonymousSession(session_id="s", creation_time=_ts(NOW))
    assert validate_anonymous_session(fresh, NOW) is fresh
