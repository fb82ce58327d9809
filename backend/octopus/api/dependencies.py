"""Route Dependencies - FastAPI providers for the current user and long-lived clients.

Invariants:
    - get_current_user never raises: no/invalid/legacy/stale cookie -> None
    - require_user raises NotAuthenticatedError (401) when there is no valid login
    - Long-lived clients (chain, dispatcher, storage) live on app.state, created in lifespan

Design Decisions:
    - Tests override these with app.dependency_overrides instead of patching modules
"""

from functools import lru_cache

from fastapi import Depends, Request

from octopus.api.cookies import read_authenticated_user
from octopus.config import Settings, get_settings
from octopus.core.errors import NotAuthenticatedError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.secure_cookie import SecureCookie
from octopus.infrastructure.storage import ObjectStorage
from octopus.services.notification_dispatcher import NotificationDispatcher
from octopus.services.spotlight import SpotlightRenderer


@lru_cache
def _secure_cookie(hash_key: str, encrypt_key: str) -> SecureCookie:
    return SecureCookie(hash_key, encrypt_key)


def secure_cookie_for(settings: Settings) -> SecureCookie:
    return _secure_cookie(settings.cookie_hash_key, settings.cookie_encrypt_key)


def get_secure_cookie(settings: Settings = Depends(get_settings)) -> SecureCookie:
    return secure_cookie_for(settings)


def get_current_user(
    request: Request, codec: SecureCookie = Depends(get_secure_cookie),
) -> AuthenticatedUser | None:
    return read_authenticated_user(request, codec)


def require_user(
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> AuthenticatedUser:
    if user is None:
        raise NotAuthenticatedError()
    return user


def get_chain(request: Request) -> ChainClient:
    return request.app.state.chain


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_spotlight_renderer(settings: Settings = Depends(get_settings)) -> SpotlightRenderer:
    return SpotlightRenderer(settings.spotlight_width, settings.spotlight_height)
