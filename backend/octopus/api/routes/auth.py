"""Auth Routes - registration, mock registration and logout.

Invariants:
    - Registration validates email and username formats (422) before touching the DB
    - address, username and email are each registered at most once (422 on duplicates)
    - A new user starts with app_default_invites invites
    - referred_by comes from the body referrer, falling back to the tru-referrer cookie;
      an unknown referrer is ignored
    - Successful registration sets the tru-user login cookie and the short-lived sign-up cookie
    - /auth-logout overwrites tru-user and redirects (302) to web_auth_logout_redir

Design Decisions:
    - /mock_register exists only when app_mock_registration is set (404 otherwise), so
      staging builds can create throwaway accounts without a wallet
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.cookies import (
    read_referrer, set_login_cookie, set_logout_cookie, set_signed_up_cookie,
)
from octopus.api.dependencies import get_secure_cookie
from octopus.config import Settings, get_settings
from octopus.core.errors import BusinessRuleError, ResourceNotFoundError
from octopus.core.validation import is_valid_email, is_valid_username
from octopus.infrastructure.database import get_db
from octopus.infrastructure.secure_cookie import SecureCookie
from octopus.models.user import User
from octopus.schemas.api import RegisterRequest, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["auth"])
logout_router = APIRouter(tags=["auth"])

_BECH32_CHARS = "023456789acdefghjklmnpqrstuvwxyz"


async def _find_referrer(db: AsyncSession, referrer: str | None) -> User | None:
    if not referrer:
        return None
    result = await db.execute(
        select(User).where(
            or_(User.address == referrer, func.lower(User.username) == referrer.lower()),
        )
    )
    return result.scalars().first()


async def _ensure_unique(db: AsyncSession, address: str, username: str, email: str) -> None:
    checks = (
        (User.address == address, "This address is already registered"),
        (func.lower(User.username) == username, "This username is already taken"),
        (func.lower(User.email) == email, "This email is already registered"),
    )
    for clause, message in checks:
        exists = await db.scalar(select(func.count()).select_from(User).where(clause))
        if exists:
            raise BusinessRuleError(message, "DUPLICATE_USER")


@router.post("/register", response_model=UserResponse)
async def register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    codec: SecureCookie = Depends(get_secure_cookie),
):
    """Create the off-chain profile for a chain address and log it in."""
    email = body.email.lower()
    username = body.username.lower()
    if not is_valid_email(email):
        raise BusinessRuleError("Invalid email address", "INVALID_EMAIL")
    if not is_valid_username(username):
        raise BusinessRuleError(
            "Username must be 3-20 letters, digits or underscores", "INVALID_USERNAME",
        )
    await _ensure_unique(db, body.address, username, email)

    referrer = await _find_referrer(db, body.referrer or read_referrer(request))
    user = User(
        address=body.address,
        username=username,
        full_name=body.full_name,
        email=email,
        invites_left=settings.app_default_invites,
        referred_by=referrer.id if referrer else None,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same address, username or email
        await db.rollback()
        raise BusinessRuleError("This account is already registered", "DUPLICATE_USER")
    await db.refresh(user)
    logger.info(f"Registered {username}", extra={"address": user.address})

    set_login_cookie(response, codec, settings, user.id, user.address)
    set_signed_up_cookie(response, settings)
    return UserResponse.model_validate(user)


@router.post("/mock_register", response_model=UserResponse)
async def mock_register(
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    codec: SecureCookie = Depends(get_secure_cookie),
):
    """Create a throwaway user with a random address and log it in."""
    if not settings.app_mock_registration:
        raise ResourceNotFoundError("Route", "/api/v1/mock_register")

    suffix = "".join(secrets.choice(_BECH32_CHARS) for _ in range(38))
    username = f"mock_{secrets.token_hex(4)}"
    user = User(
        address=f"cosmos1{suffix}",
        username=username,
        full_name="Mock User",
        email=f"{username}@example.com",
        invites_left=settings.app_default_invites,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    set_login_cookie(response, codec, settings, user.id, user.address)
    set_signed_up_cookie(response, settings)
    return UserResponse.model_validate(user)


@logout_router.get("/auth-logout")
async def logout(settings: Settings = Depends(get_settings)):
    response = RedirectResponse(
        settings.web_auth_logout_redir, status_code=status.HTTP_302_FOUND,
    )
    set_logout_cookie(response, settings)
    return response
