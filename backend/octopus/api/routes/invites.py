"""Invite Routes - existing users invite friends by email.

Invariants:
    - Check order: body decode (400), email format (422), login (401), invites left (422),
      already invited (422)
    - friend_email is stored lowercased; one invite per email across all inviters
    - Creating an invite decrements the inviter's invites_left in the same transaction
    - Any method other than POST answers 404
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import get_current_user
from octopus.core.errors import (
    BusinessRuleError, NotAuthenticatedError, ResourceNotFoundError,
)
from octopus.core.sessions import AuthenticatedUser
from octopus.core.validation import is_valid_email
from octopus.infrastructure.database import get_db
from octopus.models.invite import Invite
from octopus.schemas.api import InviteRequest
from octopus.services.users import get_user_by_address

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["invites"])

ALREADY_INVITED = "This user has already been invited"


@router.post("/invite")
async def create_invite(
    body: InviteRequest,
    current: AuthenticatedUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    email = body.email.strip().lower()
    if not is_valid_email(email):
        raise BusinessRuleError("Invalid email address", "INVALID_EMAIL")
    if current is None:
        raise NotAuthenticatedError()

    inviter = await get_user_by_address(db, current.address)
    if inviter is None:
        raise NotAuthenticatedError()
    if inviter.invites_left <= 0:
        raise BusinessRuleError("You have no invites left", "NO_INVITES_LEFT")

    existing = await db.execute(select(Invite.id).where(Invite.friend_email == email))
    if existing.scalar_one_or_none() is not None:
        raise BusinessRuleError(ALREADY_INVITED, "ALREADY_INVITED")

    invite = Invite(creator=current.address, friend_email=email)
    db.add(invite)
    inviter.invites_left -= 1
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise BusinessRuleError(ALREADY_INVITED, "ALREADY_INVITED")
    await db.refresh(invite)
    logger.info("Invite created", extra={"address": current.address})
    return invite.to_dict()


@router.api_route("/invite", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def invite_method_not_found():
    raise ResourceNotFoundError("Route", "/api/v1/invite")
