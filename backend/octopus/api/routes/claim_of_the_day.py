"""Claim of the Day Routes - read or set the featured claim of a community.

Invariants:
    - One featured claim per community; setting it again replaces the previous one
    - Setting requires a login; reading does not
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import require_user
from octopus.core.errors import ResourceNotFoundError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.database import get_db
from octopus.models.claim_of_the_day import ClaimOfTheDay
from octopus.schemas.api import ClaimOfTheDayRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/claim_of_the_day", tags=["claims"])


async def get_claim_of_the_day(db: AsyncSession, community_id: str) -> ClaimOfTheDay | None:
    result = await db.execute(
        select(ClaimOfTheDay).where(ClaimOfTheDay.community_id == community_id),
    )
    return result.scalar_one_or_none()


@router.get("")
async def read_claim_of_the_day(
    community_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    featured = await get_claim_of_the_day(db, community_id)
    if featured is None:
        raise ResourceNotFoundError("ClaimOfTheDay", community_id)
    return {"community_id": featured.community_id, "claim_id": featured.claim_id}


@router.post("")
async def set_claim_of_the_day(
    body: ClaimOfTheDayRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    featured = await get_claim_of_the_day(db, body.community_id)
    if featured is None:
        featured = ClaimOfTheDay(community_id=body.community_id, claim_id=body.claim_id)
        db.add(featured)
    else:
        featured.claim_id = body.claim_id
    await db.commit()
    logger.info(
        f"Claim {body.claim_id} featured in {body.community_id}",
        extra={"address": current.address},
    )
    return {"community_id": featured.community_id, "claim_id": featured.claim_id}
