"""Reaction Routes - add or remove a reaction on an argument, claim or comment.

Invariants:
    - Adding twice is idempotent: the live reaction is returned, no second row
    - uq_reactions_live enforces one live row; losing an insert race returns the winner
    - Removing soft-deletes the live reaction (deleted_at); removing none answers 404
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import require_user
from octopus.core.errors import ResourceNotFoundError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.database import get_db
from octopus.models.reaction import Reaction
from octopus.schemas.api import ReactionRequest

router = APIRouter(prefix="/api/v1/reactions", tags=["reactions"])


async def _live_reaction(
    db: AsyncSession, body: ReactionRequest, creator: str,
) -> Reaction | None:
    result = await db.execute(
        select(Reaction).where(
            Reaction.reactionable_type == body.reactionable.type.value,
            Reaction.reactionable_id == body.reactionable.id,
            Reaction.reaction_type == int(body.reaction_type),
            Reaction.creator == creator,
            Reaction.deleted_at.is_(None),
        )
    )
    return result.scalars().first()


def _to_dict(reaction: Reaction) -> dict:
    return {
        "id": reaction.id,
        "reactionable": {"type": reaction.reactionable_type, "id": reaction.reactionable_id},
        "reaction_type": reaction.reaction_type,
        "creator": reaction.creator,
        "created_at": reaction.created_at.isoformat(),
        "deleted_at": reaction.deleted_at.isoformat() if reaction.deleted_at else None,
    }


@router.post("")
async def add_reaction(
    body: ReactionRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    reaction = await _live_reaction(db, body, current.address)
    if reaction is None:
        reaction = Reaction(
            reactionable_type=body.reactionable.type.value,
            reactionable_id=body.reactionable.id,
            reaction_type=int(body.reaction_type),
            creator=current.address,
        )
        db.add(reaction)
        try:
            await db.commit()
        except IntegrityError:
            # a concurrent request inserted the live reaction first
            await db.rollback()
            return _to_dict(await _live_reaction(db, body, current.address))
        await db.refresh(reaction)
    return _to_dict(reaction)


@router.delete("")
async def remove_reaction(
    body: ReactionRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    reaction = await _live_reaction(db, body, current.address)
    if reaction is None:
        raise ResourceNotFoundError("Reaction", f"{body.reactionable.type.value}/{body.reactionable.id}")
    reaction.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    return _to_dict(reaction)
