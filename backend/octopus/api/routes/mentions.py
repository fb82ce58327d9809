"""Mention Routes - translate @username mentions to @address before a chain submit."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.infrastructure.database import get_db
from octopus.schemas.api import TranslateMentionsRequest
from octopus.services.users import translate_to_cosmos

router = APIRouter(prefix="/api/v1/mentions", tags=["mentions"])


@router.post("/translateToCosmos")
async def translate_to_cosmos_mentions(
    body: TranslateMentionsRequest, db: AsyncSession = Depends(get_db),
):
    return {"body": await translate_to_cosmos(db, body.body)}
