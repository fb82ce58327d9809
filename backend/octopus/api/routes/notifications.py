"""Notification Routes - mark feed entries read / seen.

Invariants:
    - With notification_id: only that entry, and only if it belongs to the caller (else 404);
      read defaults to True
    - Without notification_id: every entry of the caller is marked seen (and read when
      read is True)
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import require_user
from octopus.core.errors import ResourceNotFoundError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.database import get_db
from octopus.models.notification_event import NotificationEvent
from octopus.schemas.api import NotificationUpdateRequest

router = APIRouter(prefix="/api/v1", tags=["notifications"])


@router.post("/notification")
async def update_notifications(
    body: NotificationUpdateRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    if body.notification_id is not None:
        result = await db.execute(
            select(NotificationEvent).where(
                NotificationEvent.id == body.notification_id,
                NotificationEvent.address == current.address,
            )
        )
        event = result.scalar_one_or_none()
        if event is None:
            raise ResourceNotFoundError("Notification", str(body.notification_id))
        event.read = True if body.read is None else body.read
        if body.seen is not None:
            event.seen = body.seen
        elif event.read:
            event.seen = True
        await db.commit()
        return {"updated": 1}

    values = {"seen": True if body.seen is None else body.seen}
    if body.read:
        values["read"] = True
    result = await db.execute(
        update(NotificationEvent)
        .where(NotificationEvent.address == current.address)
        .values(**values)
    )
    await db.commit()
    return {"updated": result.rowcount}
