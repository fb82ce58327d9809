"""Device Token Routes - mobile clients register and unregister push tokens.

Invariants:
    - A token belongs to one address; registering it again moves it and reactivates it
    - Unregistering deactivates the token; an unknown token answers 404
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.core.errors import ResourceNotFoundError
from octopus.infrastructure.database import get_db
from octopus.models.device_token import DeviceToken
from octopus.schemas.api import DeviceTokenRequest, UnregisterDeviceTokenRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/deviceToken", tags=["device-tokens"])


async def _find(db: AsyncSession, token: str) -> DeviceToken | None:
    result = await db.execute(select(DeviceToken).where(DeviceToken.token == token))
    return result.scalar_one_or_none()


@router.post("")
async def register_device_token(
    body: DeviceTokenRequest, db: AsyncSession = Depends(get_db),
):
    device = await _find(db, body.token)
    if device is None:
        device = DeviceToken(
            address=body.address, token=body.token, platform=body.platform.value,
        )
        db.add(device)
    else:
        device.address = body.address
        device.platform = body.platform.value
        device.active = True
    await db.commit()
    logger.info("Device token registered", extra={"address": body.address})
    return {"address": device.address, "platform": device.platform, "active": device.active}


@router.post("/unregister")
async def unregister_device_token(
    body: UnregisterDeviceTokenRequest, db: AsyncSession = Depends(get_db),
):
    device = await _find(db, body.token)
    if device is None:
        raise ResourceNotFoundError("DeviceToken", body.token[:8])
    device.active = False
    await db.commit()
    return {"address": device.address, "platform": device.platform, "active": False}
