"""User Routes - own profile and username prefix search (used by the @mention picker)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import require_user
from octopus.core.errors import ResourceNotFoundError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.database import get_db
from octopus.models.user import User
from octopus.schemas.api import UserResponse
from octopus.services.users import get_user_by_address

router = APIRouter(prefix="/api/v1/user", tags=["users"])

SEARCH_LIMIT = 10


@router.get("", response_model=UserResponse)
async def get_own_profile(
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user_by_address(db, current.address)
    if user is None:
        raise ResourceNotFoundError("User", current.address)
    return UserResponse.model_validate(user)


@router.get("/search")
async def search_usernames(
    username_prefix: str = Query(..., min_length=1, max_length=20),
    db: AsyncSession = Depends(get_db),
):
    escaped = username_prefix.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    result = await db.execute(
        select(User.address, User.username, User.avatar_url)
        .where(func.lower(User.username).like(f"{escaped}%", escape="\\"))
        .order_by(User.username)
        .limit(SEARCH_LIMIT)
    )
    return {
        "users": [
            {"address": address, "username": username, "avatar_url": avatar_url}
            for address, username, avatar_url in result.all()
        ],
    }
