"""Flag Story Route - a logged-in user reports a claim.

Invariants:
    - Re-flagging the same story refreshes created_on instead of adding a row
    - One upsert statement on no_duplicate_flag, so concurrent re-flags never conflict
    - Success is 200 with an empty body
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import require_user
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.database import get_db
from octopus.models.flagged_story import FlaggedStory
from octopus.schemas.api import FlagStoryRequest

router = APIRouter(prefix="/api/v1", tags=["flagging"])


def _upsert_flag(dialect: str, story_id: int, creator: str):
    values = {
        "story_id": story_id,
        "creator": creator,
        "created_on": datetime.now(timezone.utc),
    }
    if dialect == "postgresql":
        stmt = postgresql.insert(FlaggedStory).values(**values)
        return stmt.on_conflict_do_update(
            constraint="no_duplicate_flag", set_={"created_on": stmt.excluded.created_on},
        )
    if dialect == "sqlite":
        stmt = sqlite.insert(FlaggedStory).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["story_id", "creator"],
            set_={"created_on": stmt.excluded.created_on},
        )
    raise NotImplementedError(f"upsert not supported on {dialect}")


@router.post("/flagStory")
async def flag_story(
    body: FlagStoryRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    dialect = db.get_bind().dialect.name
    await db.execute(_upsert_flag(dialect, body.story_id, current.address))
    await db.commit()
    return Response(status_code=200)
