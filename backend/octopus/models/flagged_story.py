"""FlaggedStory ORM - a user's report on a claim (story).

Invariants:
    - (story_id, creator) is unique: re-flagging only refreshes created_on
"""

from datetime import datetime, timezone

from sqlalchemy import String, BigInteger, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class FlaggedStory(Base):
    __tablename__ = "flagged_stories"
    __table_args__ = (
        UniqueConstraint("story_id", "creator", name="no_duplicate_flag"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    story_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    creator: Mapped[str] = mapped_column(String(64), nullable=False)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
