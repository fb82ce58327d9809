"""Reaction ORM - a user's reaction to an argument, claim or comment.

Invariants:
    - At most one live (deleted_at IS NULL) reaction per creator, target and reaction type
    - Removing a reaction soft-deletes it (deleted_at set)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, BigInteger, DateTime, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class Reaction(Base):
    __tablename__ = "reactions"
    __table_args__ = (
        Index("ix_reactions_target", "reactionable_type", "reactionable_id"),
        Index(
            "uq_reactions_live",
            "reactionable_type", "reactionable_id", "reaction_type", "creator",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    reactionable_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reactionable_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reaction_type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    creator: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
