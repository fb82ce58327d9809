"""User ORM - off-chain profile bound to a chain account address.

Invariants:
    - address and username are unique
    - username lookups are case-insensitive (stored lowercased)
    - invites_left never goes below 0 (checked by the invite route)
    - referred_by points at another user (the inviter) or is NULL

Design Decisions:
    - approved_at NULL means waitlisted; the approve_waitlist campaign mails those users
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class User(Base):
    """Registered TruStory user."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    avatar_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    invites_left: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    referred_by: Mapped[int | None] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
