"""Invite ORM - an email invitation sent by an existing user.

Invariants:
    - friend_email is unique: a person can only be invited once, by anyone
    - paid flips to True once the inviter was credited by the snowball sweep
"""

from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class Invite(Base):
    __tablename__ = "invites"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    creator: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    friend_email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "creator": self.creator,
            "friend_email": self.friend_email,
            "paid": self.paid,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
