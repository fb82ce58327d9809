"""NotificationEvent ORM - the in-app feed entry written for every notification sent.

Invariants:
    - address is the recipient; sender_address NULL means a system notification
    - type stores NotificationType by value
    - meta is the camelCase NotificationMeta dict served to clients as-is
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, BigInteger, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class NotificationEvent(Base):
    __tablename__ = "notification_events"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sender_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    type: Mapped[int] = mapped_column(Integer, nullable=False)
    type_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    meta: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    seen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
