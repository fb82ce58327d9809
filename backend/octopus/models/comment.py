"""Comment ORM - off-chain discussion attached to a claim or one of its arguments.

Invariants:
    - body is stored with address mentions (@cosmos1...), translated on read
    - argument_id NULL means a claim-level comment
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, BigInteger, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    parent_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    claim_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    argument_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    creator: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
