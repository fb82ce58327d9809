"""ClaimOfTheDay ORM - the featured claim per community."""

from sqlalchemy import String, BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK


class ClaimOfTheDay(Base):
    __tablename__ = "claim_of_the_day_ids"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    claim_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
