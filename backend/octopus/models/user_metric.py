"""UserMetric ORM - one row of daily counters per (address, date, community).

Invariants:
    - no_duplicate_metric: (address, as_on_date, community_id) is unique, upserts target it
    - All counters are non-null integers (base units for amounts)
"""

from datetime import date

from sqlalchemy import String, BigInteger, Date, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from octopus.db.base import Base, BigIntPK

METRIC_COUNTERS = (
    "total_claims",
    "total_arguments",
    "total_claims_backed",
    "total_claims_challenged",
    "total_amount_backed",
    "total_amount_challenged",
    "total_endorsements_given",
    "total_endorsements_received",
    "stake_earned",
    "stake_lost",
    "stake_balance",
    "interest_earned",
    "total_amount_at_stake",
    "total_amount_staked",
    "cred_earned",
)


def _counter() -> Mapped[int]:
    return mapped_column(BigInteger, nullable=False, default=0)


class UserMetric(Base):
    __tablename__ = "user_metrics"
    __table_args__ = (
        UniqueConstraint(
            "address", "as_on_date", "community_id", name="no_duplicate_metric",
        ),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    as_on_date: Mapped[date] = mapped_column(Date, nullable=False)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)

    total_claims: Mapped[int] = _counter()
    total_arguments: Mapped[int] = _counter()
    total_claims_backed: Mapped[int] = _counter()
    total_claims_challenged: Mapped[int] = _counter()
    total_amount_backed: Mapped[int] = _counter()
    total_amount_challenged: Mapped[int] = _counter()
    total_endorsements_given: Mapped[int] = _counter()
    total_endorsements_received: Mapped[int] = _counter()
    stake_earned: Mapped[int] = _counter()
    stake_lost: Mapped[int] = _counter()
    stake_balance: Mapped[int] = _counter()
    interest_earned: Mapped[int] = _counter()
    total_amount_at_stake: Mapped[int] = _counter()
    total_amount_staked: Mapped[int] = _counter()
    cred_earned: Mapped[int] = _counter()
