"""User Metrics - daily per-community counters computed from the chain and stored in SQL.

Invariants:
    - Upserts target no_duplicate_metric (address, as_on_date, community_id): re-running
      a day overwrites its counters, never duplicates them
    - Aggregates are grouped by (as_on_date, community_id) and ordered by both
    - Computed counters are cumulative as of the end of as_on_date (UTC)

Design Decisions:
    - ON CONFLICT via the dialect's insert() (postgresql in production, sqlite in tests)
    - Reward-history counters (stake_earned, stake_lost, interest_earned, cred_earned,
      stake_balance, total_amount_at_stake) are not exposed by the chain REST API and
      stay 0 when computed here; rows imported from elsewhere keep their values
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.core.domain_types import StakeType
from octopus.infrastructure.chain_client import ChainClient
from octopus.models.user_metric import METRIC_COUNTERS, UserMetric
from octopus.schemas.chain import Argument

logger = logging.getLogger(__name__)

CONFLICT_COLUMNS = ("address", "as_on_date", "community_id")


async def aggregate_user_metrics(
    db: AsyncSession, address: str, from_date: date, to_date: date,
) -> list[dict]:
    """Summed counters per (as_on_date, community_id) for one address."""
    columns = [
        func.sum(getattr(UserMetric, name)).label(name) for name in METRIC_COUNTERS
    ]
    result = await db.execute(
        select(UserMetric.as_on_date, UserMetric.community_id, *columns)
        .where(
            UserMetric.address == address,
            UserMetric.as_on_date >= from_date,
            UserMetric.as_on_date <= to_date,
        )
        .group_by(UserMetric.as_on_date, UserMetric.community_id)
        .order_by(UserMetric.as_on_date, UserMetric.community_id)
    )
    return [
        {
            "address": address,
            "as_on_date": row.as_on_date.isoformat(),
            "community_id": row.community_id,
            **{name: int(getattr(row, name) or 0) for name in METRIC_COUNTERS},
        }
        for row in result.all()
    ]


async def upsert_daily_metric(db: AsyncSession, metric: dict) -> None:
    """Insert a daily row or overwrite the counters of the existing one. Caller commits."""
    values = {key: metric[key] for key in CONFLICT_COLUMNS}
    values.update({name: int(metric.get(name, 0)) for name in METRIC_COUNTERS})

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(UserMetric).values(**values)
        stmt = stmt.on_conflict_do_update(
            constraint="no_duplicate_metric",
            set_={name: stmt.excluded[name] for name in METRIC_COUNTERS},
        )
    elif dialect == "sqlite":
        stmt = sqlite.insert(UserMetric).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(CONFLICT_COLUMNS),
            set_={name: stmt.excluded[name] for name in METRIC_COUNTERS},
        )
    else:
        raise NotImplementedError(f"upsert not supported on {dialect}")
    await db.execute(stmt)


async def are_user_metrics_empty(db: AsyncSession) -> bool:
    count = await db.scalar(select(func.count()).select_from(UserMetric))
    return not count


def _empty_counters() -> dict[str, int]:
    return {name: 0 for name in METRIC_COUNTERS}


async def compute_daily_metrics(
    chain: ChainClient, address: str, as_on_date: date,
) -> list[dict]:
    """Counters for one address on one day, one dict per community touched."""
    cutoff = datetime.combine(as_on_date + timedelta(days=1), time.min, tzinfo=timezone.utc)

    def _before_cutoff(created: datetime | None) -> bool:
        if created is None:
            return True
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return created < cutoff

    claims = await chain.claims()
    community_by_claim = {c.id: c.community_id for c in claims}
    counters: dict[str, dict[str, int]] = defaultdict(_empty_counters)

    for claim in claims:
        if claim.creator == address and _before_cutoff(claim.created_time):
            counters[claim.community_id]["total_claims"] += 1

    arguments_by_id: dict[int, Argument] = {}
    for argument in await chain.user_arguments(address):
        arguments_by_id[argument.id] = argument
        if not _before_cutoff(argument.created_time):
            continue
        community = community_by_claim.get(argument.claim_id, "")
        counters[community]["total_arguments"] += 1
        counters[community]["total_endorsements_received"] += argument.upvoted_count

    backed: dict[str, set[int]] = defaultdict(set)
    challenged: dict[str, set[int]] = defaultdict(set)
    for stake in await chain.user_stakes(address):
        if not _before_cutoff(stake.created_time):
            continue
        argument = arguments_by_id.get(stake.argument_id)
        if argument is None:
            argument = await chain.argument(stake.argument_id)
            if argument is None:
                logger.warning(
                    f"Stake {stake.id} points at unknown argument {stake.argument_id}",
                    extra={"address": address},
                )
                continue
            arguments_by_id[argument.id] = argument
        community = community_by_claim.get(argument.claim_id, "")
        row = counters[community]
        row["total_amount_staked"] += stake.amount.amount

        if stake.type is StakeType.UPVOTE:
            row["total_endorsements_given"] += 1
        elif stake.type is StakeType.BACKING:
            backed[community].add(argument.claim_id)
            row["total_amount_backed"] += stake.amount.amount
        elif stake.type is StakeType.CHALLENGE:
            challenged[community].add(argument.claim_id)
            row["total_amount_challenged"] += stake.amount.amount

    for community, ids in backed.items():
        counters[community]["total_claims_backed"] = len(ids)
    for community, ids in challenged.items():
        counters[community]["total_claims_challenged"] = len(ids)

    return [
        {
            "address": address,
            "as_on_date": as_on_date,
            "community_id": community,
            **values,
        }
        for community, values in sorted(counters.items())
    ]
