"""Daily user metrics export (python -m octopus.actions.metrics).

Computes per-community counters for every registered user (or the given addresses) as of
--date and upserts them into user_metrics. On an empty table, --since backfills every
day from that date up to --date.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select

from octopus.config import get_settings
from octopus.core.errors import OctopusError
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.database import init_db
from octopus.infrastructure.observability import setup_logging
from octopus.models.user import User
from octopus.services.user_metrics import (
    are_user_metrics_empty, compute_daily_metrics, upsert_daily_metric,
)

logger = logging.getLogger("octopus.actions.metrics")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=n) for n in range((end - start).days + 1)]


async def run(as_on: date, addresses: list[str], since: date | None) -> int:
    settings = get_settings()
    manager = init_db(settings.database_url)
    chain = ChainClient(
        settings.chain_endpoint_url, settings.chain_rpc_url,
        timeout=settings.chain_timeout_seconds,
    )
    rows = 0
    try:
        async with manager.session() as db:
            if not addresses:
                result = await db.execute(select(User.address).order_by(User.id))
                addresses = list(result.scalars().all())

            days = [as_on]
            if since is not None and since < as_on and await are_user_metrics_empty(db):
                days = _days(since, as_on)
                logger.info(f"Backfilling {len(days)} days from {since}")

            for day in days:
                for address in addresses:
                    for metric in await compute_daily_metrics(chain, address, day):
                        await upsert_daily_metric(db, metric)
                        rows += 1
                    await db.commit()
                logger.info(f"Metrics computed for {day}", extra={"event_type": "metrics"})
    finally:
        await chain.aclose()
        await manager.dispose()
    return rows


def main(argv: list[str] | None = None) -> int:
    yesterday = (datetime.now(timezone.utc) - timedelta(days=1)).date()
    parser = argparse.ArgumentParser(prog="metrics", description="Export daily user metrics")
    parser.add_argument("--date", type=_parse_date, default=yesterday, help="as-on date (UTC)")
    parser.add_argument("--address", action="append", default=[], help="limit to address")
    parser.add_argument("--since", type=_parse_date, default=None, help="backfill start date")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        rows = asyncio.run(run(args.date, args.address, args.since))
    except OctopusError as e:
        logger.error(f"Metrics export failed: {e.message}", extra={"error_code": e.code})
        return 1
    logger.info(f"Upserted {rows} metric rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
