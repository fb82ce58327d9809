"""Snowball referral sweep (python -m octopus.actions.snowball)."""

import argparse
import asyncio
import logging
import sys

from octopus.config import get_settings
from octopus.core.errors import OctopusError
from octopus.infrastructure.database import init_db
from octopus.infrastructure.observability import setup_logging
from octopus.services.snowball import run_snowball

logger = logging.getLogger("octopus.actions.snowball")


async def run(invites_per_signup: int) -> int:
    settings = get_settings()
    manager = init_db(settings.database_url)
    try:
        async with manager.session() as db:
            return await run_snowball(db, invites_per_signup)
    finally:
        await manager.dispose()


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="snowball", description="Reward converted invites")
    parser.add_argument(
        "--invites", type=int, default=settings.snowball_invites_per_signup,
        help="invites credited per friend who signed up",
    )
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, settings.log_format)
    try:
        paid = asyncio.run(run(args.invites))
    except OctopusError as e:
        logger.error(f"Snowball failed: {e.message}", extra={"error_code": e.code})
        return 1
    logger.info(f"Paid out {paid} invites")
    return 0


if __name__ == "__main__":
    sys.exit(main())
