"""Email campaigns (python -m octopus.actions.postoffice <campaign>).

approve_waitlist mails every waitlisted user (or the --to addresses) the signup link and
marks the users it reached as approved.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone

from sqlalchemy import func, update

from octopus.config import get_settings
from octopus.core.errors import OctopusError
from octopus.infrastructure.database import init_db
from octopus.infrastructure.mailer import Postman
from octopus.infrastructure.observability import setup_logging
from octopus.models.user import User
from octopus.services.postoffice import (
    Recipient, WaitlistApprovalCampaign, run_campaign, waitlisted_recipients,
)

logger = logging.getLogger("octopus.actions.postoffice")

CAMPAIGNS = ("approve_waitlist",)


async def approve_waitlist(postman: Postman, to: list[str], dry_run: bool) -> int:
    settings = get_settings()
    manager = init_db(settings.database_url)
    try:
        async with manager.session() as db:
            recipients = [Recipient(email=e) for e in to] or await waitlisted_recipients(db)
            campaign = WaitlistApprovalCampaign(recipients, settings.mail_signup_link)
            if dry_run:
                for recipient in recipients:
                    logger.info(
                        "Would mail",
                        extra={"campaign": campaign.name, "recipient": recipient.email},
                    )
                return 0

            delivered, failed = await asyncio.to_thread(run_campaign, campaign, postman)
            if delivered:
                await db.execute(
                    update(User)
                    .where(
                        func.lower(User.email).in_([r.email.lower() for r in delivered]),
                        User.approved_at.is_(None),
                    )
                    .values(approved_at=datetime.now(timezone.utc))
                )
                await db.commit()
            return len(failed)
    finally:
        await manager.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="postoffice", description="Send an email campaign")
    parser.add_argument("campaign", choices=CAMPAIGNS)
    parser.add_argument("--to", action="append", default=[], help="send only to this address")
    parser.add_argument("--dry-run", action="store_true", help="list recipients, send nothing")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    postman = Postman(
        settings.smtp_host, settings.smtp_port, settings.mail_from,
        user=settings.smtp_user, password=settings.smtp_password,
    )
    try:
        failed = asyncio.run(approve_waitlist(postman, args.to, args.dry_run))
    except OctopusError as e:
        logger.error(f"Campaign failed: {e.message}", extra={"error_code": e.code})
        return 1
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
