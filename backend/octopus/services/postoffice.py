"""Post Office - one-off email campaigns delivered through the Postman.

Invariants:
    - A campaign supplies recipients and builds one Message per recipient
    - A failed delivery is logged and counted; the rest of the campaign still goes out
"""

import logging
import smtplib
from dataclasses import dataclass
from typing import Protocol

from jinja2 import TemplateError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.infrastructure.mailer import Message, Postman
from octopus.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    email: str


class Campaign(Protocol):
    name: str

    def get_recipients(self) -> list[Recipient]: ...

    def get_message(self, postman: Postman, recipient: Recipient) -> Message: ...


class WaitlistApprovalCampaign:
    """Invites waitlisted people to finish signing up for the beta."""

    name = "approve_waitlist"
    subject = "Getting you started with TruStory Beta"

    def __init__(self, recipients: list[Recipient], signup_link: str):
        self._recipients = recipients
        self.signup_link = signup_link

    def get_recipients(self) -> list[Recipient]:
        return self._recipients

    def get_message(self, postman: Postman, recipient: Recipient) -> Message:
        body = postman.render("signup", {"signup_link": self.signup_link})
        return Message(to=[recipient.email], subject=self.subject, body=body)


async def waitlisted_recipients(db: AsyncSession) -> list[Recipient]:
    """Users that registered but were never approved."""
    result = await db.execute(
        select(User.email).where(User.approved_at.is_(None)).order_by(User.id)
    )
    return [Recipient(email=email) for email in result.scalars().all() if email]


def run_campaign(
    campaign: Campaign, postman: Postman,
) -> tuple[list[Recipient], list[Recipient]]:
    """Deliver the campaign. Returns (delivered, failed) recipients."""
    sent: list[Recipient] = []
    failed: list[Recipient] = []
    for recipient in campaign.get_recipients():
        try:
            postman.deliver(campaign.get_message(postman, recipient))
            sent.append(recipient)
        except (smtplib.SMTPException, OSError, TemplateError) as e:
            failed.append(recipient)
            logger.error(
                f"Failed to deliver campaign message: {e}",
                extra={"campaign": campaign.name, "recipient": recipient.email},
            )
    logger.info(
        f"Campaign finished: {len(sent)} sent, {len(failed)} failed",
        extra={"campaign": campaign.name},
    )
    return sent, failed
