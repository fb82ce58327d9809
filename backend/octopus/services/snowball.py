"""Snowball - rewards inviters whose friends have signed up with more invites.

Invariants:
    - An invite pays out at most once (paid flips to True in the same transaction)
    - Only invites whose friend_email matches a registered user (case-insensitive) pay
    - Invites whose creator no longer exists are marked paid without a credit
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.models.invite import Invite
from octopus.models.user import User

logger = logging.getLogger(__name__)


async def run_snowball(db: AsyncSession, invites_per_signup: int) -> int:
    """Credit inviters for every unpaid, converted invite. Returns invites paid."""
    result = await db.execute(
        select(Invite)
        .join(User, func.lower(User.email) == Invite.friend_email)
        .where(Invite.paid.is_(False))
        .order_by(Invite.id)
    )
    invites = result.scalars().unique().all()

    paid = 0
    for invite in invites:
        inviter = (await db.execute(
            select(User).where(User.address == invite.creator)
        )).scalar_one_or_none()
        if inviter is None:
            logger.warning(
                f"Invite {invite.id} has no inviter, marking paid",
                extra={"address": invite.creator},
            )
        else:
            inviter.invites_left += invites_per_signup
            paid += 1
            logger.info(
                f"Credited {invites_per_signup} invites for {invite.friend_email}",
                extra={"address": inviter.address},
            )
        invite.paid = True

    await db.commit()
    return paid
