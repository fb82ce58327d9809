"""Notification Mapping - chain events and comments turned into per-recipient notifications.

Invariants:
    - Pure: inputs are already-decoded chain objects, output is a list of Notification
    - Within one event a recipient is notified at most once (first matching rule wins),
      except punishment fan-out which sends distinct kinds (slashed / earned / jailed)
    - Mentions are processed before creator and participant rules
    - The actor is never notified about their own action

Design Decisions:
    - Functions return lists instead of writing to a queue; services/event_processor.py
      publishes them, so ordering within one event is the list order
"""

from dataclasses import dataclass, field

from octopus.core.coins import human_readable
from octopus.core.domain_types import (
    COIN_DISPLAY_NAME, MentionType, NotificationType, PunishmentType, SlashReason,
)
from octopus.core.mentions import parse_cosmos_mentions, unique
from octopus.schemas.chain import (
    Argument, ClaimParticipants, PunishmentResult, Slash, Stake,
)


@dataclass
class NotificationMeta:
    claim_id: int | None = None
    argument_id: int | None = None
    comment_id: int | None = None
    mention_type: MentionType | None = None

    def to_dict(self) -> dict:
        return {
            "claimId": self.claim_id,
            "argumentId": self.argument_id,
            "commentId": self.comment_id,
            "mentionType": self.mention_type.value if self.mention_type else None,
        }


@dataclass
class Notification:
    to: str
    msg: str
    type_id: int
    type: NotificationType
    action: str
    meta: NotificationMeta = field(default_factory=NotificationMeta)
    sender: str | None = None
    trim: bool = False


def trim_message(msg: str, limit: int) -> str:
    """Cut msg to limit characters on a word boundary, with an ellipsis."""
    if len(msg) <= limit:
        return msg
    cut = msg[: max(limit - 3, 0)].rsplit(" ", 1)[0]
    return f"{cut}..."


def notifications_for_argument_created(
    argument: Argument, participants: ClaimParticipants,
) -> list[Notification]:
    """Mentioned users, then the claim creator, then everyone else in the claim."""
    meta = NotificationMeta(
        claim_id=participants.claim_id, argument_id=argument.id,
    )
    creator = argument.creator
    notified = {creator}
    out: list[Notification] = []

    _, addresses = parse_cosmos_mentions(argument.body)
    for address in unique(addresses):
        if address in notified:
            continue
        notified.add(address)
        out.append(Notification(
            sender=creator,
            to=address,
            msg=f"mentioned you {MentionType.ARGUMENT}: {argument.summary}",
            type_id=argument.id,
            type=NotificationType.MENTION_ACTION,
            meta=NotificationMeta(
                claim_id=participants.claim_id,
                argument_id=argument.id,
                mention_type=MentionType.ARGUMENT,
            ),
            action="Mentioned you in an argument",
            trim=True,
        ))

    if participants.creator not in notified:
        notified.add(participants.creator)
        out.append(Notification(
            sender=creator,
            to=participants.creator,
            msg=f"added a new argument on a claim you created: {argument.summary}",
            type_id=argument.id,
            type=NotificationType.NEW_ARGUMENT,
            meta=meta,
            action="New Argument",
        ))

    for p in participants.participants:
        if p in notified:
            continue
        notified.add(p)
        out.append(Notification(
            sender=creator,
            to=p,
            msg=f"added a new argument on a claim you participated in: {argument.summary}",
            type_id=argument.id,
            type=NotificationType.NEW_ARGUMENT,
            meta=meta,
            action="New Argument",
        ))
    return out


def notifications_for_upvote(stake: Stake, argument: Argument) -> list[Notification]:
    """One 'agree received' for the argument author."""
    return [Notification(
        sender=stake.creator,
        to=argument.creator,
        msg=f"agreed with your argument: {argument.summary}",
        type_id=stake.argument_id,
        type=NotificationType.AGREE_RECEIVED,
        meta=NotificationMeta(claim_id=argument.claim_id, argument_id=stake.argument_id),
        action="Agree Received",
    )]


def notifications_for_slash(
    slash: Slash,
    argument: Argument,
    punish_results: list[PunishmentResult],
    min_slash_count: str,
) -> list[Notification]:
    """Not-helpful notice for the author, then punishment fan-out."""
    meta = NotificationMeta(claim_id=argument.claim_id, argument_id=slash.argument_id)
    reason = str(slash.reason)
    if slash.reason is SlashReason.OTHER and slash.detailed_reason:
        reason = slash.detailed_reason
    out = [Notification(
        to=argument.creator,
        msg=f"Someone marked your argument as **Not Helpful** because: **{reason}** ",
        type_id=slash.argument_id,
        type=NotificationType.NOT_HELPFUL_RECEIVED,
        meta=meta,
        action="Not Helpful received on an Argument",
    )]
    out.extend(notifications_for_punishments(
        punish_results, meta, slash.argument_id, min_slash_count,
    ))
    return out


def notifications_for_punishments(
    punish_results: list[PunishmentResult],
    meta: NotificationMeta,
    argument_id: int,
    min_count: str,
) -> list[Notification]:
    """Slashed once per penalized account, then earned / jailed per result."""
    slashed = unique(
        p.app_acc_address for p in punish_results
        if p.type is not PunishmentType.CURATOR_REWARDED
    )
    out = [
        Notification(
            to=address,
            msg=(
                "You've been penalized! You've either wrote an argument that has "
                f"been marked Not Helpful {min_count} times or Agreed with an "
                f"argument marked as Not Helpful {min_count} times."
            ),
            type_id=argument_id,
            type=NotificationType.SLASHED,
            meta=meta,
            action="Slashed",
        )
        for address in slashed
    ]

    for p in punish_results:
        if p.type is PunishmentType.CURATOR_REWARDED:
            out.append(Notification(
                to=p.app_acc_address,
                msg=(
                    f"You just earned {human_readable(p.coin.amount)} {COIN_DISPLAY_NAME} "
                    "from an argument you marked as Not Helpful"
                ),
                type_id=argument_id,
                type=NotificationType.EARNED_STAKE,
                meta=meta,
                action=f"Earned {COIN_DISPLAY_NAME}",
            ))
        if p.type is PunishmentType.JAILED:
            out.append(Notification(
                to=p.app_acc_address,
                msg=(
                    "You've been slashed too many times and sent to jail. "
                    "Basic privileges will be stripped."
                ),
                type_id=argument_id,
                type=NotificationType.JAILED,
                meta=meta,
                action="Jailed",
            ))
    return out


def notifications_for_comment(
    comment_id: int,
    author: str,
    body: str,
    claim_id: int,
    argument_id: int | None,
    participants: list[str],
) -> list[Notification]:
    """Mentioned users first, then the rest of the thread; never the author."""
    meta = NotificationMeta(
        claim_id=claim_id, argument_id=argument_id, comment_id=comment_id,
    )
    notified = {author}
    out: list[Notification] = []

    _, addresses = parse_cosmos_mentions(body)
    for address in unique(addresses):
        if address in notified:
            continue
        notified.add(address)
        out.append(Notification(
            sender=author,
            to=address,
            msg=f"mentioned you {MentionType.COMMENT}: {body}",
            type_id=comment_id,
            type=NotificationType.MENTION_ACTION,
            meta=NotificationMeta(
                claim_id=claim_id, argument_id=argument_id,
                comment_id=comment_id, mention_type=MentionType.COMMENT,
            ),
            action="Mentioned you in a comment",
            trim=True,
        ))

    for p in participants:
        if p in notified:
            continue
        notified.add(p)
        out.append(Notification(
            sender=author,
            to=p,
            msg=f"posted a new comment: {body}",
            type_id=comment_id,
            type=NotificationType.COMMENT_ACTION,
            meta=meta,
            action="New Comment",
            trim=True,
        ))
    return out
