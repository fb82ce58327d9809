"""GraphQL Types - strawberry object types over chain objects and off-chain rows.

Invariants:
    - Coin amounts are exposed as strings (base units exceed GraphQL Int)
    - Argument and comment bodies are served with @username mentions unless raw=true
    - Nested objects (community, creator, arguments, comments) resolve lazily, only when
      the query selects them
    - NotificationEvent.image is the type icon when one exists, else the sender avatar
"""

from datetime import datetime
from typing import Optional

import strawberry
from sqlalchemy import func, select
from strawberry.scalars import JSON
from strawberry.types import Info

from octopus.core import coins
from octopus.core.domain_types import (
    NOTIFICATION_ICONS, NotificationType, ReactionableType, StakeType,
)
from octopus.models.comment import Comment
from octopus.models.invite import Invite
from octopus.models.notification_event import NotificationEvent
from octopus.models.reaction import Reaction
from octopus.schemas import chain as chain_schemas
from octopus.services.claim_participants import get_claim_participants
from octopus.services.comments import CommentService


@strawberry.type(name="Coin")
class CoinType:
    amount: str
    denom: str

    @strawberry.field
    def human_readable(self) -> str:
        return coins.human_readable(int(self.amount))

    @classmethod
    def from_chain(cls, coin: chain_schemas.Coin) -> "CoinType":
        return cls(amount=str(coin.amount), denom=coin.denom)


@strawberry.type(name="Community")
class CommunityType:
    id: str
    name: str
    description: str

    @classmethod
    def from_chain(cls, community: chain_schemas.Community) -> "CommunityType":
        return cls(id=community.id, name=community.name, description=community.description)


@strawberry.type(name="AppAccount")
class AppAccountType:
    id: str

    @strawberry.field
    async def username(self, info: Info) -> Optional[str]:
        user = await info.context.user_by_address(self.id)
        return user.username if user else None

    @strawberry.field
    async def full_name(self, info: Info) -> Optional[str]:
        user = await info.context.user_by_address(self.id)
        return user.full_name if user else None

    @strawberry.field
    async def avatar(self, info: Info) -> Optional[str]:
        user = await info.context.user_by_address(self.id)
        return user.avatar_url if user else None

    @strawberry.field
    async def available_balance(self, info: Info) -> CoinType:
        account = await info.context.chain.account(self.id)
        balance = account.balance() if account else chain_schemas.Coin()
        return CoinType.from_chain(balance)

    @strawberry.field
    async def is_jailed(self, info: Info) -> bool:
        account = await info.context.chain.account(self.id)
        return bool(account and account.is_jailed)


StakeKind = strawberry.enum(StakeType, name="StakeType")


@strawberry.type(name="Stake")
class ArgumentStakeType:
    """A backing, challenge or upvote placed on an argument."""
    id: int
    argument_id: int
    type: StakeKind
    amount: CoinType
    created_time: Optional[datetime]
    creator_address: strawberry.Private[str]

    @strawberry.field
    def creator(self) -> AppAccountType:
        return AppAccountType(id=self.creator_address)

    @classmethod
    def from_chain(cls, stake: chain_schemas.Stake) -> "ArgumentStakeType":
        return cls(
            id=stake.id,
            argument_id=stake.argument_id,
            type=stake.type,
            amount=CoinType.from_chain(stake.amount),
            created_time=stake.created_time,
            creator_address=stake.creator,
        )


async def stakes_of_argument(
    info: Info, argument_id: int, kind: Optional[StakeType] = None,
) -> list[ArgumentStakeType]:
    stakes = await info.context.chain.argument_stakes(argument_id)
    return [
        ArgumentStakeType.from_chain(s) for s in stakes if kind is None or s.type is kind
    ]


@strawberry.type(name="ReactionsCount")
class ReactionsCountType:
    reaction_type: int
    count: int


async def _count_reactions(
    info: Info, reactionable_type: ReactionableType, reactionable_id: int,
) -> list[ReactionsCountType]:
    async with info.context.db_lock:
        result = await info.context.db.execute(
            select(Reaction.reaction_type, func.count())
            .where(
                Reaction.reactionable_type == reactionable_type.value,
                Reaction.reactionable_id == reactionable_id,
                Reaction.deleted_at.is_(None),
            )
            .group_by(Reaction.reaction_type)
            .order_by(Reaction.reaction_type)
        )
    return [ReactionsCountType(reaction_type=t, count=c) for t, c in result.all()]


@strawberry.type(name="Comment")
class CommentType:
    id: int
    parent_id: Optional[int]
    claim_id: int
    argument_id: Optional[int]
    created_at: datetime
    stored_body: strawberry.Private[str]
    creator_address: strawberry.Private[str]

    @strawberry.field
    async def body(self, info: Info, raw: bool = False) -> str:
        if raw:
            return self.stored_body
        return await info.context.with_usernames(self.stored_body)

    @strawberry.field
    def creator(self) -> AppAccountType:
        return AppAccountType(id=self.creator_address)

    @strawberry.field
    async def reactions_count(self, info: Info) -> list[ReactionsCountType]:
        return await _count_reactions(info, ReactionableType.COMMENTS, self.id)

    @classmethod
    def from_row(cls, comment: Comment) -> "CommentType":
        return cls(
            id=comment.id,
            parent_id=comment.parent_id,
            claim_id=comment.claim_id,
            argument_id=comment.argument_id,
            created_at=comment.created_at,
            stored_body=comment.body,
            creator_address=comment.creator,
        )


@strawberry.type(name="ClaimArgument")
class ClaimArgumentType:
    id: int
    claim_id: int
    summary: str
    upvoted_count: int
    upvoted_stake: CoinType
    total_stake: CoinType
    unhelpful_count: int
    is_unhelpful: bool
    edited: bool
    created_time: Optional[datetime]
    stored_body: strawberry.Private[str]
    stake_type: strawberry.Private[StakeType]
    creator_address: strawberry.Private[str]

    @strawberry.field
    async def body(self, info: Info, raw: bool = False) -> str:
        if raw:
            return self.stored_body
        return await info.context.with_usernames(self.stored_body)

    @strawberry.field
    def vote(self) -> bool:
        """True when the argument backs the claim, False when it challenges it."""
        return self.stake_type is StakeType.BACKING

    @strawberry.field
    def creator(self) -> AppAccountType:
        return AppAccountType(id=self.creator_address)

    @strawberry.field
    async def stakers(self, info: Info) -> list[AppAccountType]:
        stakes = await info.context.chain.argument_stakes(self.id)
        seen: list[str] = []
        for stake in stakes:
            if stake.creator not in seen:
                seen.append(stake.creator)
        return [AppAccountType(id=address) for address in seen]

    @strawberry.field
    async def stakes(
        self, info: Info, type: Optional[StakeKind] = None,
    ) -> list[ArgumentStakeType]:
        return await stakes_of_argument(info, self.id, type)

    @strawberry.field
    async def reactions_count(self, info: Info) -> list[ReactionsCountType]:
        return await _count_reactions(info, ReactionableType.ARGUMENTS, self.id)

    @classmethod
    def from_chain(cls, argument: chain_schemas.Argument) -> "ClaimArgumentType":
        return cls(
            id=argument.id,
            claim_id=argument.claim_id,
            summary=argument.summary,
            upvoted_count=argument.upvoted_count,
            upvoted_stake=CoinType.from_chain(argument.upvoted_stake),
            total_stake=CoinType.from_chain(argument.total_stake),
            unhelpful_count=argument.unhelpful_count,
            is_unhelpful=argument.is_unhelpful,
            edited=argument.edited,
            created_time=argument.created_time,
            stored_body=argument.body,
            stake_type=argument.stake_type,
            creator_address=argument.creator,
        )


async def _claim_stakes(info: Info, claim_id: int, kind: StakeType) -> list[ArgumentStakeType]:
    stakes = []
    for argument in await info.context.chain.claim_arguments(claim_id):
        stakes.extend(await stakes_of_argument(info, argument.id, kind))
    return stakes


@strawberry.type(name="Claim")
class ClaimType:
    id: int
    body: str
    source: str
    total_backed: CoinType
    total_challenged: CoinType
    total_stakers: int
    created_time: Optional[datetime]
    community_id: strawberry.Private[str]
    creator_address: strawberry.Private[str]

    @strawberry.field
    async def community(self, info: Info) -> Optional[CommunityType]:
        community = await info.context.chain.community(self.community_id)
        return CommunityType.from_chain(community) if community else None

    @strawberry.field
    def creator(self) -> AppAccountType:
        return AppAccountType(id=self.creator_address)

    @strawberry.field
    async def arguments(self, info: Info) -> list[ClaimArgumentType]:
        arguments = await info.context.chain.claim_arguments(self.id)
        return [ClaimArgumentType.from_chain(a) for a in arguments]

    @strawberry.field
    async def backings(self, info: Info) -> list[ArgumentStakeType]:
        return await _claim_stakes(info, self.id, StakeType.BACKING)

    @strawberry.field
    async def challenges(self, info: Info) -> list[ArgumentStakeType]:
        return await _claim_stakes(info, self.id, StakeType.CHALLENGE)

    @strawberry.field
    async def argument_count(self, info: Info) -> int:
        return len(await info.context.chain.claim_arguments(self.id))

    @strawberry.field
    async def participants_count(self, info: Info) -> int:
        participants = await get_claim_participants(info.context.chain, self.id)
        if participants is None:
            return 0
        return len(participants.participants) + 1

    @strawberry.field
    async def comments(self, info: Info) -> list[CommentType]:
        service = CommentService(info.context.db, None, None)
        async with info.context.db_lock:
            comments = await service.list_comments(self.id)
        return [CommentType.from_row(c) for c in comments]

    @classmethod
    def from_chain(cls, claim: chain_schemas.Claim) -> "ClaimType":
        return cls(
            id=claim.id,
            body=claim.body,
            source=claim.source,
            total_backed=CoinType.from_chain(claim.total_backed),
            total_challenged=CoinType.from_chain(claim.total_challenged),
            total_stakers=claim.total_stakers,
            created_time=claim.created_time,
            community_id=claim.community_id,
            creator_address=claim.creator,
        )


@strawberry.type(name="ClaimsPage")
class ClaimsPageType:
    items: list[ClaimType]
    total_count: int
    has_next_page: bool
    end_cursor: Optional[str]


@strawberry.type(name="Invite")
class InviteType:
    id: int
    friend_email: str
    paid: bool
    created_at: datetime
    creator_address: strawberry.Private[str]

    @strawberry.field
    def creator(self) -> AppAccountType:
        return AppAccountType(id=self.creator_address)

    @classmethod
    def from_row(cls, invite: Invite) -> "InviteType":
        return cls(
            id=invite.id,
            friend_email=invite.friend_email,
            paid=invite.paid,
            created_at=invite.created_at,
            creator_address=invite.creator,
        )


@strawberry.type(name="NotificationEvent")
class NotificationEventType:
    id: int
    type_id: int
    type: int
    body: str
    read: bool
    seen: bool
    meta: JSON
    created_time: datetime
    sender_address: strawberry.Private[Optional[str]]

    @strawberry.field
    def title(self) -> str:
        return NotificationType(self.type).title

    @strawberry.field
    async def image(self, info: Info) -> Optional[str]:
        icon = NOTIFICATION_ICONS.get(NotificationType(self.type))
        if icon:
            return f"{info.context.settings.app_s3_assets_url}/notifications/{icon}"
        if self.sender_address:
            sender = await info.context.user_by_address(self.sender_address)
            return sender.avatar_url if sender else None
        return None

    @strawberry.field
    def sender_profile(self) -> Optional[AppAccountType]:
        return AppAccountType(id=self.sender_address) if self.sender_address else None

    @classmethod
    def from_row(cls, event: NotificationEvent) -> "NotificationEventType":
        return cls(
            id=event.id,
            type_id=event.type_id,
            type=event.type,
            body=event.message,
            read=event.read,
            seen=event.seen,
            meta=event.meta or {},
            created_time=event.timestamp,
            sender_address=event.sender_address,
        )


@strawberry.type(name="NotificationsPage")
class NotificationsPageType:
    items: list[NotificationEventType]
    total_count: int
    has_next_page: bool
    end_cursor: Optional[str]


@strawberry.type(name="Settings")
class SettingsType:
    assets_url: str
    default_invites: int
    push_message_limit: int
    mock_registration: bool
