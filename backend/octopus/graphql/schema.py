"""GraphQL Schema - queries over chain + off-chain data and the addComment mutation.

Invariants:
    - invites, notifications*, addComment require a login (NotAuthenticatedError otherwise)
    - Pagination cursors are opaque base64 offsets; first is capped at MAX_PAGE_SIZE
    - Claims page in descending id order (newest first), notifications newest first
    - Every claims list (all, created, argued on, agreed with) shares one ClaimsPage shape

Design Decisions:
    - Mounted with strawberry's GraphQLRouter at /api/v1/graphql so the context uses the
      same FastAPI dependencies (DB session, cookie user) as the REST routes
"""

import base64
import binascii
from typing import Optional

import strawberry
from sqlalchemy import func, select
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from octopus.core.errors import RequestDecodeError
from octopus.graphql.context import get_context
from octopus.graphql.types import (
    AppAccountType,
    ArgumentStakeType,
    ClaimArgumentType,
    ClaimsPageType,
    ClaimType,
    CommentType,
    CommunityType,
    InviteType,
    NotificationEventType,
    NotificationsPageType,
    SettingsType,
    StakeKind,
    stakes_of_argument,
)
from octopus.models.claim_of_the_day import ClaimOfTheDay
from octopus.models.invite import Invite
from octopus.models.notification_event import NotificationEvent
from octopus.schemas.chain import Claim
from octopus.services import account_claims
from octopus.services.comments import CommentService

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"offset:{offset}".encode()).decode()


def decode_cursor(cursor: Optional[str]) -> int:
    if not cursor:
        return 0
    try:
        prefix, _, value = base64.urlsafe_b64decode(cursor.encode()).decode().partition(":")
        if prefix != "offset":
            raise ValueError(prefix)
        return int(value) + 1
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise RequestDecodeError(f"Invalid cursor {cursor!r}")


def _page_bounds(first: int, after: Optional[str]) -> tuple[int, int]:
    start = decode_cursor(after)
    return start, max(1, min(first, MAX_PAGE_SIZE))


def _claims_page(claims: list[Claim], first: int, after: Optional[str]) -> ClaimsPageType:
    start, size = _page_bounds(first, after)
    page = claims[start:start + size]
    return ClaimsPageType(
        items=[ClaimType.from_chain(c) for c in page],
        total_count=len(claims),
        has_next_page=start + size < len(claims),
        end_cursor=encode_cursor(start + len(page) - 1) if page else None,
    )


@strawberry.type
class Query:
    @strawberry.field
    async def claim(self, info: Info, id: int) -> Optional[ClaimType]:
        claim = await info.context.chain.claim(id)
        return ClaimType.from_chain(claim) if claim else None

    @strawberry.field
    async def claims(
        self,
        info: Info,
        community_id: Optional[str] = None,
        first: int = DEFAULT_PAGE_SIZE,
        after: Optional[str] = None,
    ) -> ClaimsPageType:
        claims = sorted(
            await info.context.chain.claims(community_id), key=lambda c: c.id, reverse=True,
        )
        return _claims_page(claims, first, after)

    @strawberry.field
    async def claim_argument(self, info: Info, id: int) -> Optional[ClaimArgumentType]:
        argument = await info.context.chain.argument(id)
        return ClaimArgumentType.from_chain(argument) if argument else None

    @strawberry.field
    async def claim_arguments(self, info: Info, claim_id: int) -> list[ClaimArgumentType]:
        arguments = await info.context.chain.claim_arguments(claim_id)
        return [ClaimArgumentType.from_chain(a) for a in arguments]

    @strawberry.field
    async def argument_stakes(
        self, info: Info, argument_id: int, type: Optional[StakeKind] = None,
    ) -> list[ArgumentStakeType]:
        return await stakes_of_argument(info, argument_id, type)

    @strawberry.field
    async def community(self, info: Info, id: str) -> Optional[CommunityType]:
        community = await info.context.chain.community(id)
        return CommunityType.from_chain(community) if community else None

    @strawberry.field
    async def communities(self, info: Info) -> list[CommunityType]:
        return [CommunityType.from_chain(c) for c in await info.context.chain.communities()]

    @strawberry.field
    async def app_account(self, info: Info, id: str) -> Optional[AppAccountType]:
        if await info.context.user_by_address(id) is None:
            if await info.context.chain.account(id) is None:
                return None
        return AppAccountType(id=id)

    @strawberry.field
    async def app_account_claims_created(
        self, info: Info, id: str, first: int = DEFAULT_PAGE_SIZE, after: Optional[str] = None,
    ) -> ClaimsPageType:
        claims = await account_claims.claims_created(info.context.chain, id)
        return _claims_page(claims, first, after)

    @strawberry.field
    async def app_account_claims_with_arguments(
        self, info: Info, id: str, first: int = DEFAULT_PAGE_SIZE, after: Optional[str] = None,
    ) -> ClaimsPageType:
        claims = await account_claims.claims_with_arguments(info.context.chain, id)
        return _claims_page(claims, first, after)

    @strawberry.field
    async def app_account_claims_with_agrees(
        self, info: Info, id: str, first: int = DEFAULT_PAGE_SIZE, after: Optional[str] = None,
    ) -> ClaimsPageType:
        claims = await account_claims.claims_with_agrees(info.context.chain, id)
        return _claims_page(claims, first, after)

    @strawberry.field
    async def claim_comments(self, info: Info, claim_id: int) -> list[CommentType]:
        service = CommentService(info.context.db, None, None)
        async with info.context.db_lock:
            comments = await service.list_comments(claim_id)
        return [CommentType.from_row(c) for c in comments]

    @strawberry.field
    async def invites(self, info: Info) -> list[InviteType]:
        user = info.context.require_user()
        async with info.context.db_lock:
            result = await info.context.db.execute(
                select(Invite).where(Invite.creator == user.address).order_by(Invite.id.desc())
            )
            invites = result.scalars().all()
        return [InviteType.from_row(i) for i in invites]

    @strawberry.field
    async def notifications(
        self, info: Info, first: int = DEFAULT_PAGE_SIZE, after: Optional[str] = None,
    ) -> NotificationsPageType:
        user = info.context.require_user()
        start, size = _page_bounds(first, after)
        db = info.context.db
        async with info.context.db_lock:
            total = await db.scalar(
                select(func.count()).select_from(NotificationEvent)
                .where(NotificationEvent.address == user.address)
            ) or 0
            result = await db.execute(
                select(NotificationEvent)
                .where(NotificationEvent.address == user.address)
                .order_by(NotificationEvent.timestamp.desc(), NotificationEvent.id.desc())
                .offset(start)
                .limit(size)
            )
            page = result.scalars().all()
        return NotificationsPageType(
            items=[NotificationEventType.from_row(e) for e in page],
            total_count=total,
            has_next_page=start + size < total,
            end_cursor=encode_cursor(start + len(page) - 1) if page else None,
        )

    @strawberry.field
    async def unread_notifications_count(self, info: Info) -> int:
        user = info.context.require_user()
        return await _count_notifications(info, user.address, NotificationEvent.read)

    @strawberry.field
    async def unseen_notifications_count(self, info: Info) -> int:
        user = info.context.require_user()
        return await _count_notifications(info, user.address, NotificationEvent.seen)

    @strawberry.field
    async def claim_of_the_day(self, info: Info, community_id: str) -> Optional[ClaimType]:
        async with info.context.db_lock:
            claim_id = await info.context.db.scalar(
                select(ClaimOfTheDay.claim_id).where(ClaimOfTheDay.community_id == community_id)
            )
        if claim_id is None:
            return None
        claim = await info.context.chain.claim(claim_id)
        return ClaimType.from_chain(claim) if claim else None

    @strawberry.field
    def settings(self, info: Info) -> SettingsType:
        settings = info.context.settings
        return SettingsType(
            assets_url=settings.app_s3_assets_url,
            default_invites=settings.app_default_invites,
            push_message_limit=settings.push_message_limit,
            mock_registration=settings.app_mock_registration,
        )


async def _count_notifications(info: Info, address: str, flag) -> int:
    """Entries of address whose flag column (read / seen) is still False."""
    async with info.context.db_lock:
        count = await info.context.db.scalar(
            select(func.count()).select_from(NotificationEvent).where(
                NotificationEvent.address == address, flag.is_(False),
            )
        )
    return count or 0


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_comment(
        self,
        info: Info,
        claim_id: int,
        body: str,
        parent_id: Optional[int] = None,
        argument_id: Optional[int] = None,
    ) -> CommentType:
        user = info.context.require_user()
        if not body.strip():
            raise RequestDecodeError("Comment body cannot be empty")
        service = CommentService(
            info.context.db, info.context.chain, info.context.dispatcher.publish,
        )
        async with info.context.db_lock:
            comment = await service.add_comment(
                author=user.address,
                claim_id=claim_id,
                body=body,
                argument_id=argument_id,
                parent_id=parent_id,
            )
        return CommentType.from_row(comment)



schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
