"""Comment Service - persists comments and fans out comment notifications.

Invariants:
    - The stored body carries address mentions; @username mentions are translated first
    - The comment is committed before any notification is published
    - Thread participants = the argument creator (or claim creator for claim-level
      comments) plus earlier commenters of the same thread, first-seen order
    - Chain lookup failures only shrink the recipient list, the comment is kept

Design Decisions:
    - Shared by REST (POST /comments) and GraphQL (addComment) so both notify identically
"""

import logging
from typing import Awaitable, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.core.errors import ChainQueryError
from octopus.core.mentions import unique
from octopus.core.notifications import Notification, notifications_for_comment
from octopus.infrastructure.chain_client import ChainClient
from octopus.models.comment import Comment
from octopus.services.users import translate_to_cosmos

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(
        self,
        db: AsyncSession,
        chain: ChainClient | None,
        publish: Callable[[Notification], Awaitable[None]] | None,
    ):
        self._db = db
        self._chain = chain
        self._publish = publish

    async def add_comment(
        self,
        author: str,
        claim_id: int,
        body: str,
        argument_id: int | None = None,
        parent_id: int | None = None,
    ) -> Comment:
        stored_body = await translate_to_cosmos(self._db, body)
        participants = await self._thread_participants(claim_id, argument_id)

        comment = Comment(
            parent_id=parent_id,
            claim_id=claim_id,
            argument_id=argument_id,
            body=stored_body,
            creator=author,
        )
        self._db.add(comment)
        await self._db.commit()
        await self._db.refresh(comment)
        logger.info(f"Comment {comment.id} added on claim {claim_id}", extra={"address": author})

        if self._publish is not None:
            for notification in notifications_for_comment(
                comment.id, author, stored_body, claim_id, argument_id, participants,
            ):
                await self._publish(notification)
        return comment

    async def list_comments(self, claim_id: int) -> list[Comment]:
        result = await self._db.execute(
            select(Comment)
            .where(Comment.claim_id == claim_id)
            .order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars().all())

    async def _thread_participants(
        self, claim_id: int, argument_id: int | None,
    ) -> list[str]:
        addresses: list[str] = []
        if self._chain is not None:
            try:
                if argument_id is not None:
                    argument = await self._chain.argument(argument_id)
                    if argument is not None:
                        addresses.append(argument.creator)
                else:
                    claim = await self._chain.claim(claim_id)
                    if claim is not None:
                        addresses.append(claim.creator)
            except ChainQueryError as e:
                logger.warning(f"Could not load comment thread owner: {e.message}")

        query = select(Comment.creator).where(Comment.claim_id == claim_id)
        if argument_id is None:
            query = query.where(Comment.argument_id.is_(None))
        else:
            query = query.where(Comment.argument_id == argument_id)
        result = await self._db.execute(query.order_by(Comment.id))
        addresses.extend(result.scalars().all())
        return unique(addresses)
