"""Comment Routes - add a comment to a claim or argument thread."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.api.dependencies import get_chain, get_dispatcher, require_user
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.database import get_db
from octopus.schemas.api import AddCommentRequest, CommentResponse
from octopus.services.comments import CommentService
from octopus.services.notification_dispatcher import NotificationDispatcher
from octopus.services.users import translate_to_usernames

router = APIRouter(prefix="/api/v1", tags=["comments"])


@router.post("/comments", response_model=CommentResponse)
async def add_comment(
    body: AddCommentRequest,
    current: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    chain: ChainClient = Depends(get_chain),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    service = CommentService(db, chain, dispatcher.publish)
    comment = await service.add_comment(
        author=current.address,
        claim_id=body.claim_id,
        body=body.body,
        argument_id=body.argument_id,
        parent_id=body.parent_id,
    )
    response = CommentResponse.model_validate(comment)
    response.body = await translate_to_usernames(db, comment.body)
    return response
