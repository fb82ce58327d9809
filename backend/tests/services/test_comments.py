"""Comment Service - stored with address mentions, thread notified after commit."""

from octopus.core.domain_types import NotificationType
from octopus.services.comments import CommentService
from tests.helpers import RecordingDispatcher
from tests.mock_chain import make_address

ALICE = make_address("a")
BOB = make_address("c")
CAROL = make_address("d")


async def test_argument_thread_notifies_argument_creator_and_commenters(
    test_db, mock_chain, chain, make_user,
):
    dave = await make_user("e", "dave")
    mock_chain.add_claim(1, ALICE)
    mock_chain.add_argument(10, 1, BOB)
    recorder = RecordingDispatcher()
    service = CommentService(test_db, chain, recorder.publish)

    await service.add_comment(CAROL, claim_id=1, body="first", argument_id=10)
    recorder.published.clear()
    comment = await service.add_comment(ALICE, claim_id=1, body="ping @Dave", argument_id=10)

    assert comment.body == f"ping @{dave.address}"
    assert [(n.to, n.type) for n in recorder.published] == [
        (dave.address, NotificationType.MENTION_ACTION),
        (BOB, NotificationType.COMMENT_ACTION),
        (CAROL, NotificationType.COMMENT_ACTION),
    ]
    assert recorder.published[1].meta.comment_id == comment.id


async def test_claim_level_thread_uses_claim_creator(test_db, mock_chain, chain):
    mock_chain.add_claim(1, ALICE)
    mock_chain.add_argument(10, 1, BOB)
    recorder = RecordingDispatcher()
    service = CommentService(test_db, chain, recorder.publish)

    await service.add_comment(BOB, claim_id=1, body="on the argument", argument_id=10)
    recorder.published.clear()
    await service.add_comment(CAROL, claim_id=1, body="on the claim")

    assert [n.to for n in recorder.published] == [ALICE]


async def test_chain_failure_still_stores_comment(test_db, mock_chain, chain):
    mock_chain.fail_paths.add("/claim/claim/1")
    recorder = RecordingDispatcher()
    service = CommentService(test_db, chain, recorder.publish)

    comment = await service.add_comment(CAROL, claim_id=1, body="still here")

    assert comment.id is not None
    assert recorder.published == []
    assert [c.id for c in await service.list_comments(1)] == [comment.id]
