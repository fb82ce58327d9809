"""Flag, comment and reaction routes - login-gated writes on claim content."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from octopus.api.routes import reactions as reactions_route
from octopus.core.domain_types import NotificationType
from octopus.models.comment import Comment
from octopus.models.flagged_story import FlaggedStory
from octopus.models.reaction import Reaction
from tests.helpers import login_headers
from tests.mock_chain import make_address

BOB = make_address("c")


@pytest.fixture
async def alice(make_user):
    return await make_user("a", "alice")


async def test_flag_story_requires_login(client):
    res = await client.post("/api/v1/flagStory", json={"story_id": 1})
    assert res.status_code == 401


async def test_reflagging_keeps_one_row(client, alice, test_db):
    headers = login_headers(alice.id, alice.address)

    first = await client.post("/api/v1/flagStory", json={"story_id": 7}, headers=headers)
    second = await client.post("/api/v1/flagStory", json={"story_id": 7}, headers=headers)

    assert first.status_code == second.status_code == 200
    assert first.content == b""
    count = await test_db.scalar(select(func.count()).select_from(FlaggedStory))
    assert count == 1


async def test_comment_is_stored_with_addresses_and_served_with_usernames(
    client, alice, make_user, mock_chain, dispatcher, test_db,
):
    carol = await make_user("d", "carol")
    mock_chain.add_claim(1, BOB)

    res = await client.post(
        "/api/v1/comments",
        json={"claim_id": 1, "body": "what do you think @Carol?"},
        headers=login_headers(alice.id, alice.address),
    )

    assert res.status_code == 200
    data = res.json()
    assert data["body"] == "what do you think @carol?"
    assert data["creator"] == alice.address
    stored = await test_db.scalar(select(Comment.body).where(Comment.id == data["id"]))
    assert stored == f"what do you think @{carol.address}?"
    assert [(n.to, n.type) for n in dispatcher.published] == [
        (carol.address, NotificationType.MENTION_ACTION),
        (BOB, NotificationType.COMMENT_ACTION),
    ]


async def test_comment_requires_login(client):
    res = await client.post("/api/v1/comments", json={"claim_id": 1, "body": "hi"})
    assert res.status_code == 401


async def test_empty_comment_is_bad_request(client, alice):
    res = await client.post(
        "/api/v1/comments", json={"claim_id": 1, "body": ""},
        headers=login_headers(alice.id, alice.address),
    )
    assert res.status_code == 400


REACTION = {"reactionable": {"type": "arguments", "id": 10}, "reaction_type": 0}


async def test_adding_a_reaction_twice_is_idempotent(client, alice):
    headers = login_headers(alice.id, alice.address)

    first = await client.post("/api/v1/reactions", json=REACTION, headers=headers)
    second = await client.post("/api/v1/reactions", json=REACTION, headers=headers)

    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["reactionable"] == {"type": "arguments", "id": 10}
    assert first.json()["deleted_at"] is None


async def test_removing_a_reaction_soft_deletes_it(client, alice):
    headers = login_headers(alice.id, alice.address)
    added = await client.post("/api/v1/reactions", json=REACTION, headers=headers)

    removed = await client.request("DELETE", "/api/v1/reactions", json=REACTION, headers=headers)
    again = await client.request("DELETE", "/api/v1/reactions", json=REACTION, headers=headers)
    readded = await client.post("/api/v1/reactions", json=REACTION, headers=headers)

    assert removed.status_code == 200
    assert removed.json()["deleted_at"] is not None
    assert again.status_code == 404
    assert readded.json()["id"] != added.json()["id"]


async def test_unknown_reactionable_type_is_bad_request(client, alice):
    res = await client.post(
        "/api/v1/reactions",
        json={"reactionable": {"type": "stories", "id": 1}},
        headers=login_headers(alice.id, alice.address),
    )
    assert res.status_code == 400


async def test_database_rejects_a_second_live_reaction(alice, test_db):
    def reaction(**fields):
        return Reaction(
            reactionable_type="arguments", reactionable_id=10, reaction_type=0,
            creator=alice.address, **fields,
        )

    test_db.add(reaction(deleted_at=datetime.now(timezone.utc)))
    test_db.add(reaction())
    await test_db.commit()

    test_db.add(reaction())
    with pytest.raises(IntegrityError):
        await test_db.commit()


async def test_losing_an_insert_race_returns_the_live_reaction(
    client, alice, test_db, monkeypatch,
):
    winner = Reaction(
        reactionable_type="arguments", reactionable_id=10, reaction_type=0,
        creator=alice.address,
    )
    test_db.add(winner)
    await test_db.commit()

    lookup = reactions_route._live_reaction
    calls = []

    async def stale_first_lookup(db, body, creator):
        calls.append(creator)
        if len(calls) == 1:
            return None
        return await lookup(db, body, creator)

    monkeypatch.setattr(reactions_route, "_live_reaction", stale_first_lookup)

    res = await client.post(
        "/api/v1/reactions", json=REACTION, headers=login_headers(alice.id, alice.address),
    )

    assert res.status_code == 200
    assert res.json()["id"] == winner.id
    live = await test_db.scalar(
        select(func.count()).select_from(Reaction).where(Reaction.deleted_at.is_(None))
    )
    assert live == 1


async def test_flagging_refreshes_an_existing_flag(client, alice, test_db):
    earlier = datetime(2026, 1, 1, tzinfo=timezone.utc)
    test_db.add(FlaggedStory(story_id=7, creator=alice.address, created_on=earlier))
    await test_db.commit()

    res = await client.post(
        "/api/v1/flagStory", json={"story_id": 7}, headers=login_headers(alice.id, alice.address),
    )

    assert res.status_code == 200
    rows = (await test_db.execute(select(FlaggedStory.created_on))).scalars().all()
    assert len(rows) == 1
    assert rows[0].replace(tzinfo=timezone.utc) > earlier
