"""Notification and device-token routes - feed flags and push token registry."""

import pytest

from octopus.core.domain_types import NotificationType
from octopus.models.notification_event import NotificationEvent
from tests.helpers import login_headers
from tests.mock_chain import make_address


@pytest.fixture
async def feed(test_db, make_user):
    alice = await make_user("a", "alice")
    events = [
        NotificationEvent(address=alice.address, type=NotificationType.COMMENT_ACTION, message="one"),
        NotificationEvent(address=alice.address, type=NotificationType.NEW_ARGUMENT, message="two"),
        NotificationEvent(address=make_address("c"), type=NotificationType.INVITE, message="bob"),
    ]
    test_db.add_all(events)
    await test_db.commit()
    return alice, events


async def test_mark_one_notification_read(client, feed, test_db):
    alice, events = feed

    res = await client.post(
        "/api/v1/notification", json={"notification_id": events[0].id},
        headers=login_headers(alice.id, alice.address),
    )

    assert res.status_code == 200
    assert res.json() == {"updated": 1}
    await test_db.refresh(events[0])
    await test_db.refresh(events[1])
    assert events[0].read is True
    assert events[0].seen is True
    assert events[1].read is False


async def test_cannot_touch_someone_elses_notification(client, feed):
    alice, events = feed
    res = await client.post(
        "/api/v1/notification", json={"notification_id": events[2].id},
        headers=login_headers(alice.id, alice.address),
    )
    assert res.status_code == 404


async def test_mark_all_seen(client, feed, test_db):
    alice, events = feed

    res = await client.post(
        "/api/v1/notification", json={}, headers=login_headers(alice.id, alice.address),
    )

    assert res.json() == {"updated": 2}
    for event in events:
        await test_db.refresh(event)
    assert [(e.seen, e.read) for e in events] == [(True, False), (True, False), (False, False)]


async def test_notifications_require_login(client):
    res = await client.post("/api/v1/notification", json={})
    assert res.status_code == 401


async def test_device_token_register_and_move(client):
    first = await client.post("/api/v1/deviceToken", json={
        "address": make_address("a"), "token": "tok-1", "platform": "ios",
    })
    moved = await client.post("/api/v1/deviceToken", json={
        "address": make_address("c"), "token": "tok-1", "platform": "android",
    })

    assert first.json() == {"address": make_address("a"), "platform": "ios", "active": True}
    assert moved.json() == {"address": make_address("c"), "platform": "android", "active": True}


async def test_device_token_unregister(client):
    await client.post("/api/v1/deviceToken", json={
        "address": make_address("a"), "token": "tok-1", "platform": "ios",
    })

    res = await client.post("/api/v1/deviceToken/unregister", json={"token": "tok-1"})
    missing = await client.post("/api/v1/deviceToken/unregister", json={"token": "nope"})

    assert res.json()["active"] is False
    assert missing.status_code == 404


async def test_unknown_platform_is_bad_request(client):
    res = await client.post("/api/v1/deviceToken", json={
        "address": make_address("a"), "token": "tok-1", "platform": "windows",
    })
    assert res.status_code == 400
