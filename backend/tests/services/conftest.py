"""Service test fixtures - a push gateway on a MockTransport and a real dispatcher.

Invariants:
    - push_requests collects every JSON body the gateway POSTs
    - push_status controls the gateway's answer (200 unless a test changes it)
    - notification_dispatcher persists through the test session factory
"""

import json

import httpx
import pytest

from octopus.infrastructure.push_gateway import PushGateway
from octopus.services.notification_dispatcher import NotificationDispatcher


@pytest.fixture
def push_requests():
    return []


@pytest.fixture
def push_status():
    return {"code": 200}


@pytest.fixture
async def push_gateway(push_requests, push_status):
    def _handle(request: httpx.Request) -> httpx.Response:
        push_requests.append(json.loads(request.content))
        return httpx.Response(push_status["code"], json={})

    gateway = PushGateway("http://push.test/api/push", transport=httpx.MockTransport(_handle))
    yield gateway
    await gateway.aclose()


@pytest.fixture
def notification_dispatcher(test_session_factory, push_gateway):
    return NotificationDispatcher(test_session_factory, push_gateway, message_limit=40)
