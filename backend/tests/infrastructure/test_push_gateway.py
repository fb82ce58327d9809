"""Push Gateway - one POST per notification, tokens grouped per platform."""

import json

import httpx
import pytest

from octopus.core.domain_types import DevicePlatform
from octopus.core.errors import PushGatewayError
from octopus.infrastructure.push_gateway import PushGateway


@pytest.fixture
async def gateway_and_requests():
    requests = []
    status = {"code": 200}

    def _handle(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status["code"], json={"counts": 1})

    gateway = PushGateway("http://push.test/api/push", transport=httpx.MockTransport(_handle))
    yield gateway, requests, status
    await gateway.aclose()


async def test_send_groups_tokens_by_platform(gateway_and_requests):
    gateway, requests, _ = gateway_and_requests

    await gateway.send(
        {DevicePlatform.IOS: ["ios-1", "ios-2"], DevicePlatform.ANDROID: ["droid-1"]},
        title="Agree Received",
        message="agreed with your argument",
        data={"id": 3},
    )

    assert len(requests) == 1
    body = json.loads(requests[0].content)
    entries = {e["platform"]: e for e in body["notifications"]}
    assert entries[1]["tokens"] == ["ios-1", "ios-2"]
    assert entries[2]["tokens"] == ["droid-1"]
    assert entries[1]["title"] == "Agree Received"
    assert entries[2]["data"] == {"id": 3}


async def test_send_without_tokens_makes_no_request(gateway_and_requests):
    gateway, requests, _ = gateway_and_requests
    await gateway.send({DevicePlatform.IOS: []}, title="t", message="m")
    assert requests == []


async def test_gateway_error_status_raises(gateway_and_requests):
    gateway, _, status = gateway_and_requests
    status["code"] = 503
    with pytest.raises(PushGatewayError, match="503"):
        await gateway.send({DevicePlatform.IOS: ["t"]}, title="t", message="m")
