"""Push Gateway - client for the gorush-style push notification gateway.

Invariants:
    - One POST per notification; tokens grouped per platform into separate entries
    - No retry: a failed push is logged by the caller and dropped
    - Non-2xx and transport failures raise PushGatewayError

Design Decisions:
    - The in-app feed (notification_events) is the durable record; the push is best effort
"""

import logging

import httpx

from octopus.core.domain_types import DevicePlatform
from octopus.core.errors import PushGatewayError

logger = logging.getLogger(__name__)


class PushGateway:
    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._endpoint_url = endpoint_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(
        self,
        tokens_by_platform: dict[DevicePlatform, list[str]],
        title: str,
        message: str,
        data: dict | None = None,
    ) -> None:
        entries = [
            {
                "tokens": tokens,
                "platform": platform.gateway_code,
                "title": title,
                "message": message,
                "sound": "default",
                "data": data or {},
            }
            for platform, tokens in tokens_by_platform.items()
            if tokens
        ]
        if not entries:
            return
        try:
            response = await self._client.post(
                self._endpoint_url, json={"notifications": entries},
            )
        except httpx.HTTPError as e:
            raise PushGatewayError(str(e))
        if response.is_error:
            raise PushGatewayError(f"status {response.status_code}")
        logger.debug(f"Pushed {sum(len(e['tokens']) for e in entries)} tokens")
