"""Chain Client - read-only access to the chain REST (LCD) and Tendermint RPC endpoints.

Invariants:
    - Read-only: this service never signs or broadcasts transactions
    - Single-object lookups return None on 404; every other non-2xx raises ChainQueryError
    - Transport failures and undecodable bodies raise ChainQueryError
    - LCD responses wrapped as {"height": ..., "result": ...} are unwrapped transparently
    - Event attributes are decoded with the one encoding the node uses (event_encoding),
      never guessed per value; tx data is always base64

Design Decisions:
    - httpx.AsyncClient per ChainClient, shared for the process lifetime (created in lifespan)
    - transport injectable so tests can use httpx.MockTransport
"""

import base64
import binascii
import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from octopus.core.errors import ChainQueryError
from octopus.schemas.chain import (
    AppAccount, Argument, Claim, Community, Stake, TxEvent, TxResult,
)

logger = logging.getLogger(__name__)

_claims = TypeAdapter(list[Claim])
_arguments = TypeAdapter(list[Argument])
_stakes = TypeAdapter(list[Stake])
_communities = TypeAdapter(list[Community])

EVENT_ENCODINGS = ("base64", "plain")


class ChainClient:
    """Typed queries against the chain."""

    def __init__(
        self,
        endpoint_url: str,
        rpc_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        event_encoding: str = "base64",
    ):
        if event_encoding not in EVENT_ENCODINGS:
            raise ValueError(f"event_encoding must be one of {EVENT_ENCODINGS}")
        self.event_encoding = event_encoding
        self._lcd = httpx.AsyncClient(
            base_url=endpoint_url, timeout=timeout, transport=transport,
        )
        self._rpc = httpx.AsyncClient(
            base_url=rpc_url, timeout=timeout, transport=transport,
        )

    async def aclose(self) -> None:
        await self._lcd.aclose()
        await self._rpc.aclose()

    # ─── LCD queries ────────────────────────────────────────────

    async def claim(self, claim_id: int) -> Claim | None:
        data = await self._get(self._lcd, f"/claim/claim/{claim_id}", allow_missing=True)
        return self._parse(Claim.model_validate, data, "claim")

    async def claims(self, community_id: str | None = None) -> list[Claim]:
        params = {"community_id": community_id} if community_id else None
        data = await self._get(self._lcd, "/claim/claims", params=params)
        return self._parse(_claims.validate_python, data or [], "claims")

    async def claim_arguments(self, claim_id: int) -> list[Argument]:
        data = await self._get(self._lcd, f"/staking/claim_arguments/{claim_id}")
        return self._parse(_arguments.validate_python, data or [], "claim_arguments")

    async def argument(self, argument_id: int) -> Argument | None:
        data = await self._get(
            self._lcd, f"/staking/argument/{argument_id}", allow_missing=True,
        )
        return self._parse(Argument.model_validate, data, "argument")

    async def argument_stakes(self, argument_id: int) -> list[Stake]:
        data = await self._get(self._lcd, f"/staking/argument_stakes/{argument_id}")
        return self._parse(_stakes.validate_python, data or [], "argument_stakes")

    async def user_arguments(self, address: str) -> list[Argument]:
        data = await self._get(self._lcd, f"/staking/user_arguments/{address}")
        return self._parse(_arguments.validate_python, data or [], "user_arguments")

    async def user_stakes(self, address: str) -> list[Stake]:
        data = await self._get(self._lcd, f"/staking/user_stakes/{address}")
        return self._parse(_stakes.validate_python, data or [], "user_stakes")

    async def community(self, community_id: str) -> Community | None:
        data = await self._get(
            self._lcd, f"/community/community/{community_id}", allow_missing=True,
        )
        return self._parse(Community.model_validate, data, "community")

    async def communities(self) -> list[Community]:
        data = await self._get(self._lcd, "/community/communities")
        return self._parse(_communities.validate_python, data or [], "communities")

    async def account(self, address: str) -> AppAccount | None:
        data = await self._get(
            self._lcd, f"/account/app_account/{address}", allow_missing=True,
        )
        return self._parse(AppAccount.model_validate, data, "account")

    # ─── RPC queries ────────────────────────────────────────────

    async def latest_height(self) -> int:
        data = await self._get(self._rpc, "/status")
        try:
            return int(data["sync_info"]["latest_block_height"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainQueryError(f"unexpected status payload: {e}", "/status")

    async def block_results(self, height: int) -> list[TxResult]:
        """Delivered txs of one block, with event attributes decoded."""
        data = await self._get(self._rpc, "/block_results", params={"height": height})
        txs = (data or {}).get("txs_results") or []
        return [
            TxResult(
                height=height,
                index=i,
                data=_tx_data(tx.get("data") or "", height),
                events=[
                    _decode_event(e, self.event_encoding) for e in tx.get("events") or []
                ],
            )
            for i, tx in enumerate(txs)
        ]

    # ─── helpers ────────────────────────────────────────────────

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict | None = None,
        allow_missing: bool = False,
    ):
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Chain request failed: {e}", extra={"path": path})
            raise ChainQueryError(str(e), path)
        if response.status_code == 404 and allow_missing:
            return None
        if response.is_error:
            raise ChainQueryError(f"status {response.status_code}", path)
        try:
            body = response.json()
        except ValueError as e:
            raise ChainQueryError(f"invalid JSON: {e}", path)
        if isinstance(body, dict) and "result" in body:
            return body["result"]
        return body

    @staticmethod
    def _parse(validator, data, what: str):
        if data is None:
            return None
        try:
            return validator(data)
        except ValidationError as e:
            raise ChainQueryError(f"unexpected {what} payload: {e.error_count()} errors", what)


def _tx_data(value: str, height: int) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Tx data is not base64", extra={"height": height})
        return b""


def _attribute_text(value: str, encoding: str) -> str:
    if encoding == "plain":
        return value
    try:
        return base64.b64decode(value, validate=True).decode(errors="replace")
    except (binascii.Error, ValueError):
        raise ChainQueryError(f"event attribute {value!r} is not base64", "/block_results")


def _decode_event(event: dict, encoding: str) -> TxEvent:
    attributes = {}
    for attr in event.get("attributes") or []:
        key = _attribute_text(attr.get("key") or "", encoding)
        attributes[key] = _attribute_text(attr.get("value") or "", encoding)
    return TxEvent(type=event.get("type", ""), attributes=attributes)
