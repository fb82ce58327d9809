"""Mock Chain - in-memory LCD + Tendermint RPC served through httpx.MockTransport.

Invariants:
    - Same URL layout as the real endpoints, so ChainClient runs unmodified
    - LCD bodies are wrapped as {"height": "0", "result": ...} like the real LCD
    - RPC bodies are JSON-RPC envelopes {"jsonrpc": "2.0", "result": ...}
    - Paths listed in fail_paths, and block_results for fail_heights, answer 500

Design Decisions:
    - Builders take the minimum fields and fill realistic defaults, tests override via **extra
    - Tx builders base64-encode data and attributes exactly as block_results returns them
"""

import base64
import json
import re

import httpx

from octopus.infrastructure.chain_client import ChainClient

LCD_URL = "http://lcd.test"
RPC_URL = "http://rpc.test"

_BECH32 = "023456789acdefghjklmnpqrstuvwxyz"


def make_address(seed: str) -> str:
    """Deterministic bech32-shaped address, e.g. make_address("a") -> cosmos1aaaa..."""
    assert seed in _BECH32
    return "cosmos1" + seed * 38


def _b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


def make_tx(action: str, obj: dict, attributes: dict[str, str] | None = None) -> dict:
    """Raw block_results tx: data is the JSON of obj, events carry the action."""
    events = [{
        "type": "message",
        "attributes": [{"key": _b64("action"), "value": _b64(action)}],
    }]
    if attributes:
        events.append({
            "type": action,
            "attributes": [
                {"key": _b64(k), "value": _b64(v)} for k, v in attributes.items()
            ],
        })
    return {"code": 0, "data": _b64(json.dumps(obj)), "events": events}


class MockChain:
    def __init__(self):
        self.claims: dict[int, dict] = {}
        self.arguments: dict[int, dict] = {}
        self.stakes: list[dict] = []
        self.communities: dict[str, dict] = {}
        self.accounts: dict[str, dict] = {}
        self.height = 1
        self.blocks: dict[int, list[dict]] = {}
        self.fail_paths: set[str] = set()
        self.fail_heights: set[int] = set()
        self.requests: list[str] = []

    # ─── builders ───────────────────────────────────────────────

    def add_community(self, id: str, name: str, **extra) -> dict:
        community = {"id": id, "name": name, "description": "", **extra}
        self.communities[id] = community
        return community

    def add_claim(
        self, id: int, creator: str, community_id: str = "crypto",
        body: str = "Bitcoin will outlive every fiat currency", **extra,
    ) -> dict:
        claim = {
            "id": id,
            "community_id": community_id,
            "body": body,
            "creator": creator,
            "source": "",
            "total_backed": {"amount": "0", "denom": "utru"},
            "total_challenged": {"amount": "0", "denom": "utru"},
            "total_stakers": 0,
            "created_time": "2026-10-01T12:00:00Z",
            **extra,
        }
        self.claims[id] = claim
        return claim

    def add_argument(
        self, id: int, claim_id: int, creator: str,
        summary: str = "Scarcity is enforced by code", body: str = "",
        **extra,
    ) -> dict:
        argument = {
            "id": id,
            "creator": creator,
            "claim_id": claim_id,
            "summary": summary,
            "body": body or summary,
            "stake_type": "backing",
            "upvoted_count": 0,
            "upvoted_stake": {"amount": "0", "denom": "utru"},
            "total_stake": {"amount": "0", "denom": "utru"},
            "created_time": "2026-10-01T12:00:00Z",
            **extra,
        }
        self.arguments[id] = argument
        return argument

    def add_stake(
        self, id: int, argument_id: int, creator: str,
        type: str = "backing", amount: int = 1_000_000_000, **extra,
    ) -> dict:
        stake = {
            "id": id,
            "argument_id": argument_id,
            "type": type,
            "amount": {"amount": str(amount), "denom": "utru"},
            "creator": creator,
            "created_time": "2026-10-01T12:00:00Z",
            **extra,
        }
        self.stakes.append(stake)
        return stake

    def add_account(self, address: str, balance: int = 0, **extra) -> dict:
        account = {
            "address": address,
            "coins": [{"amount": str(balance), "denom": "utru"}],
            "slash_count": 0,
            "is_jailed": False,
            **extra,
        }
        self.accounts[address] = account
        return account

    def add_block(self, height: int, txs: list[dict]) -> None:
        self.blocks[height] = txs
        self.height = max(self.height, height)

    # ─── transport ──────────────────────────────────────────────

    def client(self) -> ChainClient:
        return ChainClient(LCD_URL, RPC_URL, transport=httpx.MockTransport(self.handle))

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        if path in self.fail_paths:
            return httpx.Response(500, json={"error": "internal"})
        if request.url.host == "rpc.test":
            return self._rpc(path, request)
        return self._lcd(path, request)

    def _rpc(self, path: str, request: httpx.Request) -> httpx.Response:
        if path == "/status":
            result = {"sync_info": {"latest_block_height": str(self.height)}}
        elif path == "/block_results":
            height = int(request.url.params["height"])
            if height in self.fail_heights:
                return httpx.Response(500, json={"error": "internal"})
            result = {"height": str(height), "txs_results": self.blocks.get(height)}
        else:
            return httpx.Response(404)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": -1, "result": result})

    def _lcd(self, path: str, request: httpx.Request) -> httpx.Response:
        routes = (
            (r"/claim/claim/(\d+)", lambda m: self.claims.get(int(m[1]))),
            (r"/claim/claims", lambda m: self._claims(request)),
            (r"/staking/claim_arguments/(\d+)", lambda m: [
                a for a in self.arguments.values() if a["claim_id"] == int(m[1])
            ]),
            (r"/staking/argument/(\d+)", lambda m: self.arguments.get(int(m[1]))),
            (r"/staking/argument_stakes/(\d+)", lambda m: [
                s for s in self.stakes if s["argument_id"] == int(m[1])
            ]),
            (r"/staking/user_arguments/(\w+)", lambda m: [
                a for a in self.arguments.values() if a["creator"] == m[1]
            ]),
            (r"/staking/user_stakes/(\w+)", lambda m: [
                s for s in self.stakes if s["creator"] == m[1]
            ]),
            (r"/community/community/([\w-]+)", lambda m: self.communities.get(m[1])),
            (r"/community/communities", lambda m: list(self.communities.values())),
            (r"/account/app_account/(\w+)", lambda m: self.accounts.get(m[1])),
        )
        for pattern, resolve in routes:
            match = re.fullmatch(pattern, path)
            if match is None:
                continue
            result = resolve(match)
            if result is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"height": "0", "result": result})
        return httpx.Response(404, json={"error": f"unknown route {path}"})

    def _claims(self, request: httpx.Request) -> list[dict]:
        community_id = request.url.params.get("community_id")
        return [
            c for c in self.claims.values()
            if community_id is None or c["community_id"] == community_id
        ]
