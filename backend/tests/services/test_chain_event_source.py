"""Chain Event Source - ordered block polling from the chain tip."""

import asyncio

import httpx
import pytest

from octopus.core.errors import ChainQueryError
from octopus.infrastructure.chain_client import ChainClient
from octopus.services.chain_event_source import ChainEventSource
from tests.mock_chain import LCD_URL, RPC_URL, make_address, make_tx

ALICE = make_address("a")


def _tx(n: int) -> dict:
    return make_tx("create-upvote", {"id": n, "argument_id": 1, "type": "upvote", "creator": ALICE})


async def _collect(source: ChainEventSource) -> list:
    return [tx async for tx in source.poll_once()]


async def test_fresh_source_starts_at_tip_without_replay(mock_chain, chain):
    mock_chain.add_block(5, [_tx(1)])
    source = ChainEventSource(chain)

    assert await _collect(source) == []
    assert source.last_height == 5


async def test_new_blocks_are_yielded_in_order(mock_chain, chain):
    source = ChainEventSource(chain, last_height=5)
    mock_chain.add_block(6, [_tx(1)])
    mock_chain.add_block(7, [_tx(2), _tx(3)])

    txs = await _collect(source)

    assert [(t.height, t.index) for t in txs] == [(6, 0), (7, 0), (7, 1)]
    assert source.last_height == 7
    assert await _collect(source) == []


async def test_explicit_start_height_replays_from_there(mock_chain, chain):
    mock_chain.add_block(3, [_tx(1)])
    mock_chain.add_block(4, [])
    source = ChainEventSource(chain, last_height=2)

    txs = await _collect(source)

    assert [t.height for t in txs] == [3]
    assert source.last_height == 4


async def test_failed_block_is_retried_next_poll(mock_chain, chain):
    source = ChainEventSource(chain, last_height=5)
    mock_chain.add_block(6, [_tx(1)])
    mock_chain.add_block(7, [_tx(2)])
    mock_chain.fail_heights.add(7)

    seen = []
    with pytest.raises(ChainQueryError):
        async for tx in source.poll_once():
            seen.append(tx.height)
    assert seen == [6]
    assert source.last_height == 6

    mock_chain.fail_heights.clear()
    txs = await _collect(source)
    assert [t.height for t in txs] == [7]
    assert source.last_height == 7


async def test_stream_survives_rpc_failures(mock_chain):
    mock_chain.add_block(1, [_tx(1)])
    failures = {"left": 2}

    def _flaky(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/block_results" and failures["left"]:
            failures["left"] -= 1
            return httpx.Response(502)
        return mock_chain.handle(request)

    client = ChainClient(LCD_URL, RPC_URL, transport=httpx.MockTransport(_flaky))
    source = ChainEventSource(client, poll_interval=0, last_height=0)
    stream = source.stream()
    try:
        tx = await asyncio.wait_for(stream.__anext__(), timeout=5)
    finally:
        await stream.aclose()
        await client.aclose()

    assert tx.height == 1
    assert failures["left"] == 0
