"""Chain Event Source - polls Tendermint RPC and yields delivered txs block by block.

Invariants:
    - Heights are processed strictly in order; last_height advances only after every tx
      of that block has been yielded (a block interrupted by an RPC error is replayed)
    - A fresh source starts at the chain tip (history is never replayed on restart)
    - RPC failures are logged and retried on the next poll, the stream never ends on error
"""

import asyncio
import logging
from typing import AsyncIterator

from octopus.core.errors import ChainQueryError
from octopus.infrastructure.chain_client import ChainClient
from octopus.schemas.chain import TxResult

logger = logging.getLogger(__name__)


class ChainEventSource:
    def __init__(
        self,
        chain: ChainClient,
        poll_interval: float = 2.0,
        last_height: int | None = None,
    ):
        self._chain = chain
        self._poll_interval = poll_interval
        self.last_height = last_height

    async def poll_once(self) -> AsyncIterator[TxResult]:
        """Yield txs of every block after last_height up to the current tip."""
        latest = await self._chain.latest_height()
        if self.last_height is None:
            self.last_height = latest
            logger.info(f"Starting at chain height {latest}", extra={"height": latest})
            return
        for height in range(self.last_height + 1, latest + 1):
            for tx in await self._chain.block_results(height):
                yield tx
            self.last_height = height

    async def stream(self) -> AsyncIterator[TxResult]:
        while True:
            try:
                async for tx in self.poll_once():
                    yield tx
            except ChainQueryError as e:
                logger.warning(
                    f"Chain poll failed: {e.message}",
                    extra={"height": self.last_height, "path": e.path},
                )
            await asyncio.sleep(self._poll_interval)
