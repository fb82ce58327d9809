"""pushd - chain event worker (python -m octopus.pushd).

Polls the chain for delivered transactions, maps them to notifications and hands them to
the single dispatcher task that records and pushes them.

Invariants:
    - One process, one dispatcher task: notifications leave in the order events produced them
    - Shutdown (SIGINT / SIGTERM) drains queued notifications before closing clients
"""

import argparse
import asyncio
import logging
import signal

from octopus.config import get_settings
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.database import init_db
from octopus.infrastructure.observability import setup_logging
from octopus.infrastructure.push_gateway import PushGateway
from octopus.services.chain_event_source import ChainEventSource
from octopus.services.event_processor import EventProcessor
from octopus.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger("octopus.pushd")


async def consume(source: ChainEventSource, processor: EventProcessor) -> None:
    async for tx in source.stream():
        await processor.process(tx)


async def run(start_height: int | None = None) -> None:
    settings = get_settings()
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    chain = ChainClient(
        settings.chain_endpoint_url,
        settings.chain_rpc_url,
        timeout=settings.chain_timeout_seconds,
        event_encoding=settings.chain_event_encoding,
    )
    gateway = PushGateway(settings.push_endpoint_url, timeout=settings.push_timeout_seconds)
    dispatcher = NotificationDispatcher(
        manager.session, gateway, message_limit=settings.push_message_limit,
    )
    source = ChainEventSource(
        chain,
        poll_interval=settings.push_poll_interval_seconds,
        last_height=None if start_height is None else start_height - 1,
    )
    processor = EventProcessor(chain, dispatcher.publish)

    dispatcher.start()
    consumer = asyncio.create_task(consume(source, processor), name="chain-consumer")
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, consumer.cancel)

    logger.info("pushd started")
    try:
        await consumer
    except asyncio.CancelledError:
        logger.info("pushd stopping", extra={"height": source.last_height})
    finally:
        await dispatcher.stop()
        await gateway.aclose()
        await chain.aclose()
        await manager.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pushd", description=__doc__.splitlines()[0])
    parser.add_argument(
        "--start-height", type=int, default=None,
        help="first block height to process (default: current chain tip)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(run(args.start_height))


if __name__ == "__main__":
    main()
