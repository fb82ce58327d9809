"""Event Processor - turns delivered chain transactions into published notifications.

Invariants:
    - Only create-argument, create-upvote and create-slash actions are processed
    - A tx whose data or attributes cannot be decoded is logged and skipped, never raised
    - Chain lookups that fail (ChainQueryError) skip that action only
    - Notifications are published in the order core/notifications.py returns them

Design Decisions:
    - publish is injected (NotificationDispatcher.publish in pushd) so tests collect
      notifications into a list without a queue or database
    - tx data is the JSON encoding of the created object (argument / stake / slash)
"""

import json
import logging
from typing import Awaitable, Callable

from pydantic import TypeAdapter, ValidationError

from octopus.core.errors import ChainQueryError
from octopus.core.notifications import (
    Notification,
    notifications_for_argument_created,
    notifications_for_slash,
    notifications_for_upvote,
)
from octopus.infrastructure.chain_client import ChainClient
from octopus.schemas.chain import (
    Argument, PunishmentResult, Slash, Stake, TxResult,
)
from octopus.services.claim_participants import get_claim_participants_by_argument_id

logger = logging.getLogger(__name__)

SLASH_RESULTS_KEY = "slash-results"
MIN_SLASH_COUNT_KEY = "min-slash-count"

_punish_results = TypeAdapter(list[PunishmentResult])


class EventProcessor:
    def __init__(
        self,
        chain: ChainClient,
        publish: Callable[[Notification], Awaitable[None]],
    ):
        self._chain = chain
        self._publish = publish
        self._handlers = {
            "create-argument": self._argument_created,
            "create-upvote": self._upvote,
            "create-slash": self._slash,
        }

    async def process(self, tx: TxResult) -> int:
        """Publish notifications for one tx. Returns how many were published."""
        published = 0
        for action in tx.actions():
            handler = self._handlers.get(action)
            if handler is None:
                continue
            try:
                notifications = await handler(tx)
            except (ValidationError, ValueError) as e:
                logger.error(
                    f"Error decoding {action} event: {e}",
                    extra={"event_type": action, "height": tx.height},
                )
                continue
            except ChainQueryError as e:
                logger.error(
                    f"Error loading context for {action}: {e.message}",
                    extra={"event_type": action, "height": tx.height},
                )
                continue

            for notification in notifications:
                await self._publish(notification)
                published += 1
        return published

    # ─── handlers ───────────────────────────────────────────────

    async def _argument_created(self, tx: TxResult) -> list[Notification]:
        argument = Argument.model_validate_json(tx.data)
        participants = await get_claim_participants_by_argument_id(
            self._chain, argument.id,
        )
        if participants is None:
            logger.warning(f"No participants for argument {argument.id}")
            return []
        return notifications_for_argument_created(argument, participants)

    async def _upvote(self, tx: TxResult) -> list[Notification]:
        stake = Stake.model_validate_json(tx.data)
        argument = await self._chain.argument(stake.argument_id)
        if argument is None:
            logger.warning(f"Upvoted argument {stake.argument_id} not found")
            return []
        return notifications_for_upvote(stake, argument)

    async def _slash(self, tx: TxResult) -> list[Notification]:
        slash = Slash.model_validate_json(tx.data)
        argument = await self._chain.argument(slash.argument_id)
        if argument is None:
            logger.warning(f"Slashed argument {slash.argument_id} not found")
            return []

        punish_results: list[PunishmentResult] = []
        raw = tx.attribute(SLASH_RESULTS_KEY)
        if raw:
            try:
                punish_results = _punish_results.validate_python(json.loads(raw))
            except (ValidationError, ValueError) as e:
                logger.warning(
                    f"Error decoding punish results: {e}",
                    extra={"event_type": "create-slash", "height": tx.height},
                )
        min_slash_count = tx.attribute(MIN_SLASH_COUNT_KEY) or ""
        return notifications_for_slash(slash, argument, punish_results, min_slash_count)
