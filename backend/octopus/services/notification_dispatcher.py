"""Notification Dispatcher - single consumer that persists notifications and pushes them.

Invariants:
    - Notifications are delivered in publish order (one queue, one sender task)
    - Every notification is written to notification_events before the push is attempted
    - A failed push or a failed write is logged and the sender moves on to the next item
    - stop() drains the queue before cancelling the sender

Design Decisions:
    - session_scope is any callable returning an async context manager yielding an
      AsyncSession (db_manager.session in production, an async_sessionmaker in tests)
    - Trimming happens here, not in core, because the limit is a deployment setting
"""

import asyncio
import logging
from collections import defaultdict
from typing import Callable

from sqlalchemy import select

from octopus.core.domain_types import DevicePlatform
from octopus.core.errors import PushGatewayError
from octopus.core.notifications import Notification, trim_message
from octopus.infrastructure.push_gateway import PushGateway
from octopus.models.device_token import DeviceToken
from octopus.models.notification_event import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(
        self,
        session_scope: Callable,
        gateway: PushGateway | None,
        message_limit: int = 140,
    ):
        self._session_scope = session_scope
        self._gateway = gateway
        self._message_limit = message_limit
        self._queue: asyncio.Queue[Notification] = asyncio.Queue()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="notification-sender")
        logger.info("Notification dispatcher started")

    async def stop(self) -> None:
        if self._task is None:
            return
        await self._queue.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Notification dispatcher stopped")

    async def publish(self, notification: Notification) -> None:
        await self._queue.put(notification)

    async def _run(self) -> None:
        while True:
            notification = await self._queue.get()
            try:
                await self.deliver(notification)
            except Exception as e:
                logger.error(
                    f"Failed to deliver notification: {e}",
                    extra={
                        "address": notification.to,
                        "notification_type": notification.type.name,
                    },
                )
            finally:
                self._queue.task_done()

    async def deliver(self, notification: Notification) -> NotificationEvent:
        """Persist one notification, then push it to the recipient's devices."""
        message = notification.msg
        if notification.trim:
            message = trim_message(message, self._message_limit)

        async with self._session_scope() as db:
            event = NotificationEvent(
                address=notification.to,
                sender_address=notification.sender,
                type=int(notification.type),
                type_id=notification.type_id,
                message=message,
                meta=notification.meta.to_dict(),
            )
            db.add(event)
            await db.commit()
            await db.refresh(event)

            result = await db.execute(
                select(DeviceToken.token, DeviceToken.platform).where(
                    DeviceToken.address == notification.to,
                    DeviceToken.active.is_(True),
                )
            )
            rows = result.all()

        tokens: dict[DevicePlatform, list[str]] = defaultdict(list)
        for token, platform in rows:
            tokens[DevicePlatform(platform)].append(token)

        if tokens and self._gateway is not None:
            try:
                await self._gateway.send(
                    tokens,
                    title=notification.action,
                    message=message,
                    data={
                        "id": event.id,
                        "typeId": notification.type_id,
                        "type": int(notification.type),
                        "meta": notification.meta.to_dict(),
                    },
                )
            except PushGatewayError as e:
                logger.warning(
                    f"Push failed: {e.message}",
                    extra={"address": notification.to, "error_code": e.code},
                )

        logger.info(
            "Notification delivered",
            extra={
                "address": notification.to,
                "notification_type": notification.type.name,
            },
        )
        return event
