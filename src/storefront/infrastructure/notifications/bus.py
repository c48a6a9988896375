"""In-process notification bus for admin observers.

Single-process and in-memory: one bus is created by the composition
root at start-up, handed to the order handlers (publishers) and to
whatever accepts observer connections (subscribers), and shut down on
exit. There is no persistence and no replay; a subscriber that joins
after a publish never sees it and is expected to re-read the order
listing when the next event arrives.

Delivery is best-effort and at-most-once. Publishes are serialized, so
each subscriber sees events in publish order. A subscriber that raises
is logged and skipped; it never affects the publisher or the other
subscribers. A subscriber that does not return within the delivery
timeout is cancelled and counted as a failed delivery.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from storefront.domain.model.notification import NotificationEvent

logger = structlog.get_logger(__name__)

Subscriber = Callable[[dict[str, Any]], Awaitable[None]]

DEFAULT_DELIVERY_TIMEOUT = 5.0


@dataclass(frozen=True)
class SubscriptionHandle:
    id: int
    channel: str


class NotificationBus:

    ADMIN_CHANNEL = "admin"

    def __init__(self, delivery_timeout: float = DEFAULT_DELIVERY_TIMEOUT) -> None:
        if delivery_timeout <= 0:
            raise ValueError("Delivery timeout must be positive")
        self._delivery_timeout = delivery_timeout
        self._subscribers: dict[int, tuple[str, Subscriber]] = {}
        self._ids = itertools.count(1)
        self._publish_lock = asyncio.Lock()
        self._running = False

    # --- Lifecycle ------------------------------------------------------------

    async def start(self) -> None:
        self._running = True
        logger.info("Notification bus started")

    async def shutdown(self) -> None:
        dropped = len(self._subscribers)
        self._subscribers.clear()
        self._running = False
        logger.info("Notification bus shut down", dropped_subscribers=dropped)

    @property
    def running(self) -> bool:
        return self._running

    # --- Subscriptions --------------------------------------------------------

    def subscribe(self, callback: Subscriber, channel: str = ADMIN_CHANNEL) -> SubscriptionHandle:
        handle = SubscriptionHandle(id=next(self._ids), channel=channel)
        self._subscribers[handle.id] = (channel, callback)
        logger.debug("Subscriber connected", subscription=handle.id, channel=channel)
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        if self._subscribers.pop(handle.id, None) is not None:
            logger.debug("Subscriber disconnected", subscription=handle.id)

    def subscriber_count(self, channel: str = ADMIN_CHANNEL) -> int:
        return sum(1 for ch, _ in self._subscribers.values() if ch == channel)

    # --- Publishing -----------------------------------------------------------

    async def publish(self, event: NotificationEvent, channel: str = ADMIN_CHANNEL) -> int:
        """Deliver *event* to every current subscriber of *channel*.

        Returns the number of subscribers that accepted the event.
        Publishing on a bus that is not running is a no-op.
        """
        if not self._running:
            logger.warning("Publish on stopped notification bus dropped", type=event.type)
            return 0

        message = event.to_wire()
        async with self._publish_lock:
            targets = [
                (sub_id, callback)
                for sub_id, (ch, callback) in list(self._subscribers.items())
                if ch == channel
            ]
            if not targets:
                logger.debug("No subscribers for notification", channel=channel)
                return 0

            results = await asyncio.gather(
                *(
                    asyncio.wait_for(callback(message), self._delivery_timeout)
                    for _, callback in targets
                ),
                return_exceptions=True,
            )

        delivered = 0
        for (sub_id, _), result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Subscriber failed to receive notification",
                    subscription=sub_id,
                    error=repr(result),
                )
            else:
                delivered += 1

        logger.info(
            "Notification published",
            type=event.type,
            channel=channel,
            delivered=delivered,
            subscribers=len(targets),
        )
        return delivered
