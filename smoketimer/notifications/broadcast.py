"""Best-effort in-process broadcast channel.

Stands in for a platform broadcast: publishers never wait, a topic with
no subscribers swallows the message, and nothing is queued for whoever
subscribes later.  Late subscribers must ask the engine for its current
snapshot instead.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..timer.snapshot import Snapshot

logger = logging.getLogger(__name__)

TIMER_TOPIC = "smoketimer.timer_broadcast"


@dataclass(frozen=True)
class BroadcastMessage:
    topic: str
    snapshot: Snapshot
    formatted: str


@dataclass(frozen=True)
class Subscription:
    """Handle returned by ``BroadcastChannel.subscribe``."""

    id: int
    topic: str


class BroadcastChannel:
    """Topic-keyed fan-out with at-most-once, no-replay delivery."""

    def __init__(self) -> None:
        self._subscribers: dict[str, dict[int, Callable[[Any], None]]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, topic: str, callback: Callable[[Any], None]) -> Subscription:
        sub = Subscription(next(self._ids), topic)
        self._subscribers.setdefault(topic, {})[sub.id] = callback
        logger.debug("Subscribed #%d to %s", sub.id, topic)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription.  Unknown handles are ignored."""
        callbacks = self._subscribers.get(subscription.topic)
        if callbacks is None or callbacks.pop(subscription.id, None) is None:
            return
        if not callbacks:
            del self._subscribers[subscription.topic]
        logger.debug("Unsubscribed #%d from %s", subscription.id, subscription.topic)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, {}))

    def publish(self, topic: str, payload: Any) -> int:
        """Hand *payload* to every current subscriber of *topic*.

        Returns the number of successful deliveries.  A subscriber that
        raises is logged and skipped; the publisher never sees the error.
        """
        callbacks = list(self._subscribers.get(topic, {}).values())
        if not callbacks:
            logger.debug("No subscribers on %s, message dropped", topic)
            return 0

        delivered = 0
        for callback in callbacks:
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber on %s failed", topic)
            else:
                delivered += 1
        return delivered
