"""
Synchronous observer registry used by the profile tracker

Callbacks run on the publishing call stack. A failing subscriber is logged
and skipped; it never interrupts delivery to the others or the caller.
"""
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Any, Callable, Dict, List
import itertools
import logging

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    PROFILE_UPDATED = "profile_updated"
    INSIGHT_GENERATED = "insight_generated"
    REAL_TIME_METRICS_UPDATED = "real_time_metrics_updated"
    EVENT_LOGGED = "event_logged"


@dataclass
class Subscription:
    """Handle returned by subscribe(); call unsubscribe() to stop delivery"""
    topic: Topic
    token: int
    _hub: "SubscriptionHub" = field(repr=False)
    active: bool = True

    def unsubscribe(self) -> None:
        if self.active:
            self._hub.unsubscribe(self)
            self.active = False


class SubscriptionHub:
    def __init__(self):
        self._callbacks: Dict[Topic, Dict[int, Callable[[Any], None]]] = {t: {} for t in Topic}
        self._tokens = itertools.count(1)
        self._lock = Lock()

    def subscribe(self, topic: Topic, callback: Callable[[Any], None]) -> Subscription:
        topic = Topic(topic)
        with self._lock:
            token = next(self._tokens)
            self._callbacks[topic][token] = callback
        return Subscription(topic=topic, token=token, _hub=self)

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._callbacks[subscription.topic].pop(subscription.token, None)

    def subscriber_count(self, topic: Topic) -> int:
        return len(self._callbacks[Topic(topic)])

    def publish(self, topic: Topic, payload: Any) -> int:
        """
        Deliver payload to every subscriber of topic

        Returns:
            Number of subscribers that handled the payload without raising
        """
        with self._lock:
            callbacks: List[Callable[[Any], None]] = list(self._callbacks[topic].values())

        delivered = 0
        for callback in callbacks:
            try:
                callback(payload)
                delivered += 1
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {topic.value}")
        return delivered

    def clear(self) -> None:
        with self._lock:
            for topic in Topic:
                self._callbacks[topic].clear()
