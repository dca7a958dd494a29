"""
In-process topic bus feeding GraphQL subscriptions.

Delivery is fire-and-forget: a payload reaches the subscriptions that are
registered at the moment of ``publish`` and nobody else. There is no replay
and no cross-process fan-out. Each subscription buffers at most
``queue_size`` payloads; when a slow consumer falls behind, the oldest
pending payload is dropped.
"""
import asyncio
from collections import defaultdict
from typing import Any, Dict, Set

from storefront.config import SUBSCRIPTION_QUEUE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_CLOSED = object()


class Subscription:
    """
    Async iterator over the payloads published to one topic.

    Registration happens on construction, not on first iteration, so a
    payload published right after ``PubSub.subscribe`` returns is not lost.
    """

    def __init__(self, pubsub: "PubSub", topic: str, queue_size: int = SUBSCRIPTION_QUEUE_SIZE):
        self.topic = topic
        self._pubsub = pubsub
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self.dropped = 0
        self._closed = False
        pubsub._register(self)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Any:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        payload = await self._queue.get()
        if payload is _CLOSED:
            raise StopAsyncIteration
        return payload

    def _deliver(self, payload: Any) -> None:
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            # drop the oldest pending payload
            self._queue.get_nowait()
            self._queue.put_nowait(payload)
            self.dropped += 1
            logger.warning(f"Subscriber on '{self.topic}' is behind; dropped oldest payload")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pubsub._unregister(self)
        self._deliver(_CLOSED)


class PubSub:
    def __init__(self, queue_size: int = SUBSCRIPTION_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscriptions: Dict[str, Set[Subscription]] = defaultdict(set)

    def _register(self, subscription: Subscription) -> None:
        self._subscriptions[subscription.topic].add(subscription)
        logger.debug(f"Subscriber added to '{subscription.topic}'")

    def _unregister(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.topic)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscriptions[subscription.topic]
        logger.debug(f"Subscriber removed from '{subscription.topic}'")

    async def publish(self, topic: str, payload: Any) -> None:
        subscribers = list(self._subscriptions.get(topic, ()))
        for subscription in subscribers:
            subscription._deliver(payload)
        logger.debug(f"Published '{topic}' to {len(subscribers)} subscriber(s)")

    def subscribe(self, topic: str) -> Subscription:
        return Subscription(self, topic, self.queue_size)

    def async_iterator(self, topic: str) -> Subscription:
        return self.subscribe(topic)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, ()))

    async def close(self) -> None:
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                subscription.close()
