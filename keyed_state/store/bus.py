"""
Notification Bus Module

This module implements the in-process publish/subscribe mechanism that
distributes ChangeEvents to live subscriptions.

Each Subscription carries its own filter (a set of keys) and receives only
the values of matching events. Delivery is synchronous: publish() returns
after every matching subscription has been handed the value.

Two consumption modes:
- Pull: values are buffered in an asyncio.Queue and read with
  get_nowait(), drain() or ``async for``.
- Push: a callback is invoked with each value; nothing is buffered.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

from .errors import SubscriptionError
from .events import ChangeEvent

logger = logging.getLogger(__name__)

# End-of-stream marker placed in the buffer when a subscription closes
_END = object()


class Subscription:
    """
    A caller-held, filtered view over the change-event stream.

    Subscriptions are created by NotificationBus.subscribe() (usually via
    KeyedStateStore.listen / listen_many). They are live and never replay
    past events.

    Usage:
        with store.listen("user") as sub:
            store.set("user", {"id": 1})
            sub.get_nowait()  # {"id": 1}

        async for value in store.listen("user"):
            ...

    Note: the buffer is an asyncio.Queue, so async consumers must run on the
    same thread that publishes.

    Attributes:
        keys: The keys this subscription matches
        delivered: Number of values handed to this subscription
        dropped: Number of buffered values discarded on overflow
    """

    def __init__(
            self,
            bus: "NotificationBus",
            keys: FrozenSet[str],
            callback: Optional[Callable[[Any], None]] = None,
            maxsize: int = 0,
    ):
        self._bus = bus
        self.keys = keys
        self._callback = callback
        self._maxsize = maxsize
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.delivered = 0
        self.dropped = 0

    @property
    def closed(self) -> bool:
        """Whether the subscription has stopped receiving values."""
        return self._closed

    @property
    def is_push(self) -> bool:
        """Whether values are pushed to a callback instead of buffered."""
        return self._callback is not None

    @property
    def pending(self) -> int:
        """Number of buffered values not yet consumed."""
        size = self._queue.qsize()
        if self._closed and not self.is_push:
            size -= 1
        return size

    def matches(self, key: str) -> bool:
        return key in self.keys

    def _deliver(self, value: Any) -> bool:
        """Hand one value to the subscriber (called by the bus)."""
        if self._closed:
            return False
        self.delivered += 1

        if self._callback is not None:
            try:
                self._callback(value)
            except Exception as exc:
                logger.exception(f"Subscriber for keys {sorted(self.keys)} failed: {exc}")
            return True

        if self._maxsize and self._queue.qsize() >= self._maxsize:
            self._queue.get_nowait()
            self.dropped += 1
            logger.warning(
                f"Subscription buffer full ({self._maxsize}) for keys {sorted(self.keys)}, "
                f"dropped oldest value"
            )
        self._queue.put_nowait(value)
        return True

    def get_nowait(self) -> Any:
        """
        Pop the oldest buffered value.

        Returns:
            The next value delivered to this subscription

        Raises:
            SubscriptionError: If this is a callback subscription
            asyncio.QueueEmpty: If no value is buffered
        """
        self._require_pull()
        value = self._queue.get_nowait()
        if value is _END:
            # Keep the marker so every consumer sees the end of stream
            self._queue.put_nowait(_END)
            raise asyncio.QueueEmpty()
        return value

    def drain(self) -> List[Any]:
        """Pop and return all buffered values, oldest first."""
        values = []
        while True:
            try:
                values.append(self.get_nowait())
            except asyncio.QueueEmpty:
                return values

    def close(self) -> None:
        """
        Stop receiving values.

        Buffered values remain readable; async iterators finish once they
        are consumed. Closing twice is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        self._bus.unsubscribe(self)
        if not self.is_push:
            self._queue.put_nowait(_END)
        logger.debug(f"Subscription closed for keys {sorted(self.keys)}")

    def _require_pull(self) -> None:
        if self.is_push:
            raise SubscriptionError("callback subscriptions do not buffer values")

    def __aiter__(self) -> "Subscription":
        self._require_pull()
        return self

    async def __anext__(self) -> Any:
        value = await self._queue.get()
        if value is _END:
            self._queue.put_nowait(_END)
            raise StopAsyncIteration
        return value

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Subscription keys={sorted(self.keys)} {state} delivered={self.delivered}>"


class NotificationBus:
    """
    Broadcast channel of ChangeEvents.

    The bus keeps an ordered list of live subscriptions. publish() walks a
    snapshot of that list: a subscription opened from inside a callback
    starts with the next event, one closed from inside a callback receives
    nothing further.

    A subscriber callback that raises is logged and skipped; delivery to the
    remaining subscriptions continues and the publisher is not affected.

    After close() the bus is torn down for good: every subscription is
    closed, new subscriptions are born closed and publish() delivers nothing.
    """

    def __init__(self, buffer_size: int = 0):
        """
        Initialize the bus.

        Args:
            buffer_size: Per-subscription buffer limit (0 = unbounded)

        Raises:
            ValueError: If buffer_size is negative
        """
        if buffer_size < 0:
            raise ValueError("buffer_size must be non-negative")
        self.buffer_size = buffer_size
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self._closed = False
        self.events_published = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def subscription_count(self) -> int:
        """Get the number of live subscriptions."""
        with self._lock:
            return len(self._subscriptions)

    def subscribe(
            self,
            keys: Iterable[str],
            callback: Optional[Callable[[Any], None]] = None,
    ) -> Subscription:
        """
        Create a subscription matching any of the given keys.

        Args:
            keys: Keys whose events should be delivered
            callback: Optional callable invoked with each value (push mode)

        Returns:
            A new Subscription (already closed if the bus was torn down)
        """
        subscription = Subscription(self, frozenset(keys), callback=callback, maxsize=self.buffer_size)

        with self._lock:
            if not self._closed:
                self._subscriptions.append(subscription)
                logger.debug(f"Subscribed to keys {sorted(subscription.keys)}")
                return subscription

        logger.debug(f"Bus closed, returning closed subscription for keys {sorted(subscription.keys)}")
        subscription.close()
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Detach a subscription; unknown subscriptions are ignored."""
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: ChangeEvent) -> int:
        """
        Deliver an event to every matching subscription.

        Args:
            event: The event to broadcast

        Returns:
            Number of subscriptions the value was delivered to
        """
        with self._lock:
            if self._closed:
                return 0
            targets = [sub for sub in self._subscriptions if sub.matches(event.key)]
            self.events_published += 1

        delivered = 0
        for subscription in targets:
            if subscription._deliver(event.value):
                delivered += 1

        return delivered

    def close(self) -> None:
        """Tear down the bus and close every subscription."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscriptions = list(self._subscriptions)

        for subscription in subscriptions:
            subscription.close()
        logger.debug(f"Notification bus closed ({len(subscriptions)} subscriptions released)")
