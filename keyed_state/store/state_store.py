"""
Keyed State Store Module

This module implements the in-memory key/value store with change
notification.

Components share state by key without holding references to each other:
writers call set(), readers call get() or subscribe with listen() /
listen_many() and are notified synchronously on every set() or
broadcast_value() of a matching key.
"""

import contextlib
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config.settings import settings
from .bus import NotificationBus, Subscription
from .errors import BroadcastWithoutValueError, MissingKeyError
from .events import ChangeEvent

logger = logging.getLogger(__name__)

# Marks "no value passed" so that falsy values (0, '', False, None) still count
_NO_VALUE = object()


class KeyedStateStore:
    """
    In-memory key/value store with a notification bus.

    Every set() upserts the entry and then delivers the value to all live
    subscriptions for that key before returning. delete() and clear_data()
    change the map silently.

    Internal Storage:
        Plain dict, key -> value (values are opaque to the store).
        Insertion order is kept, so keys() lists keys in first-set order.

    Thread safety:
        With thread_safe enabled every operation runs under a re-entrant
        lock, which also serializes event delivery. Subscriber callbacks may
        call back into the store.

    Attributes:
        bus: The NotificationBus shared by all subscriptions of this store
    """

    def __init__(self, buffer_size: int = None, thread_safe: bool = None):
        """
        Initialize the store.

        Args:
            buffer_size: Per-subscription buffer limit, 0 = unbounded
                (default from settings.SUBSCRIPTION_BUFFER_SIZE)
            thread_safe: Guard operations with a lock
                (default from settings.THREAD_SAFE)

        Raises:
            ValueError: If buffer_size is negative
        """
        buffer_size = buffer_size if buffer_size is not None else settings.SUBSCRIPTION_BUFFER_SIZE
        thread_safe = thread_safe if thread_safe is not None else settings.THREAD_SAFE

        self._data: Dict[str, Any] = {}
        self._lock = threading.RLock() if thread_safe else contextlib.nullcontext()
        self.bus = NotificationBus(buffer_size=buffer_size)

    def set(self, key: str, value: Any) -> None:
        """
        Store a value under a key and broadcast it.

        Args:
            key: The key of the entry
            value: Any value, None included
        """
        with self._lock:
            self._data[key] = value
            logger.debug(f"Set {key!r}")
            self.bus.publish(ChangeEvent(key, value))

    def get(self, key: str) -> Any:
        """
        Retrieve the value stored under a key.

        Args:
            key: The key to look up

        Returns:
            The most recently set value

        Raises:
            MissingKeyError: If the key was never set or has been deleted
        """
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise MissingKeyError(key) from None

    def delete(self, key: str) -> None:
        """Remove a key's entry if present. Does not broadcast."""
        with self._lock:
            if self._data.pop(key, _NO_VALUE) is not _NO_VALUE:
                logger.debug(f"Deleted {key!r}")

    def clear_data(self, keys: Iterable[str]) -> None:
        """
        Remove the entries for the given keys.

        Missing keys are skipped and no events are broadcast.

        Args:
            keys: Keys to remove (any iterable of string-like keys)
        """
        with self._lock:
            removed = 0
            for key in keys:
                if self._data.pop(key, _NO_VALUE) is not _NO_VALUE:
                    removed += 1
            logger.debug(f"Cleared {removed} entries")

    def check_data(self, key: str) -> bool:
        """Check whether a key currently has a stored entry."""
        with self._lock:
            return key in self._data

    def broadcast_value(self, key: str, value: Any = _NO_VALUE) -> bool:
        """
        Re-announce a value to the key's subscribers without storing it.

        The explicit value is broadcast when given (any value counts, falsy
        ones included); otherwise the currently stored value is.

        Args:
            key: The key to announce
            value: Optional value to broadcast instead of the stored one

        Returns:
            True once the event has been delivered

        Raises:
            BroadcastWithoutValueError: If the key has no entry and no value was given
        """
        with self._lock:
            if value is _NO_VALUE:
                if key not in self._data:
                    raise BroadcastWithoutValueError(key)
                value = self._data[key]

            logger.debug(f"Rebroadcast {key!r}")
            self.bus.publish(ChangeEvent(key, value))
            return True

    def listen(self, key: str, callback: Optional[Callable[[Any], None]] = None) -> Subscription:
        """
        Subscribe to the values of one key.

        Only events published after this call are delivered. Without a
        callback, values are buffered until read; with the default unbounded
        buffer an unread, unclosed subscription grows without limit.

        Args:
            key: The key to follow
            callback: Optional callable receiving each value (push mode)

        Returns:
            A Subscription the caller must close when done
        """
        return self.bus.subscribe((key,), callback=callback)

    def listen_many(
            self,
            keys: Iterable[str],
            callback: Optional[Callable[[Any], None]] = None,
    ) -> Subscription:
        """
        Subscribe to the values of several keys, multiplexed in emission order.

        Buffering follows listen(): pass a callback, read the subscription, or
        close it, otherwise values accumulate.

        Args:
            keys: The keys to follow
            callback: Optional callable receiving each value (push mode)

        Returns:
            A Subscription the caller must close when done
        """
        if isinstance(keys, str):
            keys = (keys,)
        return self.bus.subscribe(keys, callback=callback)

    def size(self) -> int:
        """Get the current number of entries."""
        with self._lock:
            return len(self._data)

    def keys(self) -> List[str]:
        """Get all stored keys in first-set order."""
        with self._lock:
            return list(self._data.keys())

    def close(self) -> None:
        """
        Tear down the notification bus.

        All subscriptions are closed and later listen() calls return closed
        subscriptions. Stored entries stay readable and writable.
        """
        with self._lock:
            self.bus.close()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_keys: Number of stored entries
            - subscriptions: Number of live subscriptions
            - events_published: Events published since creation
            - bus_closed: Whether the bus has been torn down
        """
        with self._lock:
            return {
                "total_keys": len(self._data),
                "subscriptions": self.bus.subscription_count(),
                "events_published": self.bus.events_published,
                "bus_closed": self.bus.closed,
            }

    def __contains__(self, key: object) -> bool:
        return self.check_data(key)

    def __len__(self) -> int:
        return self.size()
