"""
keyed-state: In-Memory Keyed State Store

A single-process key/value store with change notification, letting
independent components share state by key and react to updates.
"""

from .store import (
    BroadcastWithoutValueError,
    ChangeEvent,
    KeyedStateError,
    KeyedStateStore,
    MissingKeyError,
    Subscription,
    SubscriptionError,
)

__version__ = "1.0.0"

__all__ = [
    "BroadcastWithoutValueError",
    "ChangeEvent",
    "KeyedStateError",
    "KeyedStateStore",
    "MissingKeyError",
    "Subscription",
    "SubscriptionError",
]
