"""Store module for keyed-state."""

from .bus import NotificationBus, Subscription
from .errors import BroadcastWithoutValueError, KeyedStateError, MissingKeyError, SubscriptionError
from .events import ChangeEvent
from .state_store import KeyedStateStore

__all__ = [
    "BroadcastWithoutValueError",
    "ChangeEvent",
    "KeyedStateError",
    "KeyedStateStore",
    "MissingKeyError",
    "NotificationBus",
    "Subscription",
    "SubscriptionError",
]
