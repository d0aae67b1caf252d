"""Exception hierarchy for keyed-state."""


class KeyedStateError(Exception):
    """Base exception for all keyed-state errors."""


class MissingKeyError(KeyedStateError, KeyError):
    """Raised by get() when the key has no stored entry."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Value doesn't exist for key {key!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class BroadcastWithoutValueError(KeyedStateError):
    """Raised when broadcasting a key that has neither a stored nor an explicit value."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Cannot broadcast a non-existent value for key {key!r}")


class SubscriptionError(KeyedStateError):
    """Invalid use of a subscription (e.g. iterating a callback subscription)."""
