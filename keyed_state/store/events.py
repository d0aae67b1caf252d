"""
Change Event Definitions

A ChangeEvent is the transient record published on the notification bus
each time a key is set or rebroadcast. Events are never stored.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ChangeEvent:
    """
    One broadcast of a key's value.

    Attributes:
        key: The key whose value is announced
        value: The announced value (opaque to the store)
    """
    key: str
    value: Any
