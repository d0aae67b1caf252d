"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

from typing import Any, List

import pytest

from keyed_state.store.state_store import KeyedStateStore


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store() -> KeyedStateStore:
    """Create a fresh store with unbounded subscription buffers."""
    store = KeyedStateStore(buffer_size=0, thread_safe=True)
    yield store
    store.close()


@pytest.fixture
def bounded_store() -> KeyedStateStore:
    """Create a store whose subscriptions buffer at most 3 values."""
    store = KeyedStateStore(buffer_size=3)
    yield store
    store.close()


# ============================================================================
# Subscriber Fixtures
# ============================================================================

class Recorder:
    """
    Callable that records every value it is called with.

    Usage:
        recorder = Recorder()
        store.listen("key", callback=recorder)
        store.set("key", 1)
        assert recorder.values == [1]
    """

    def __init__(self):
        self.values: List[Any] = []

    def __call__(self, value: Any) -> None:
        self.values.append(value)


@pytest.fixture
def recorder() -> Recorder:
    """Create a fresh recording callback."""
    return Recorder()
