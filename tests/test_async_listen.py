"""
Tests for consuming subscriptions with asyncio

These tests verify ``async for`` consumption:
- Values set from another task wake the consumer
- Iteration ends after close() once buffered values are consumed
- Bus teardown ends every stream

Run with: python -m pytest tests/test_async_listen.py -v
"""

import asyncio

import pytest

from keyed_state.store.state_store import KeyedStateStore


async def collect(subscription, limit: int = None) -> list:
    """Gather values from a subscription until it ends or limit is reached."""
    values = []
    async for value in subscription:
        values.append(value)
        if limit is not None and len(values) >= limit:
            break
    return values


@pytest.mark.asyncio
class TestAsyncIteration:
    """Test async iteration over subscriptions."""

    async def test_consumer_woken_by_set(self, store: KeyedStateStore):
        """Test a waiting consumer receives values set by another task."""
        sub = store.listen("k")
        consumer = asyncio.create_task(collect(sub, limit=2))

        await asyncio.sleep(0)
        store.set("k", 1)
        store.set("other", "ignored")
        store.set("k", 2)

        values = await asyncio.wait_for(consumer, timeout=1)
        assert values == [1, 2]

    async def test_iteration_ends_after_close(self, store: KeyedStateStore):
        sub = store.listen_many(["a", "b"])
        store.set("a", 1)
        store.set("b", 2)
        sub.close()

        values = await asyncio.wait_for(collect(sub), timeout=1)
        assert values == [1, 2]

    async def test_waiting_consumer_released_by_teardown(self, store: KeyedStateStore):
        """Test closing the bus ends a consumer blocked on an empty stream."""
        sub = store.listen("k")
        consumer = asyncio.create_task(collect(sub))

        await asyncio.sleep(0)
        store.close()

        values = await asyncio.wait_for(consumer, timeout=1)
        assert values == []

    async def test_async_context_manager(self, store: KeyedStateStore):
        async with store.listen("k") as sub:
            store.broadcast_value("k", "hello")
            first = await asyncio.wait_for(sub.__anext__(), timeout=1)

        assert first == "hello"
        assert sub.closed is True

    async def test_multiple_consumers_see_end(self, store: KeyedStateStore):
        """Test every consumer of a closed stream stops."""
        sub = store.listen("k")
        sub.close()

        first, second = await asyncio.wait_for(
            asyncio.gather(collect(sub), collect(sub)), timeout=1
        )
        assert first == []
        assert second == []
