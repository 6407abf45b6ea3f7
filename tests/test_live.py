"""Tests for the snapshot hub behind the live SSE feeds."""

from __future__ import annotations

import asyncio

import pytest

from saturn_scheduler.live import SnapshotHub


def test_initial_then_latest_only():
    async def scenario():
        hub = SnapshotHub()
        sub = hub.subscribe("t", lambda: [1])
        assert await sub.__anext__() == [1]
        hub.publish("t", [2])
        hub.publish("t", [3])
        assert await asyncio.wait_for(sub.__anext__(), 1) == [3]
        sub.close()

    asyncio.run(scenario())


def test_close_ends_iteration_and_unsubscribes():
    async def scenario():
        hub = SnapshotHub()
        sub = hub.subscribe("t", lambda: "x")
        assert hub.has_subscribers("t")
        sub.close()
        assert [s async for s in sub] == []
        assert not hub.has_subscribers("t")
        assert hub.publish("t", "y") == 0

    asyncio.run(scenario())


def test_publish_from_worker_thread():
    async def scenario():
        hub = SnapshotHub()
        sub = hub.subscribe("t", lambda: 0)
        await sub.__anext__()
        loop = asyncio.get_running_loop()
        delivered = await loop.run_in_executor(None, hub.publish, "t", 42)
        assert delivered == 1
        assert await asyncio.wait_for(sub.__anext__(), 1) == 42
        sub.close()

    asyncio.run(scenario())


def test_topics_are_independent():
    async def scenario():
        hub = SnapshotHub()
        a = hub.subscribe("a", lambda: "a0")
        b = hub.subscribe("b", lambda: "b0")
        await a.__anext__()
        await b.__anext__()
        hub.publish("a", "a1")
        assert await asyncio.wait_for(a.__anext__(), 1) == "a1"
        hub.close_all()
        assert [s async for s in b] == []
        assert not hub.has_subscribers("a")

    asyncio.run(scenario())


def test_change_published_while_loading_reaches_subscriber():
    async def scenario():
        hub = SnapshotHub()
        state = ["v0"]

        def load():
            # a writer lands between registration and the initial read
            state.append("v1")
            assert hub.publish("t", list(state)) == 1
            return list(state)

        sub = hub.subscribe("t", load)
        assert await asyncio.wait_for(sub.__anext__(), 1) == ["v0", "v1"]
        sub.close()

    asyncio.run(scenario())


def test_failed_initial_load_unsubscribes():
    async def scenario():
        hub = SnapshotHub()

        def load():
            raise RuntimeError("db down")

        with pytest.raises(RuntimeError):
            hub.subscribe("t", load)
        assert not hub.has_subscribers("t")

    asyncio.run(scenario())
