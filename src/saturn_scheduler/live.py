"""Live subscriptions: full-snapshot pub/sub for the interviewer directory and
note threads.

Each subscriber gets its own ``Subscription``: an async iterator that first
yields the snapshot it was opened with and then every snapshot published on
its topic. Only the newest undelivered snapshot is kept, so a slow consumer
skips intermediate states instead of queueing them.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, Callable

log = logging.getLogger(__name__)

_CLOSED = object()


class Subscription:
    def __init__(self, hub: SnapshotHub, topic: str, loop: asyncio.AbstractEventLoop) -> None:
        self.topic = topic
        self.closed = False
        self._hub = hub
        self._loop = loop
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    def notify(self, snapshot: Any) -> None:
        """Deliver a snapshot; safe to call from any thread."""
        if self.closed:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._replace(snapshot)
        else:
            self._loop.call_soon_threadsafe(self._replace, snapshot)

    def _replace(self, item: Any) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._hub._remove(self)
        if not self._loop.is_closed():
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is self._loop:
                self._replace(_CLOSED)
            else:
                self._loop.call_soon_threadsafe(self._replace, _CLOSED)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Any:
        if self.closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item


class SnapshotHub:
    def __init__(self) -> None:
        self._subs: dict[str, list[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: str, load: Callable[[], Any]) -> Subscription:
        """Open a subscription; must be called from inside a running event loop.

        The subscriber is registered before ``load`` runs, so a change
        published while the initial snapshot is read still reaches it.
        """
        sub = Subscription(self, topic, asyncio.get_running_loop())
        with self._lock:
            self._subs[topic].append(sub)
            count = len(self._subs[topic])
        try:
            initial = load()
        except BaseException:
            sub.close()
            raise
        sub.notify(initial)
        log.debug("Subscribed to %s (%d open)", topic, count)
        return sub

    def has_subscribers(self, topic: str) -> bool:
        with self._lock:
            return bool(self._subs.get(topic))

    def publish(self, topic: str, snapshot: Any) -> int:
        """Push a snapshot to every open subscriber of ``topic``."""
        with self._lock:
            subs = list(self._subs.get(topic, ()))
        for sub in subs:
            sub.notify(snapshot)
        return len(subs)

    def close_all(self) -> None:
        with self._lock:
            subs = [s for topic_subs in self._subs.values() for s in topic_subs]
        for sub in subs:
            sub.close()
        if subs:
            log.info("Closed %d live subscription(s)", len(subs))

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subs.get(sub.topic)
            if subs and sub in subs:
                subs.remove(sub)
            if not subs:
                self._subs.pop(sub.topic, None)


hub = SnapshotHub()
