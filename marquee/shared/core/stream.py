"""Snapshot stream: the outward-facing observable of committed snapshots."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Dict, Generic, List, TypeVar

S = TypeVar("S")

SnapshotListener = Callable[[S], None]

logger = logging.getLogger(__name__)

_CLOSED = object()


@dataclass
class Subscription:
    """Handle returned by ``listen()``; call ``cancel()`` to stop receiving snapshots."""

    stream: "SnapshotStream"
    listener: Callable
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active: bool = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self.stream._remove_listener(self)


class SnapshotStream(Generic[S]):
    """Holds the latest snapshot and fans every new one out to subscribers.

    Two kinds of subscribers are supported:

    - synchronous listeners registered with ``listen()``; they are called
      in registration order inside ``publish()``;
    - async iterators returned by ``subscribe()``; each gets its own queue,
      starts with the snapshot that was current when iteration began and
      ends when the stream closes.

    Only the latest value is retained. There is no history replay.
    """

    def __init__(self, initial: S, name: str = "stream") -> None:
        self._latest: S = initial
        self._name = name
        self._listeners: List[Subscription] = []
        self._queues: Dict[int, asyncio.Queue] = {}
        self._closed = False

    @property
    def latest(self) -> S:
        return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners) + len(self._queues)

    def publish(self, snapshot: S) -> None:
        """Replace the latest snapshot and notify every subscriber before returning."""
        if self._closed:
            return
        self._latest = snapshot
        for subscription in list(self._listeners):
            if subscription.active:
                self._safe_notify(subscription, snapshot)
        for queue in self._queues.values():
            queue.put_nowait(snapshot)

    def listen(self, listener: SnapshotListener, *, replay: bool = True) -> Subscription:
        """Register a synchronous listener. With ``replay`` it first receives the latest value."""
        subscription = Subscription(stream=self, listener=listener)
        if self._closed:
            subscription.active = False
            return subscription
        self._listeners.append(subscription)
        if replay:
            self._safe_notify(subscription, self._latest)
        return subscription

    async def subscribe(self) -> AsyncIterator[S]:
        """Iterate over the current snapshot and every later one until the stream closes."""
        if self._closed:
            return
        queue: asyncio.Queue = asyncio.Queue()
        key = id(queue)
        self._queues[key] = queue
        queue.put_nowait(self._latest)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            self._queues.pop(key, None)

    def close(self) -> None:
        """End every subscription. Further ``publish`` calls are ignored."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._listeners:
            subscription.active = False
        self._listeners.clear()
        for queue in self._queues.values():
            queue.put_nowait(_CLOSED)
        logger.debug(f"Snapshot stream '{self._name}' closed")

    def _remove_listener(self, subscription: Subscription) -> None:
        try:
            self._listeners.remove(subscription)
        except ValueError:
            pass

    def _safe_notify(self, subscription: Subscription, snapshot: S) -> None:
        """Keep one failing listener from stopping the others."""
        listener_name = getattr(subscription.listener, "__name__", str(subscription.listener))
        try:
            subscription.listener(snapshot)
        except Exception as exc:
            logger.exception(
                f"Snapshot listener '{listener_name}' failed on stream '{self._name}'",
                exc_info=exc,
            )
