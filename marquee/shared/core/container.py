"""State container engine: handler registry, intent queue and reducer core.

A container owns exactly one current snapshot. Intents are appended to a FIFO
queue by ``dispatch()`` and processed one at a time by a single worker task;
the next handler only starts once the previous one has returned, so the
emissions of two intents never interleave.

Handlers are async generators. Every value a handler yields is committed
immediately: it becomes the current snapshot and all subscribers are notified
before the handler resumes. A handler may also be a plain coroutine, in which
case the intent has no observable effect.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Deque,
    Dict,
    Generic,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
    Union,
)

from .errors import describe_error
from .intents import Intent, Snapshot
from .stream import SnapshotListener, SnapshotStream, Subscription

S = TypeVar("S", bound=Snapshot)
I = TypeVar("I", bound=Intent)

Handler = Callable[[Any, Any], Union[AsyncIterator[Any], Any]]
ErrorSnapshotFactory = Callable[[str], Snapshot]

logger = logging.getLogger(__name__)


class Closable(Protocol):
    def close(self) -> None: ...


class HandlerRegistry:
    """Maps an intent type to the routine that handles it."""

    def __init__(self, owner: str = "container") -> None:
        self._owner = owner
        self._handlers: Dict[Type[Intent], Handler] = {}

    def register(self, intent_type: Type[Intent], handler: Handler) -> None:
        if intent_type in self._handlers:
            raise ValueError(
                f"{self._owner}: a handler for {intent_type.__name__} is already registered"
            )
        self._handlers[intent_type] = handler

    def resolve(self, intent: Intent) -> Optional[Handler]:
        """Exact type first, then the intent's base classes."""
        for klass in type(intent).__mro__:
            handler = self._handlers.get(klass)
            if handler is not None:
                return handler
        return None

    def __contains__(self, intent_type: object) -> bool:
        return intent_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class StateContainer(Generic[S]):
    """One instance of the state-management engine, scoped to one feature.

    Args:
        initial: The snapshot the container starts in.
        name: Used in log messages.
        error_snapshot: Builds the feature's failure snapshot from a message.
            When given, an exception escaping a handler is converted into
            that snapshot; otherwise it is only logged.
    """

    def __init__(
        self,
        initial: S,
        *,
        name: Optional[str] = None,
        error_snapshot: Optional[ErrorSnapshotFactory] = None,
    ) -> None:
        self.name = name or type(self).__name__
        self._stream: SnapshotStream[S] = SnapshotStream(initial, name=self.name)
        self._registry = HandlerRegistry(self.name)
        self._error_snapshot = error_snapshot
        self._queue: Deque[Intent] = deque()
        self._worker: Optional[asyncio.Task] = None
        self._resources: List[Closable] = []
        self._closed = False

    # --- Registration ---

    def on(self, intent_type: Type[I], handler: Handler) -> None:
        """Bind ``handler`` to ``intent_type``."""
        self._registry.register(intent_type, handler)

    def own(self, resource: Closable) -> None:
        """Close ``resource`` together with this container."""
        self._resources.append(resource)

    # --- Public API ---

    @property
    def state(self) -> S:
        return self._stream.latest

    def current_snapshot(self) -> S:
        """Synchronous peek at the latest committed snapshot."""
        return self._stream.latest

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def dispatch(self, intent: Intent) -> None:
        """Queue an intent. Returns immediately; must be called from the running loop."""
        if self._closed:
            logger.debug(f"{self.name}: dispatch of {intent.tag} after close ignored")
            return
        self._queue.append(intent)
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(
                self._drain(), name=f"{self.name}-dispatcher"
            )

    def observe(self) -> AsyncIterator[S]:
        """Current snapshot, then every later one, until the container closes."""
        return self._stream.subscribe()

    def listen(self, listener: SnapshotListener, *, replay: bool = True) -> Subscription:
        """Synchronous variant of ``observe()``."""
        return self._stream.listen(listener, replay=replay)

    def close(self) -> None:
        """Release the container. Queued intents are dropped without emission."""
        if self._closed:
            return
        self._closed = True
        dropped = len(self._queue)
        self._queue.clear()
        for resource in self._resources:
            try:
                resource.close()
            except Exception as exc:
                logger.warning(f"{self.name}: error closing {resource!r}: {exc}")
        self._resources.clear()
        worker = self._worker
        self._worker = None
        if worker is not None and not worker.done():
            worker.cancel()
        self._stream.close()
        logger.debug(f"{self.name}: closed ({dropped} queued intent(s) dropped)")

    async def wait_until_idle(self, timeout: float = 60.0) -> bool:
        """Wait until every queued intent has been handled.

        Returns:
            True if the queue drained, False if the timeout was reached.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._worker is not None and not self._closed:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(
                    f"{self.name}: timeout while waiting for {len(self._queue)} queued intent(s)"
                )
                return False
            # The worker may finish and be replaced by a new one, so loop.
            await asyncio.wait({self._worker}, timeout=remaining)
        return True

    # --- Dispatcher ---

    async def _drain(self) -> None:
        try:
            while self._queue and not self._closed:
                intent = self._queue.popleft()
                await self._process(intent)
        finally:
            if self._worker is asyncio.current_task():
                self._worker = None

    async def _process(self, intent: Intent) -> None:
        handler = self._registry.resolve(intent)
        if handler is None:
            logger.warning(f"{self.name}: no handler registered for {intent.tag}")
            return

        handler_name = getattr(handler, "__name__", str(handler))
        logger.debug(f"{self.name}: handling {intent.tag} with '{handler_name}'")
        try:
            result = handler(intent, self.state)
            if inspect.isasyncgen(result):
                async for snapshot in result:
                    self._emit(snapshot)
            elif inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.exception(
                f"{self.name}: handler '{handler_name}' failed on {intent.tag}",
                exc_info=exc,
            )
            if self._error_snapshot is not None:
                self._emit(self._error_snapshot(describe_error(exc)))

    def _emit(self, snapshot: S) -> None:
        if self._closed:
            return
        self._stream.publish(snapshot)
