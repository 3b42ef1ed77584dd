"""Debounce timers and request tokens for incremental input."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

DebouncedAction = Callable[[], Awaitable[None]]

logger = logging.getLogger(__name__)


class RequestTokens:
    """Monotonically increasing tokens; only the latest issued one is current."""

    def __init__(self) -> None:
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    @property
    def latest(self) -> int:
        return self._latest

    def is_latest(self, token: int) -> bool:
        return token == self._latest


class Debouncer:
    """Runs an action once its input has been quiet for ``window`` seconds.

    ``schedule()`` cancels a timer that has not fired yet and starts a new
    one. Once a timer fires its action is in flight and is left alone by later
    ``schedule()`` calls; stale results must be dropped by the caller, usually
    with ``RequestTokens``.
    """

    def __init__(self, window: float, name: str = "debouncer") -> None:
        if window < 0:
            raise ValueError("Debounce window must be >= 0")
        self.window = window
        self.name = name
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a timer is waiting out its quiet window."""
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def schedule(self, action: DebouncedAction) -> None:
        if self._closed:
            return
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(
            self._fire_after_window(action), name=f"{self.name}-timer"
        )

    def cancel(self) -> bool:
        """Cancel the pending timer. Returns True if one was cancelled."""
        timer = self._timer
        self._timer = None
        if timer is not None and not timer.done():
            timer.cancel()
            logger.debug(f"{self.name}: pending trigger superseded")
            return True
        return False

    def close(self) -> None:
        """Cancel the pending timer and every in-flight action."""
        if self._closed:
            return
        self._closed = True
        self.cancel()
        for task in list(self._in_flight):
            task.cancel()
        self._in_flight.clear()

    async def wait_until_idle(self, timeout: float = 60.0) -> bool:
        """Wait until no timer is pending and no action is in flight."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self.pending or self._in_flight:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(f"{self.name}: timeout while waiting for debounced actions")
                return False
            tasks = set(self._in_flight)
            if self.pending:
                tasks.add(self._timer)
            await asyncio.wait(tasks, timeout=remaining)
        return True

    async def _fire_after_window(self, action: DebouncedAction) -> None:
        await asyncio.sleep(self.window)
        current = asyncio.current_task()
        if self._timer is current:
            self._timer = None
        # Hand the action to a separate task so a later cancel() cannot reach it.
        task = asyncio.get_running_loop().create_task(self._run(action), name=f"{self.name}-action")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run(self, action: DebouncedAction) -> None:
        try:
            await action()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception(f"{self.name}: debounced action failed", exc_info=exc)
