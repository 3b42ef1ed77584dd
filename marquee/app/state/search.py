"""Incremental search with a debounced lookup against the data source.

Typing dispatches ``QueryChanged`` on every keystroke. Each one issues a new
request token and restarts the quiet window; only when the input has been
stable for the whole window does the lookup run. The lookup reports back
through the queue (``_SearchStarted`` then ``_SearchSettled``), and a settled
result is only shown if its token is still the latest one issued.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional, Tuple, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.debounce import Debouncer, RequestTokens
from marquee.shared.core.errors import describe_error
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.domain.catalog import CatalogSource, ContentItem

logger = logging.getLogger(__name__)

DEFAULT_QUIET_WINDOW = 0.5


# --- Intents ---

class QueryChanged(Intent):
    text: str


class ClearSearch(Intent):
    pass


# Internal: dispatched only by the debounced lookup of this module.

class _SearchStarted(Intent):
    token: int
    query: str


class _SearchSettled(Intent):
    token: int
    query: str
    items: Tuple[ContentItem, ...] = ()
    error: Optional[str] = None


# --- Snapshots ---

class SearchIdle(Snapshot):
    pass


class SearchLoading(Snapshot):
    query: str


class SearchResults(Snapshot):
    query: str
    items: Tuple[ContentItem, ...]


class SearchFailure(Snapshot):
    query: str = ""
    message: str


SearchState = Union[SearchIdle, SearchLoading, SearchResults, SearchFailure]


class SearchContainer(StateContainer[SearchState]):

    def __init__(
        self,
        source: CatalogSource,
        *,
        quiet_window: float = DEFAULT_QUIET_WINDOW,
        name: str = "search",
    ) -> None:
        super().__init__(SearchIdle(), name=name, error_snapshot=lambda message: SearchFailure(message=message))
        self._source = source
        self._tokens = RequestTokens()
        self._debouncer = Debouncer(quiet_window, name=f"{name}-debounce")
        self._baseline: Optional[SearchState] = None
        self.own(self._debouncer)

        self.on(QueryChanged, self._on_query_changed)
        self.on(ClearSearch, self._on_clear)
        self.on(_SearchStarted, self._on_started)
        self.on(_SearchSettled, self._on_settled)

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def latest_token(self) -> int:
        return self._tokens.latest

    async def _on_query_changed(self, intent: QueryChanged, state: SearchState) -> AsyncIterator[SearchState]:
        query = intent.text.strip()
        if not query:
            async for snapshot in self._reset(state):
                yield snapshot
            return

        if self._baseline is None:
            self._baseline = state
        token = self._tokens.issue()
        self._debouncer.schedule(lambda: self._lookup(token, query))

    async def _on_clear(self, intent: ClearSearch, state: SearchState) -> AsyncIterator[SearchState]:
        async for snapshot in self._reset(state):
            yield snapshot

    async def _reset(self, state: SearchState) -> AsyncIterator[SearchState]:
        """Back to the pre-search baseline at once, bypassing the quiet window."""
        self._debouncer.cancel()
        self._tokens.issue()  # invalidates any lookup still in flight
        baseline = self._baseline if self._baseline is not None else SearchIdle()
        self._baseline = None
        if state != baseline:
            yield baseline

    async def _lookup(self, token: int, query: str) -> None:
        self.dispatch(_SearchStarted(token=token, query=query))
        try:
            results = await self._source.search(query)
        except Exception as exc:
            logger.warning(f"{self.name}: lookup for '{query}' failed: {exc}")
            self.dispatch(_SearchSettled(token=token, query=query, error=describe_error(exc)))
            return
        self.dispatch(_SearchSettled(token=token, query=query, items=tuple(results)))

    async def _on_started(self, intent: _SearchStarted, state: SearchState) -> AsyncIterator[SearchState]:
        if self._tokens.is_latest(intent.token):
            yield SearchLoading(query=intent.query)

    async def _on_settled(self, intent: _SearchSettled, state: SearchState) -> AsyncIterator[SearchState]:
        if not self._tokens.is_latest(intent.token):
            logger.debug(
                f"{self.name}: discarding stale result for '{intent.query}' "
                f"(token {intent.token}, latest {self._tokens.latest})"
            )
            return
        if intent.error is not None:
            yield SearchFailure(query=intent.query, message=intent.error)
        else:
            yield SearchResults(query=intent.query, items=intent.items)
