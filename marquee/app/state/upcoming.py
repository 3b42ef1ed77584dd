"""Upcoming releases list."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Tuple, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.errors import FetchError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.domain.catalog import CatalogSource, ContentItem

logger = logging.getLogger(__name__)


# --- Intents ---

class LoadUpcoming(Intent):
    pass


class RefreshUpcoming(Intent):
    pass


class UpdateUpcomingItem(Intent):
    item_id: int


# --- Snapshots ---

class UpcomingInitial(Snapshot):
    pass


class UpcomingLoading(Snapshot):
    pass


class UpcomingLoaded(Snapshot):
    items: Tuple[ContentItem, ...]


class UpcomingFailure(Snapshot):
    message: str


UpcomingState = Union[UpcomingInitial, UpcomingLoading, UpcomingLoaded, UpcomingFailure]


class UpcomingContainer(StateContainer[UpcomingState]):

    def __init__(self, source: CatalogSource, *, name: str = "upcoming") -> None:
        super().__init__(UpcomingInitial(), name=name, error_snapshot=lambda message: UpcomingFailure(message=message))
        self._source = source

        self.on(LoadUpcoming, self._on_load)
        self.on(RefreshUpcoming, self._on_refresh)
        self.on(UpdateUpcomingItem, self._on_update_item)

    async def _on_load(self, intent: LoadUpcoming, state: UpcomingState) -> AsyncIterator[UpcomingState]:
        yield UpcomingLoading()
        try:
            items = await self._source.fetch_upcoming()
        except FetchError as exc:
            yield UpcomingFailure(message=f"Failed to load upcoming releases: {exc}")
            return
        yield UpcomingLoaded(items=tuple(items))

    async def _on_refresh(self, intent: RefreshUpcoming, state: UpcomingState) -> AsyncIterator[UpcomingState]:
        try:
            items = await self._source.fetch_upcoming()
        except FetchError as exc:
            yield UpcomingFailure(message=f"Failed to refresh upcoming releases: {exc}")
            return
        yield UpcomingLoaded(items=tuple(items))

    async def _on_update_item(self, intent: UpdateUpcomingItem, state: UpcomingState) -> AsyncIterator[UpcomingState]:
        """Re-fetch a single entry in place. Any failure leaves the list untouched."""
        if not isinstance(state, UpcomingLoaded):
            return
        if not any(item.id == intent.item_id for item in state.items):
            logger.debug(f"{self.name}: item {intent.item_id} is not in the upcoming list")
            return
        try:
            fresh = await self._source.fetch_by_id(intent.item_id)
        except Exception as exc:
            logger.warning(f"{self.name}: refreshing item {intent.item_id} failed: {exc}")
            return
        if fresh is None:
            logger.warning(f"{self.name}: item {intent.item_id} no longer exists")
            return
        items = tuple(fresh if item.id == fresh.id else item for item in state.items)
        if items != state.items:
            yield UpcomingLoaded(items=items)
