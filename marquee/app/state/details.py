"""Item detail: the item, related items of the same category and watchlist membership."""

from __future__ import annotations

import logging
from typing import AsyncIterator, FrozenSet, Sequence, Tuple, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.errors import FetchError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.core.optimistic import OptimisticUpdate
from marquee.shared.domain.catalog import Ack, CatalogSource, ContentItem, FavoriteDelta

logger = logging.getLogger(__name__)

DEFAULT_SIMILAR_LIMIT = 6


# --- Intents ---

class LoadDetails(Intent):
    item: ContentItem


class PlayContent(Intent):
    pass


class AddToWatchlist(Intent):
    pass


class RemoveFromWatchlist(Intent):
    pass


class LoadSimilarContent(Intent):
    category: str


# --- Snapshots ---

class DetailsInitial(Snapshot):
    pass


class DetailsLoading(Snapshot):
    pass


class DetailsLoaded(Snapshot):
    item: ContentItem
    similar: Tuple[ContentItem, ...] = ()
    in_watchlist: bool = False
    is_playing: bool = False


class DetailsPending(Snapshot):
    """Watchlist change sent, not yet confirmed."""
    item_id: int
    in_watchlist: bool
    expected: DetailsLoaded


class ContentPlaying(Snapshot):
    item: ContentItem


class DetailsFailure(Snapshot):
    message: str


DetailsState = Union[DetailsInitial, DetailsLoading, DetailsLoaded, DetailsPending, ContentPlaying, DetailsFailure]


class DetailsContainer(StateContainer[DetailsState]):

    def __init__(
        self,
        source: CatalogSource,
        *,
        similar_limit: int = DEFAULT_SIMILAR_LIMIT,
        name: str = "details",
    ) -> None:
        super().__init__(DetailsInitial(), name=name, error_snapshot=lambda message: DetailsFailure(message=message))
        self._source = source
        self._similar_limit = similar_limit

        self.on(LoadDetails, self._on_load)
        self.on(PlayContent, self._on_play)
        self.on(AddToWatchlist, self._on_add_to_watchlist)
        self.on(RemoveFromWatchlist, self._on_remove_from_watchlist)
        self.on(LoadSimilarContent, self._on_load_similar)

    def _similar(self, item: ContentItem, candidates: Sequence[ContentItem]) -> Tuple[ContentItem, ...]:
        related = [candidate for candidate in candidates if candidate.id != item.id]
        return tuple(related[: self._similar_limit])

    async def _on_load(self, intent: LoadDetails, state: DetailsState) -> AsyncIterator[DetailsState]:
        yield DetailsLoading()
        try:
            candidates = await self._source.fetch_by_filter(intent.item.category)
            favorites = await self._source.fetch_favorites()
        except FetchError as exc:
            yield DetailsFailure(message=f"Failed to load content details: {exc}")
            return
        yield DetailsLoaded(
            item=intent.item,
            similar=self._similar(intent.item, candidates),
            in_watchlist=intent.item.id in favorites,
        )

    async def _on_play(self, intent: PlayContent, state: DetailsState) -> AsyncIterator[DetailsState]:
        if not isinstance(state, DetailsLoaded):
            return
        yield ContentPlaying(item=state.item)
        yield state.model_copy(update={"is_playing": True})

    async def _on_add_to_watchlist(self, intent: AddToWatchlist, state: DetailsState) -> AsyncIterator[DetailsState]:
        async for snapshot in self._change_watchlist(state, FavoriteDelta.ADD):
            yield snapshot

    async def _on_remove_from_watchlist(self, intent: RemoveFromWatchlist, state: DetailsState) -> AsyncIterator[DetailsState]:
        async for snapshot in self._change_watchlist(state, FavoriteDelta.REMOVE):
            yield snapshot

    async def _change_watchlist(self, state: DetailsState, delta: FavoriteDelta) -> AsyncIterator[DetailsState]:
        if not isinstance(state, DetailsLoaded):
            logger.debug(f"{self.name}: watchlist change ignored in {state.tag}")
            return
        wanted = delta is FavoriteDelta.ADD
        if state.in_watchlist == wanted:
            return

        item_id = state.item.id
        expected = state.model_copy(update={"in_watchlist": wanted})

        async def confirm(ack: Ack) -> DetailsState:
            favorites: FrozenSet[int] = await self._source.fetch_favorites()
            return state.model_copy(update={"in_watchlist": item_id in favorites})

        update = OptimisticUpdate(
            apply_optimistic=lambda prior: DetailsPending(item_id=item_id, in_watchlist=wanted, expected=expected),
            commit_on_success=confirm,
            compensate_on_failure=lambda prior, message: DetailsFailure(
                message=f"Failed to update watchlist: {message}"
            ),
            settle_unconfirmed=lambda prior: expected,
            owner=self.name,
        )
        async for snapshot in update.run(
            item_id, state, lambda: self._source.mutate(item_id, delta), label=f"watchlist {delta.value} {item_id}"
        ):
            yield snapshot

    async def _on_load_similar(self, intent: LoadSimilarContent, state: DetailsState) -> AsyncIterator[DetailsState]:
        if not isinstance(state, DetailsLoaded):
            return
        try:
            candidates = await self._source.fetch_by_filter(intent.category)
        except Exception as exc:
            # Secondary data: keep the loaded detail view as it is.
            logger.warning(f"{self.name}: similar content for '{intent.category}' unavailable: {exc}")
            return
        yield state.model_copy(update={"similar": self._similar(state.item, candidates)})
