"""Favorites: membership of catalog items in the user's set, toggled optimistically."""

from __future__ import annotations

import logging
from typing import AsyncIterator, FrozenSet, Tuple, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.derived import CollectionCache
from marquee.shared.core.errors import FetchError, ValidationError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.core.optimistic import OptimisticUpdate
from marquee.shared.domain.catalog import Ack, CatalogSource, ContentItem, FavoriteDelta

logger = logging.getLogger(__name__)


# --- Intents ---

class LoadFavorites(Intent):
    pass


class ToggleFavorite(Intent):
    item_id: int


# --- Snapshots ---

class FavoritesInitial(Snapshot):
    pass


class FavoritesLoading(Snapshot):
    pass


class FavoritesLoaded(Snapshot):
    items: Tuple[ContentItem, ...]
    favorite_ids: FrozenSet[int]

    def is_favorite(self, item_id: int) -> bool:
        return item_id in self.favorite_ids


class FavoritesPending(Snapshot):
    """Expected membership after the toggle, before the data source confirmed it."""
    item_id: int
    favorited: bool
    favorite_ids: FrozenSet[int]


class FavoritesFailure(Snapshot):
    message: str


FavoritesState = Union[FavoritesInitial, FavoritesLoading, FavoritesLoaded, FavoritesPending, FavoritesFailure]


class FavoritesContainer(StateContainer[FavoritesState]):

    def __init__(self, source: CatalogSource, *, name: str = "favorites") -> None:
        super().__init__(FavoritesInitial(), name=name, error_snapshot=lambda message: FavoritesFailure(message=message))
        self._source = source
        self._cache: CollectionCache[ContentItem] = CollectionCache(key=lambda item: item.id)

        self.on(LoadFavorites, self._on_load)
        self.on(ToggleFavorite, self._on_toggle)

    def _loaded(self, favorite_ids: FrozenSet[int]) -> FavoritesLoaded:
        return FavoritesLoaded(
            items=tuple(item for item in self._cache if item.id in favorite_ids),
            favorite_ids=frozenset(favorite_ids),
        )

    async def _on_load(self, intent: LoadFavorites, state: FavoritesState) -> AsyncIterator[FavoritesState]:
        yield FavoritesLoading()
        try:
            items = await self._source.fetch_all()
            favorite_ids = await self._source.fetch_favorites()
        except FetchError as exc:
            yield FavoritesFailure(message=f"Failed to load favorites: {exc}")
            return
        self._cache.replace(items)
        yield self._loaded(favorite_ids)

    async def _on_toggle(self, intent: ToggleFavorite, state: FavoritesState) -> AsyncIterator[FavoritesState]:
        if not isinstance(state, FavoritesLoaded):
            logger.debug(f"{self.name}: {intent.tag} ignored in {state.tag}")
            return
        item_id = intent.item_id
        if item_id not in self._cache:
            yield FavoritesFailure(message=str(ValidationError(f"Unknown item {item_id}", entity_id=item_id)))
            yield state
            return

        delta = FavoriteDelta.REMOVE if state.is_favorite(item_id) else FavoriteDelta.ADD
        if delta is FavoriteDelta.ADD:
            expected_ids = state.favorite_ids | {item_id}
        else:
            expected_ids = state.favorite_ids - {item_id}

        async def confirm(ack: Ack) -> FavoritesState:
            return self._loaded(await self._source.fetch_favorites())

        update: OptimisticUpdate[FavoritesState, Ack] = OptimisticUpdate(
            apply_optimistic=lambda prior: FavoritesPending(
                item_id=item_id,
                favorited=delta is FavoriteDelta.ADD,
                favorite_ids=expected_ids,
            ),
            commit_on_success=confirm,
            compensate_on_failure=lambda prior, message: FavoritesFailure(
                message=f"Failed to update favorites: {message}"
            ),
            settle_unconfirmed=lambda prior: self._loaded(expected_ids),
            owner=self.name,
        )
        async for snapshot in update.run(
            item_id, state, lambda: self._source.mutate(item_id, delta), label=f"favorite {delta.value} {item_id}"
        ):
            yield snapshot
