"""Category browsing: the full catalog with filter, in-list search and sort."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional, Tuple, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.derived import CollectionCache, SortKey, ViewQuery, derive_view
from marquee.shared.core.errors import FetchError, ValidationError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.domain.catalog import CONTENT_FACETS, CatalogSource, Category, ContentItem

logger = logging.getLogger(__name__)


# --- Intents ---

class LoadCatalog(Intent):
    pass


class RefreshCatalog(Intent):
    pass


class FilterByCategory(Intent):
    category: str


class ClearCategoryFilter(Intent):
    pass


class SearchInCategory(Intent):
    query: str


class SortCatalog(Intent):
    sort: SortKey


CatalogIntent = Union[
    LoadCatalog, RefreshCatalog, FilterByCategory, ClearCategoryFilter, SearchInCategory, SortCatalog
]


# --- Snapshots ---

class CatalogInitial(Snapshot):
    pass


class CatalogLoading(Snapshot):
    pass


class CatalogLoaded(Snapshot):
    items: Tuple[ContentItem, ...]
    categories: Tuple[Category, ...] = ()
    view: ViewQuery = ViewQuery()

    @property
    def active_filter(self) -> Optional[str]:
        return self.view.filter

    @property
    def active_query(self) -> str:
        return self.view.query

    @property
    def active_sort(self) -> Optional[SortKey]:
        return self.view.sort

    @property
    def item_ids(self) -> Tuple[int, ...]:
        return tuple(item.id for item in self.items)


class CatalogFailure(Snapshot):
    message: str


CatalogState = Union[CatalogInitial, CatalogLoading, CatalogLoaded, CatalogFailure]


class CatalogContainer(StateContainer[CatalogState]):
    """Holds the base collection cache and derives the visible list from it.

    The last view shown is kept on the container, so a load retried after a
    failure comes back with the same filter, query and sort.
    """

    def __init__(self, source: CatalogSource, *, name: str = "catalog") -> None:
        super().__init__(CatalogInitial(), name=name, error_snapshot=lambda message: CatalogFailure(message=message))
        self._source = source
        self._cache: CollectionCache[ContentItem] = CollectionCache(key=lambda item: item.id)
        self._categories: Tuple[Category, ...] = ()
        self._view = ViewQuery()

        self.on(LoadCatalog, self._on_load)
        self.on(RefreshCatalog, self._on_refresh)
        self.on(FilterByCategory, self._on_filter)
        self.on(ClearCategoryFilter, self._on_clear_filter)
        self.on(SearchInCategory, self._on_search)
        self.on(SortCatalog, self._on_sort)

    def _loaded(self, view: ViewQuery) -> CatalogLoaded:
        self._view = view
        return CatalogLoaded(
            items=derive_view(self._cache.items(), view, CONTENT_FACETS),
            categories=self._categories,
            view=view,
        )

    async def _fetch(self) -> None:
        categories = await self._source.fetch_categories()
        items = await self._source.fetch_all()
        self._categories = tuple(categories)
        self._cache.replace(items)

    async def _on_load(self, intent: LoadCatalog, state: CatalogState) -> AsyncIterator[CatalogState]:
        yield CatalogLoading()
        try:
            await self._fetch()
        except FetchError as exc:
            yield CatalogFailure(message=f"Failed to load catalog: {exc}")
            return
        yield self._loaded(self._view)

    async def _on_refresh(self, intent: RefreshCatalog, state: CatalogState) -> AsyncIterator[CatalogState]:
        # No loading emission on refresh to avoid flicker.
        try:
            await self._fetch()
        except FetchError as exc:
            yield CatalogFailure(message=f"Failed to refresh catalog: {exc}")
            return
        yield self._loaded(self._view)

    async def _on_filter(self, intent: FilterByCategory, state: CatalogState) -> AsyncIterator[CatalogState]:
        if not isinstance(state, CatalogLoaded):
            logger.debug(f"{self.name}: {intent.tag} ignored in {state.tag}")
            return
        try:
            category = self._validate_category(intent.category)
        except ValidationError as exc:
            yield CatalogFailure(message=str(exc))
            yield state
            return
        yield self._loaded(state.view.with_filter(category))

    async def _on_clear_filter(self, intent: ClearCategoryFilter, state: CatalogState) -> AsyncIterator[CatalogState]:
        if isinstance(state, CatalogLoaded):
            yield self._loaded(state.view.with_filter(None))

    async def _on_search(self, intent: SearchInCategory, state: CatalogState) -> AsyncIterator[CatalogState]:
        if isinstance(state, CatalogLoaded):
            yield self._loaded(state.view.with_query(intent.query.strip()))

    async def _on_sort(self, intent: SortCatalog, state: CatalogState) -> AsyncIterator[CatalogState]:
        if isinstance(state, CatalogLoaded):
            yield self._loaded(state.view.with_sort(intent.sort))

    def _validate_category(self, category: str) -> str:
        name = category.strip()
        if not name:
            raise ValidationError("Category name must not be empty")
        known = {c.name for c in self._categories} | {item.category for item in self._cache}
        if name not in known:
            raise ValidationError(f"Unknown category: {name}")
        return name
