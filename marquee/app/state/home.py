"""Home screen: featured titles plus one row per configured category."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict

from marquee.shared.core.container import StateContainer
from marquee.shared.core.errors import FetchError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.domain.catalog import CatalogSource, Category, ContentItem

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = ("Comedy", "Thriller", "Romance")


# --- Intents ---

class LoadHome(Intent):
    pass


class RefreshHome(Intent):
    pass


class NavigateToCategory(Intent):
    category: str


class NavigateToDetails(Intent):
    item: ContentItem


# --- Snapshots ---

class HomeSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    items: Tuple[ContentItem, ...]


class HomeInitial(Snapshot):
    pass


class HomeLoading(Snapshot):
    pass


class HomeLoaded(Snapshot):
    featured: Tuple[ContentItem, ...]
    sections: Tuple[HomeSection, ...] = ()
    categories: Tuple[Category, ...] = ()

    def section(self, name: str) -> Optional[HomeSection]:
        for section in self.sections:
            if section.name == name:
                return section
        return None


class HomeFailure(Snapshot):
    message: str


HomeState = Union[HomeInitial, HomeLoading, HomeLoaded, HomeFailure]


class HomeContainer(StateContainer[HomeState]):

    def __init__(
        self,
        source: CatalogSource,
        *,
        sections: Sequence[str] = DEFAULT_SECTIONS,
        name: str = "home",
    ) -> None:
        super().__init__(HomeInitial(), name=name, error_snapshot=lambda message: HomeFailure(message=message))
        self._source = source
        self._sections = tuple(sections)

        self.on(LoadHome, self._on_load)
        self.on(RefreshHome, self._on_refresh)
        self.on(NavigateToCategory, self._on_navigate_to_category)
        self.on(NavigateToDetails, self._on_navigate_to_details)

    async def _fetch(self) -> HomeLoaded:
        featured = await self._source.fetch_featured()
        sections = []
        for section_name in self._sections:
            items = await self._source.fetch_by_filter(section_name)
            sections.append(HomeSection(name=section_name, items=tuple(items)))
        categories = await self._source.fetch_categories()
        return HomeLoaded(featured=tuple(featured), sections=tuple(sections), categories=tuple(categories))

    async def _on_load(self, intent: LoadHome, state: HomeState) -> AsyncIterator[HomeState]:
        yield HomeLoading()
        try:
            yield await self._fetch()
        except FetchError as exc:
            yield HomeFailure(message=f"Failed to load home content: {exc}")

    async def _on_refresh(self, intent: RefreshHome, state: HomeState) -> AsyncIterator[HomeState]:
        try:
            yield await self._fetch()
        except FetchError as exc:
            yield HomeFailure(message=f"Failed to refresh home content: {exc}")

    # Navigation is handled by the presentation layer; these only leave a trace.

    async def _on_navigate_to_category(self, intent: NavigateToCategory, state: HomeState) -> None:
        logger.info(f"{self.name}: navigate to category '{intent.category}'")

    async def _on_navigate_to_details(self, intent: NavigateToDetails, state: HomeState) -> None:
        logger.info(f"{self.name}: navigate to details of {intent.item.id} '{intent.item.title}'")
