"""Feature Store - scoped access to the feature containers.

Creates each feature container on first acquisition and closes it once its
last holder releases it. There is no global instance: whoever builds the Store
owns it and passes it to the screens that need state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from marquee.shared.core.configuration import SystemConfig
from marquee.shared.core.container import StateContainer
from marquee.shared.domain.catalog import CatalogSource

from .catalog import CatalogContainer
from .details import DetailsContainer
from .favorites import FavoritesContainer
from .home import HomeContainer
from .profile import ProfileContainer
from .search import SearchContainer
from .upcoming import UpcomingContainer

logger = logging.getLogger(__name__)


class Feature(str, Enum):
    HOME = "home"
    CATALOG = "catalog"
    SEARCH = "search"
    DETAILS = "details"
    FAVORITES = "favorites"
    PROFILE = "profile"
    UPCOMING = "upcoming"


@dataclass
class _Entry:
    container: StateContainer
    holders: int = 0


class Store:
    """Reference-counted registry of feature containers.

    Usage:
        store = Store(source, config)
        catalog = store.acquire(Feature.CATALOG)
        catalog.dispatch(LoadCatalog())
        ...
        store.release(Feature.CATALOG)
        await store.close()
    """

    def __init__(self, source: CatalogSource, config: Optional[SystemConfig] = None) -> None:
        """Initialize the store.

        Args:
            source: Data source shared by every feature container
            config: System configuration; defaults are used when omitted
        """
        self.source = source
        self.config = config or SystemConfig()
        self._entries: Dict[Feature, _Entry] = {}
        self._closed = False
        self._factories: Dict[Feature, Callable[[], StateContainer]] = {
            Feature.HOME: lambda: HomeContainer(source, sections=self.config.catalog.home_sections),
            Feature.CATALOG: lambda: CatalogContainer(source),
            Feature.SEARCH: lambda: SearchContainer(source, quiet_window=self.config.engine.debounce_window),
            Feature.DETAILS: lambda: DetailsContainer(source, similar_limit=self.config.engine.similar_content_limit),
            Feature.FAVORITES: lambda: FavoritesContainer(source),
            Feature.PROFILE: lambda: ProfileContainer(source),
            Feature.UPCOMING: lambda: UpcomingContainer(source),
        }

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> List[Feature]:
        return list(self._entries)

    def holders(self, feature: Feature) -> int:
        entry = self._entries.get(Feature(feature))
        return entry.holders if entry else 0

    def acquire(self, feature: Feature) -> StateContainer:
        """Get the container for a feature, creating it on first use.

        Returns:
            The live container for the feature

        Raises:
            RuntimeError: If the store has been closed
        """
        if self._closed:
            raise RuntimeError("Store is closed")
        feature = Feature(feature)
        entry = self._entries.get(feature)
        if entry is None:
            entry = _Entry(container=self._factories[feature]())
            self._entries[feature] = entry
            logger.debug(f"Store: created '{feature.value}' container")
        entry.holders += 1
        return entry.container

    def release(self, feature: Feature) -> None:
        """Drop one hold on a feature; the container is closed with the last one."""
        feature = Feature(feature)
        entry = self._entries.get(feature)
        if entry is None:
            logger.warning(f"Store: release of '{feature.value}' without a matching acquire")
            return
        entry.holders -= 1
        if entry.holders <= 0:
            del self._entries[feature]
            entry.container.close()
            logger.debug(f"Store: closed '{feature.value}' container")

    async def wait_until_idle(self, timeout: Optional[float] = None) -> None:
        timeout = self.config.engine.idle_timeout if timeout is None else timeout
        for entry in list(self._entries.values()):
            await entry.container.wait_until_idle(timeout=timeout)

    async def close(self) -> None:
        """Close every live container. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        entries, self._entries = self._entries, {}
        for feature, entry in entries.items():
            entry.container.close()
            logger.debug(f"Store: closed '{feature.value}' container")
        logger.info(f"Store closed ({len(entries)} containers)")
