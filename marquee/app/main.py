"""Marquee - demo entry point.

Drives every feature container through a short scripted session against the
in-memory catalog and logs each committed snapshot.
"""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from marquee.app.state.catalog import FilterByCategory, LoadCatalog, SearchInCategory, SortCatalog
from marquee.app.state.details import AddToWatchlist, LoadDetails, PlayContent
from marquee.app.state.favorites import LoadFavorites, ToggleFavorite
from marquee.app.state.home import LoadHome, NavigateToCategory
from marquee.app.state.profile import ChangeVideoQuality, LoadProfile, ToggleDarkMode
from marquee.app.state.search import QueryChanged
from marquee.app.state.store import Feature, Store
from marquee.app.state.upcoming import LoadUpcoming, UpdateUpcomingItem
from marquee.shared.core.configuration import LoggingConfig, SystemConfig, ValidationLevel, get_config
from marquee.shared.core.derived import SortKey
from marquee.shared.core.intents import Snapshot
from marquee.shared.domain.catalog import VideoQuality
from marquee.shared.infrastructure.catalog import InMemoryCatalogSource

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(settings: LoggingConfig) -> None:
    """Set up the root logger.

    File handler: everything at the configured level, rotated by size (only
    when a log file is configured). Console handler: warnings and errors unless
    configured otherwise.
    """
    file_log_level = LOG_LEVELS.get(settings.level.upper(), logging.INFO)
    console_log_level = LOG_LEVELS.get(settings.console_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_log_level, console_log_level))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if settings.log_file:
        log_file_path = Path(settings.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(file_log_level)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_log_level)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # asyncio debug chatter is not useful here
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger.info(
        f"Logging configured: file={settings.log_file or 'disabled'}, console={settings.console_level.upper()}+"
    )


def _trace(feature: Feature):
    def log_snapshot(snapshot: Snapshot) -> None:
        logger.info(f"[{feature.value}] {snapshot.tag}")
    return log_snapshot


async def run_demo(config: SystemConfig, source: Optional[InMemoryCatalogSource] = None) -> Store:
    """Run the scripted session and return the (closed) store."""
    source = source or InMemoryCatalogSource(latency=config.catalog.simulated_latency)
    store = Store(source, config)
    logger.info(f"Demo starting with {source.describe()}")

    try:
        containers = {feature: store.acquire(feature) for feature in Feature}
        for feature, container in containers.items():
            container.listen(_trace(feature))

        home = containers[Feature.HOME]
        home.dispatch(LoadHome())
        home.dispatch(NavigateToCategory(category="Comedy"))

        catalog = containers[Feature.CATALOG]
        catalog.dispatch(LoadCatalog())
        catalog.dispatch(FilterByCategory(category="Sci-Fi"))
        catalog.dispatch(SearchInCategory(query="space"))
        catalog.dispatch(SortCatalog(sort=SortKey.SCORE))

        upcoming = containers[Feature.UPCOMING]
        upcoming.dispatch(LoadUpcoming())

        favorites = containers[Feature.FAVORITES]
        favorites.dispatch(LoadFavorites())

        profile = containers[Feature.PROFILE]
        profile.dispatch(LoadProfile())

        await store.wait_until_idle()

        first = home.state.featured[0] if hasattr(home.state, "featured") else None
        if first is not None:
            details = containers[Feature.DETAILS]
            details.dispatch(LoadDetails(item=first))
            details.dispatch(AddToWatchlist())
            details.dispatch(PlayContent())
            upcoming.dispatch(UpdateUpcomingItem(item_id=first.id))
            favorites.dispatch(ToggleFavorite(item_id=first.id))

        profile.dispatch(ToggleDarkMode(enabled=False))
        profile.dispatch(ChangeVideoQuality(quality=VideoQuality.HIGH))

        search = containers[Feature.SEARCH]
        for text in ("t", "th", "the"):
            search.dispatch(QueryChanged(text=text))

        await store.wait_until_idle()
        await search.debouncer.wait_until_idle(timeout=config.engine.idle_timeout)
        await store.wait_until_idle()

        for feature, container in containers.items():
            logger.info(f"[{feature.value}] final: {container.state.tag}")
            store.release(feature)
    finally:
        await store.close()
    return store


def main() -> None:
    load_dotenv()
    config = get_config(ValidationLevel.LENIENT)
    configure_logging(config.logging)
    try:
        asyncio.run(run_demo(config))
    except KeyboardInterrupt:
        logger.info("Demo interrupted")


if __name__ == "__main__":
    main()
