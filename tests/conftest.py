"""Shared fixtures for the state layer test suite."""

from __future__ import annotations

import asyncio
from typing import List, Sequence

import pytest

from marquee.shared.core.container import StateContainer
from marquee.shared.domain.catalog import ContentItem, FavoriteDelta
from marquee.shared.infrastructure.catalog import InMemoryCatalogSource


SCENARIO_ITEMS = (
    ContentItem(id=1, title="Fast & Furious", category="Action", rating=8.5, description="Car chases"),
    ContentItem(id=2, title="Laugh Out Loud", category="Comedy", rating=7.9, description="A hilarious comedy"),
)


class RecordingSource(InMemoryCatalogSource):
    """In-memory source that remembers which lookups and mutations reached it."""

    def __init__(self, *args, search_delay: float = 0.0, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.search_delay = search_delay
        self.search_calls: List[tuple] = []
        self.mutate_calls: List[tuple] = []

    async def search(self, query: str) -> Sequence[ContentItem]:
        self.search_calls.append((asyncio.get_running_loop().time(), query))
        if self.search_delay:
            await asyncio.sleep(self.search_delay)
        return await super().search(query)

    async def mutate(self, item_id: int, delta: FavoriteDelta):
        self.mutate_calls.append((item_id, delta))
        return await super().mutate(item_id, delta)

    @property
    def searched_queries(self) -> List[str]:
        return [query for _, query in self.search_calls]


def record(container: StateContainer) -> list:
    """Collect every snapshot committed from now on."""
    seen: list = []
    container.listen(seen.append, replay=False)
    return seen


async def settle(container: StateContainer, timeout: float = 5.0) -> None:
    """Wait for the queue, any debounced lookup it started, and the intents that lookup queued."""
    await container.wait_until_idle(timeout=timeout)
    debouncer = getattr(container, "debouncer", None)
    if debouncer is not None:
        await debouncer.wait_until_idle(timeout=timeout)
        await container.wait_until_idle(timeout=timeout)


@pytest.fixture
def scenario_items():
    return SCENARIO_ITEMS


@pytest.fixture
def scenario_source():
    """Two-item catalog with nothing favorited."""
    return RecordingSource(items=SCENARIO_ITEMS, favorites=())


@pytest.fixture
def catalog_source():
    """Full seed catalog with no simulated latency."""
    return RecordingSource()
