"""
CatalogContainer Tests

Loading, category filter, in-list search and sort over the base collection.
"""

import pytest

from marquee.app.state.catalog import (
    CatalogContainer,
    CatalogFailure,
    CatalogInitial,
    CatalogLoaded,
    CatalogLoading,
    ClearCategoryFilter,
    FilterByCategory,
    LoadCatalog,
    RefreshCatalog,
    SearchInCategory,
    SortCatalog,
)
from marquee.shared.core.derived import SortKey, ViewQuery
from marquee.shared.domain.catalog import Category
from tests.conftest import record


async def loaded_container(source):
    container = CatalogContainer(source)
    container.dispatch(LoadCatalog())
    await container.wait_until_idle()
    assert isinstance(container.state, CatalogLoaded)
    return container


class TestCatalogLoading:
    """LoadCatalog and RefreshCatalog."""

    @pytest.mark.asyncio
    async def test_load_emits_loading_then_loaded(self, scenario_source, scenario_items):
        container = CatalogContainer(scenario_source)
        seen = record(container)

        container.dispatch(LoadCatalog())
        await container.wait_until_idle()

        assert seen == [
            CatalogLoading(),
            CatalogLoaded(
                items=scenario_items,
                categories=(Category(id="1", name="Action"), Category(id="2", name="Comedy")),
                view=ViewQuery(),
            ),
        ]
        assert seen[-1].item_ids == (1, 2)
        assert seen[-1].active_filter is None
        container.close()

    @pytest.mark.asyncio
    async def test_load_is_idempotent(self, scenario_source):
        container = await loaded_container(scenario_source)
        first = container.state

        container.dispatch(LoadCatalog())
        await container.wait_until_idle()

        assert container.state == first
        container.close()

    @pytest.mark.asyncio
    async def test_load_failure_then_retry(self, scenario_source):
        scenario_source.fail("fetch_all")
        container = CatalogContainer(scenario_source)
        seen = record(container)

        container.dispatch(LoadCatalog())
        await container.wait_until_idle()

        assert seen == [
            CatalogLoading(),
            CatalogFailure(message="Failed to load catalog: fetch_all failed: backend unavailable"),
        ]

        scenario_source.recover()
        container.dispatch(LoadCatalog())
        await container.wait_until_idle()

        assert isinstance(container.state, CatalogLoaded)
        assert container.state.item_ids == (1, 2)
        container.close()

    @pytest.mark.asyncio
    async def test_refresh_keeps_view_and_skips_loading(self, catalog_source):
        container = await loaded_container(catalog_source)
        container.dispatch(FilterByCategory(category="Comedy"))
        await container.wait_until_idle()
        seen = record(container)

        container.dispatch(RefreshCatalog())
        await container.wait_until_idle()

        assert len(seen) == 1
        assert seen[0].active_filter == "Comedy"
        assert all(item.category == "Comedy" for item in seen[0].items)
        container.close()

    @pytest.mark.asyncio
    async def test_retry_after_failed_refresh_restores_view(self, catalog_source):
        container = await loaded_container(catalog_source)
        container.dispatch(FilterByCategory(category="Comedy"))
        container.dispatch(SortCatalog(sort=SortKey.SCORE))
        await container.wait_until_idle()
        before = container.state

        catalog_source.fail("fetch_all")
        container.dispatch(RefreshCatalog())
        await container.wait_until_idle()
        assert isinstance(container.state, CatalogFailure)

        catalog_source.recover()
        container.dispatch(LoadCatalog())
        await container.wait_until_idle()

        assert container.state.view == ViewQuery(filter="Comedy", sort=SortKey.SCORE)
        assert container.state == before
        container.close()

    @pytest.mark.asyncio
    async def test_view_intents_before_load_are_ignored(self, scenario_source):
        container = CatalogContainer(scenario_source)
        seen = record(container)

        container.dispatch(FilterByCategory(category="Comedy"))
        container.dispatch(SortCatalog(sort=SortKey.SCORE))
        await container.wait_until_idle()

        assert seen == []
        assert container.state == CatalogInitial()
        container.close()


class TestCatalogView:
    """Filter, search and sort keep the other axes."""

    @pytest.mark.asyncio
    async def test_filter_then_sort_keeps_filter(self, scenario_source):
        container = await loaded_container(scenario_source)
        seen = record(container)

        container.dispatch(FilterByCategory(category="Comedy"))
        container.dispatch(SortCatalog(sort=SortKey.SCORE))
        await container.wait_until_idle()

        assert [snapshot.item_ids for snapshot in seen] == [(2,), (2,)]
        assert seen[0].view == ViewQuery(filter="Comedy")
        assert seen[1].view == ViewQuery(filter="Comedy", sort=SortKey.SCORE)
        container.close()

    @pytest.mark.asyncio
    async def test_filter_round_trip_restores_unfiltered_view(self, catalog_source):
        container = await loaded_container(catalog_source)
        baseline = container.state

        container.dispatch(FilterByCategory(category="Drama"))
        container.dispatch(ClearCategoryFilter())
        await container.wait_until_idle()

        assert container.state == baseline
        container.close()

    @pytest.mark.asyncio
    async def test_clear_filter_keeps_query_and_sort(self, catalog_source):
        container = await loaded_container(catalog_source)

        container.dispatch(SearchInCategory(query="love"))
        container.dispatch(SortCatalog(sort=SortKey.ALPHABETICAL))
        container.dispatch(FilterByCategory(category="Romance"))
        container.dispatch(ClearCategoryFilter())
        await container.wait_until_idle()

        assert container.state.view == ViewQuery(query="love", sort=SortKey.ALPHABETICAL)
        titles = [item.title for item in container.state.items]
        assert titles == sorted(titles)
        container.close()

    @pytest.mark.asyncio
    async def test_search_in_category_matches_title_and_description(self, catalog_source):
        container = await loaded_container(catalog_source)

        container.dispatch(FilterByCategory(category="Sci-Fi"))
        container.dispatch(SearchInCategory(query="  SPACE "))
        await container.wait_until_idle()

        assert container.state.active_query == "SPACE"
        assert container.state.item_ids == (12,)
        container.close()

    @pytest.mark.asyncio
    async def test_score_sort_over_full_catalog(self, catalog_source):
        container = await loaded_container(catalog_source)

        container.dispatch(SortCatalog(sort=SortKey.SCORE))
        await container.wait_until_idle()

        ratings = [item.rating for item in container.state.items]
        assert ratings == sorted(ratings, reverse=True)
        assert container.state.item_ids[0] == 4
        container.close()

    @pytest.mark.asyncio
    async def test_unknown_category_is_rejected_and_prior_restored(self, scenario_source):
        container = await loaded_container(scenario_source)
        prior = container.state
        seen = record(container)

        container.dispatch(FilterByCategory(category="Horror"))
        await container.wait_until_idle()

        assert seen == [CatalogFailure(message="Unknown category: Horror"), prior]
        container.close()

    @pytest.mark.asyncio
    async def test_empty_category_is_rejected(self, scenario_source):
        container = await loaded_container(scenario_source)
        prior = container.state

        container.dispatch(FilterByCategory(category="   "))
        await container.wait_until_idle()

        assert container.state == prior
        container.close()
