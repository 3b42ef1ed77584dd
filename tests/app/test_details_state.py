"""
DetailsContainer Tests

Item detail loading, playback, optimistic watchlist changes and isolated
related-content refresh.
"""

import pytest

from marquee.app.state.details import (
    AddToWatchlist,
    ContentPlaying,
    DetailsContainer,
    DetailsFailure,
    DetailsLoaded,
    DetailsLoading,
    DetailsPending,
    LoadDetails,
    LoadSimilarContent,
    PlayContent,
    RemoveFromWatchlist,
)
from marquee.shared.domain.catalog import ContentItem, FavoriteDelta
from tests.conftest import RecordingSource, record

ITEMS = (
    ContentItem(id=1, title="One", category="Action", rating=8.0),
    ContentItem(id=2, title="Two", category="Action", rating=7.0),
    ContentItem(id=3, title="Three", category="Action", rating=6.0),
    ContentItem(id=4, title="Four", category="Action", rating=5.0),
    ContentItem(id=5, title="Five", category="Drama", rating=9.0),
)


@pytest.fixture
def source():
    return RecordingSource(items=ITEMS, favorites={4})


async def loaded_container(source, item=ITEMS[0], similar_limit=2):
    container = DetailsContainer(source, similar_limit=similar_limit)
    container.dispatch(LoadDetails(item=item))
    await container.wait_until_idle()
    assert isinstance(container.state, DetailsLoaded)
    return container


class TestDetailsLoading:

    @pytest.mark.asyncio
    async def test_load_excludes_item_and_caps_similar(self, source):
        container = DetailsContainer(source, similar_limit=2)
        seen = record(container)

        container.dispatch(LoadDetails(item=ITEMS[0]))
        await container.wait_until_idle()

        assert seen == [
            DetailsLoading(),
            DetailsLoaded(item=ITEMS[0], similar=(ITEMS[1], ITEMS[2]), in_watchlist=False),
        ]
        container.close()

    @pytest.mark.asyncio
    async def test_load_reports_watchlist_membership(self, source):
        container = await loaded_container(source, item=ITEMS[3])

        assert container.state.in_watchlist is True
        assert container.state.similar == (ITEMS[0], ITEMS[1])
        container.close()

    @pytest.mark.asyncio
    async def test_load_failure(self, source):
        source.fail("fetch_by_filter")
        container = DetailsContainer(source)

        container.dispatch(LoadDetails(item=ITEMS[0]))
        await container.wait_until_idle()

        assert container.state == DetailsFailure(
            message="Failed to load content details: fetch_by_filter failed: backend unavailable"
        )
        container.close()

    @pytest.mark.asyncio
    async def test_play_emits_transient_playing_state(self, source):
        container = await loaded_container(source)
        prior = container.state
        seen = record(container)

        container.dispatch(PlayContent())
        await container.wait_until_idle()

        assert seen == [ContentPlaying(item=ITEMS[0]), prior.model_copy(update={"is_playing": True})]
        container.close()


class TestWatchlist:

    @pytest.mark.asyncio
    async def test_add_to_watchlist_is_optimistic_and_confirmed(self, source):
        container = await loaded_container(source)
        prior = container.state
        seen = record(container)

        container.dispatch(AddToWatchlist())
        await container.wait_until_idle()

        expected = prior.model_copy(update={"in_watchlist": True})
        assert seen == [DetailsPending(item_id=1, in_watchlist=True, expected=expected), expected]
        assert source.mutate_calls == [(1, FavoriteDelta.ADD)]
        container.close()

    @pytest.mark.asyncio
    async def test_failed_watchlist_change_rolls_back(self, source):
        source.fail("mutate")
        container = await loaded_container(source, item=ITEMS[3])
        prior = container.state
        seen = record(container)

        container.dispatch(RemoveFromWatchlist())
        await container.wait_until_idle()

        assert [snapshot.tag for snapshot in seen] == ["DetailsPending", "DetailsFailure", "DetailsLoaded"]
        assert seen[1] == DetailsFailure(message="Failed to update watchlist: mutate failed: backend unavailable")
        assert seen[-1] == prior
        container.close()

    @pytest.mark.asyncio
    async def test_refresh_failure_after_ack_keeps_the_change(self, source):
        container = await loaded_container(source)
        prior = container.state
        seen = record(container)
        source.fail("fetch_favorites")

        container.dispatch(AddToWatchlist())
        await container.wait_until_idle()

        expected = prior.model_copy(update={"in_watchlist": True})
        assert seen == [DetailsPending(item_id=1, in_watchlist=True, expected=expected), expected]
        assert 1 in source.favorites
        container.close()

    @pytest.mark.asyncio
    async def test_redundant_change_is_a_no_op(self, source):
        container = await loaded_container(source, item=ITEMS[3])
        seen = record(container)

        container.dispatch(AddToWatchlist())
        await container.wait_until_idle()

        assert seen == []
        assert source.mutate_calls == []
        container.close()


class TestSimilarContent:

    @pytest.mark.asyncio
    async def test_similar_content_refresh(self, source):
        container = await loaded_container(source)

        container.dispatch(LoadSimilarContent(category="Drama"))
        await container.wait_until_idle()

        assert container.state.similar == (ITEMS[4],)
        container.close()

    @pytest.mark.asyncio
    async def test_similar_content_failure_keeps_loaded_state(self, source):
        container = await loaded_container(source)
        prior = container.state
        seen = record(container)
        source.fail("fetch_by_filter")

        container.dispatch(LoadSimilarContent(category="Drama"))
        await container.wait_until_idle()

        assert seen == []
        assert container.state == prior
        container.close()
