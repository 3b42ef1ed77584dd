"""
FavoritesContainer Tests

Optimistic toggling with rollback to the exact prior snapshot.
"""

import pytest

from marquee.app.state.favorites import (
    FavoritesContainer,
    FavoritesFailure,
    FavoritesLoaded,
    FavoritesLoading,
    FavoritesPending,
    LoadFavorites,
    ToggleFavorite,
)
from marquee.shared.core.errors import MutationError
from marquee.shared.domain.catalog import FavoriteDelta
from tests.conftest import RecordingSource, record


class RejectingSource(RecordingSource):
    """Rejects mutations of the given ids and accepts all others."""

    def __init__(self, *args, rejected=(), **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.rejected = set(rejected)

    async def mutate(self, item_id, delta):
        if item_id in self.rejected:
            self.mutate_calls.append((item_id, delta))
            raise MutationError(f"item {item_id} is locked", entity_id=item_id)
        return await super().mutate(item_id, delta)


async def loaded_container(source):
    container = FavoritesContainer(source)
    container.dispatch(LoadFavorites())
    await container.wait_until_idle()
    assert isinstance(container.state, FavoritesLoaded)
    return container


class TestFavoritesLoading:

    @pytest.mark.asyncio
    async def test_load_lists_favorited_items(self, catalog_source):
        container = FavoritesContainer(catalog_source)
        seen = record(container)

        container.dispatch(LoadFavorites())
        await container.wait_until_idle()

        assert seen[0] == FavoritesLoading()
        assert seen[1].favorite_ids == frozenset({1, 4, 7, 11, 15})
        assert [item.id for item in seen[1].items] == [1, 4, 7, 11, 15]
        container.close()

    @pytest.mark.asyncio
    async def test_load_failure(self, catalog_source):
        catalog_source.fail("fetch_favorites")
        container = FavoritesContainer(catalog_source)

        container.dispatch(LoadFavorites())
        await container.wait_until_idle()

        assert container.state == FavoritesFailure(
            message="Failed to load favorites: fetch_favorites failed: backend unavailable"
        )
        container.close()


class TestToggleFavorite:

    @pytest.mark.asyncio
    async def test_failed_toggle_rolls_back_to_original(self, scenario_source):
        scenario_source.fail("mutate")
        container = await loaded_container(scenario_source)
        original = container.state
        seen = record(container)

        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert seen == [
            FavoritesPending(item_id=1, favorited=True, favorite_ids=frozenset({1})),
            FavoritesFailure(message="Failed to update favorites: mutate failed: backend unavailable"),
            original,
        ]
        assert not container.state.is_favorite(1)
        assert scenario_source.favorites == frozenset()
        container.close()

    @pytest.mark.asyncio
    async def test_successful_toggle_confirms_from_source(self, scenario_source, scenario_items):
        container = await loaded_container(scenario_source)
        seen = record(container)

        container.dispatch(ToggleFavorite(item_id=2))
        await container.wait_until_idle()

        assert seen == [
            FavoritesPending(item_id=2, favorited=True, favorite_ids=frozenset({2})),
            FavoritesLoaded(items=(scenario_items[1],), favorite_ids=frozenset({2})),
        ]
        assert scenario_source.mutate_calls == [(2, FavoriteDelta.ADD)]
        container.close()

    @pytest.mark.asyncio
    async def test_toggle_removes_existing_favorite(self, catalog_source):
        container = await loaded_container(catalog_source)

        container.dispatch(ToggleFavorite(item_id=4))
        await container.wait_until_idle()

        assert not container.state.is_favorite(4)
        assert catalog_source.mutate_calls == [(4, FavoriteDelta.REMOVE)]
        container.close()

    @pytest.mark.asyncio
    async def test_unknown_item_never_reaches_the_source(self, scenario_source):
        container = await loaded_container(scenario_source)
        prior = container.state
        seen = record(container)

        container.dispatch(ToggleFavorite(item_id=99))
        await container.wait_until_idle()

        assert seen == [FavoritesFailure(message="Unknown item 99"), prior]
        assert scenario_source.mutate_calls == []
        container.close()

    @pytest.mark.asyncio
    async def test_same_item_toggles_are_serialized(self, scenario_source):
        container = await loaded_container(scenario_source)
        seen = record(container)

        container.dispatch(ToggleFavorite(item_id=1))
        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert [snapshot.tag for snapshot in seen] == [
            "FavoritesPending", "FavoritesLoaded", "FavoritesPending", "FavoritesLoaded",
        ]
        assert seen[0].favorited is True
        assert seen[2].favorited is False
        assert scenario_source.mutate_calls == [(1, FavoriteDelta.ADD), (1, FavoriteDelta.REMOVE)]
        assert container.state.favorite_ids == frozenset()
        container.close()

    @pytest.mark.asyncio
    async def test_toggle_before_load_is_ignored(self, scenario_source):
        container = FavoritesContainer(scenario_source)

        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert scenario_source.mutate_calls == []
        container.close()

    @pytest.mark.asyncio
    async def test_refresh_failure_after_ack_keeps_the_change(self, scenario_source, scenario_items):
        container = await loaded_container(scenario_source)
        seen = record(container)
        scenario_source.fail("fetch_favorites")

        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert seen == [
            FavoritesPending(item_id=1, favorited=True, favorite_ids=frozenset({1})),
            FavoritesLoaded(items=(scenario_items[0],), favorite_ids=frozenset({1})),
        ]
        assert container.state.favorite_ids == scenario_source.favorites == frozenset({1})

        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert scenario_source.mutate_calls == [(1, FavoriteDelta.ADD), (1, FavoriteDelta.REMOVE)]
        assert container.state.favorite_ids == scenario_source.favorites == frozenset()
        container.close()

    @pytest.mark.asyncio
    async def test_rollback_keeps_a_newer_confirmed_toggle(self, scenario_items):
        source = RejectingSource(items=scenario_items, favorites=(), rejected={1})
        container = await loaded_container(source)
        seen = record(container)

        container.dispatch(ToggleFavorite(item_id=2))
        container.dispatch(ToggleFavorite(item_id=1))
        await container.wait_until_idle()

        assert [snapshot.tag for snapshot in seen] == [
            "FavoritesPending", "FavoritesLoaded", "FavoritesPending", "FavoritesFailure", "FavoritesLoaded",
        ]
        confirmed = seen[1]
        assert confirmed.favorite_ids == frozenset({2})
        assert seen[2].favorite_ids == frozenset({1, 2})
        assert seen[3] == FavoritesFailure(message="Failed to update favorites: item 1 is locked")
        assert seen[4] == confirmed
        assert container.state.favorite_ids == source.favorites == frozenset({2})
        container.close()
