"""In-memory catalog data source with simulated latency and failure injection."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, Set, Tuple

from marquee.shared.core.errors import FetchError, MutationError, ValidationError
from marquee.shared.domain.catalog.models import (
    Ack,
    Category,
    ContentItem,
    FavoriteDelta,
    UserProfile,
)

from .seed import CATEGORIES, CONTENT, DEFAULT_PROFILE

logger = logging.getLogger(__name__)

READ_OPERATIONS = frozenset({
    "fetch_all",
    "fetch_by_filter",
    "fetch_featured",
    "fetch_upcoming",
    "fetch_categories",
    "fetch_by_id",
    "search",
    "fetch_favorites",
    "fetch_profile",
})

WRITE_OPERATIONS = frozenset({
    "mutate",
    "update_profile",
    "sign_out",
    "delete_account",
})

PROFILE_FIELDS = frozenset(UserProfile.model_fields) - {"join_date"}


class InMemoryCatalogSource:
    """Serves a static catalog the way a remote backend would.

    Every call sleeps for ``latency`` seconds first. Operations named in
    ``fail_on`` (or added later with ``fail()``) raise ``FetchError`` for reads
    and ``MutationError`` for writes, which is how screens and tests exercise
    the error paths.
    """

    def __init__(
        self,
        items: Optional[Iterable[ContentItem]] = None,
        categories: Optional[Iterable[Category]] = None,
        profile: Optional[UserProfile] = None,
        favorites: Optional[Iterable[int]] = None,
        latency: float = 0.0,
        fail_on: Iterable[str] = (),
    ) -> None:
        self._items: Tuple[ContentItem, ...] = tuple(CONTENT if items is None else items)
        if categories is None:
            categories = (
                CATEGORIES if items is None else _categories_of(self._items)
            )
        self._categories: Tuple[Category, ...] = tuple(categories)
        self._profile: Optional[UserProfile] = DEFAULT_PROFILE if profile is None else profile
        if favorites is None:
            favorites = self._profile.watchlist if self._profile else ()
        self._favorites: Set[int] = set(favorites)
        self.latency = latency
        self._failing: Set[str] = set()
        for operation in fail_on:
            self.fail(operation)

    # --- Failure injection ---

    def fail(self, operation: str) -> None:
        if operation not in READ_OPERATIONS | WRITE_OPERATIONS:
            raise ValueError(f"Unknown data source operation: {operation}")
        self._failing.add(operation)

    def recover(self, operation: Optional[str] = None) -> None:
        if operation is None:
            self._failing.clear()
        else:
            self._failing.discard(operation)

    async def _call(self, operation: str) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        if operation in self._failing:
            logger.debug(f"Injected failure for '{operation}'")
            if operation in WRITE_OPERATIONS:
                raise MutationError(f"{operation} failed: backend unavailable")
            raise FetchError(f"{operation} failed: backend unavailable")

    # --- Reads ---

    async def fetch_all(self) -> Sequence[ContentItem]:
        await self._call("fetch_all")
        return list(self._items)

    async def fetch_by_filter(self, key: str) -> Sequence[ContentItem]:
        await self._call("fetch_by_filter")
        return [item for item in self._items if item.category == key]

    async def fetch_featured(self) -> Sequence[ContentItem]:
        await self._call("fetch_featured")
        return [item for item in self._items if item.is_featured]

    async def fetch_upcoming(self) -> Sequence[ContentItem]:
        await self._call("fetch_upcoming")
        return [item for item in self._items if not item.is_featured]

    async def fetch_categories(self) -> Sequence[Category]:
        await self._call("fetch_categories")
        return list(self._categories)

    async def fetch_by_id(self, item_id: int) -> Optional[ContentItem]:
        await self._call("fetch_by_id")
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    async def search(self, query: str) -> Sequence[ContentItem]:
        await self._call("search")
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            item for item in self._items
            if needle in item.title.lower() or needle in item.description.lower()
        ]

    async def fetch_favorites(self) -> FrozenSet[int]:
        await self._call("fetch_favorites")
        return frozenset(self._favorites)

    async def fetch_profile(self) -> UserProfile:
        await self._call("fetch_profile")
        if self._profile is None:
            raise FetchError("No signed-in user")
        return self._profile

    # --- Writes ---

    async def mutate(self, item_id: int, delta: FavoriteDelta) -> Ack:
        await self._call("mutate")
        if not any(item.id == item_id for item in self._items):
            raise MutationError(f"Unknown item {item_id}", entity_id=item_id)
        if delta is FavoriteDelta.ADD:
            self._favorites.add(item_id)
        else:
            self._favorites.discard(item_id)
        return Ack(entity_id=item_id, delta=delta)

    async def update_profile(self, **changes: Any) -> UserProfile:
        await self._call("update_profile")
        if self._profile is None:
            raise MutationError("No signed-in user")
        unknown = set(changes) - PROFILE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")
        self._profile = self._profile.model_copy(update=changes)
        return self._profile

    async def sign_out(self) -> None:
        await self._call("sign_out")

    async def delete_account(self) -> None:
        await self._call("delete_account")
        self._profile = None
        self._favorites.clear()

    # --- Introspection ---

    @property
    def favorites(self) -> FrozenSet[int]:
        return frozenset(self._favorites)

    def describe(self) -> Dict[str, Any]:
        return {
            "items": len(self._items),
            "categories": len(self._categories),
            "favorites": sorted(self._favorites),
            "failing": sorted(self._failing),
        }


def _categories_of(items: Sequence[ContentItem]) -> Tuple[Category, ...]:
    names = list(dict.fromkeys(item.category for item in items))
    return tuple(Category(id=str(index), name=name) for index, name in enumerate(names, start=1))
