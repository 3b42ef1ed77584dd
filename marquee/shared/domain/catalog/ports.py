"""Data source contract consumed by the feature containers.

Every call is asynchronous and may fail on its own: reads raise
``FetchError``, writes raise ``MutationError``.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Optional, Protocol, Sequence, runtime_checkable

from .models import Ack, Category, ContentItem, FavoriteDelta, UserProfile


@runtime_checkable
class CatalogSource(Protocol):
    async def fetch_all(self) -> Sequence[ContentItem]: ...

    async def fetch_by_filter(self, key: str) -> Sequence[ContentItem]: ...

    async def fetch_featured(self) -> Sequence[ContentItem]: ...

    async def fetch_upcoming(self) -> Sequence[ContentItem]: ...

    async def fetch_categories(self) -> Sequence[Category]: ...

    async def fetch_by_id(self, item_id: int) -> Optional[ContentItem]: ...

    async def search(self, query: str) -> Sequence[ContentItem]: ...

    async def mutate(self, item_id: int, delta: FavoriteDelta) -> Ack: ...

    async def fetch_favorites(self) -> FrozenSet[int]: ...

    async def fetch_profile(self) -> UserProfile: ...

    async def update_profile(self, **changes: Any) -> UserProfile: ...

    async def sign_out(self) -> None: ...

    async def delete_account(self) -> None: ...
