"""Derived-state engine: filter, search and sort over a base collection.

The visible list of a feature is never stored on its own. It is recomputed from
the base collection cache and the ``ViewQuery`` triple every time one of them
changes, so the same triple over the same cache always gives the same result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class SortKey(str, Enum):
    """Supported orderings for a derived view."""
    ALPHABETICAL = "alphabetical"  # title, ascending
    SCORE = "score"                # rating, descending, stable
    RECENCY = "recency"            # id, descending
    PROMOTED = "promoted"          # featured first, then score descending


class ViewQuery(BaseModel):
    """The (filter, query, sort) triple a derived view is computed from."""

    model_config = ConfigDict(frozen=True)

    filter: Optional[str] = None
    query: str = ""
    sort: Optional[SortKey] = None

    def with_filter(self, value: Optional[str]) -> "ViewQuery":
        return self.model_copy(update={"filter": value})

    def with_query(self, value: str) -> "ViewQuery":
        return self.model_copy(update={"query": value})

    def with_sort(self, value: Optional[SortKey]) -> "ViewQuery":
        return self.model_copy(update={"sort": value})

    @property
    def is_identity(self) -> bool:
        return self.filter is None and not self.query and self.sort is None


@dataclass(frozen=True)
class Facets(Generic[T]):
    """How the engine reads the fields it filters, searches and sorts on."""

    category: Callable[[T], str]
    text_fields: Tuple[Callable[[T], str], ...]
    title: Callable[[T], str]
    score: Callable[[T], float]
    recency: Callable[[T], int]
    featured: Callable[[T], bool]


def derive_view(items: Iterable[T], view: ViewQuery, facets: Facets[T]) -> Tuple[T, ...]:
    """Apply filter, then query, then sort. Pure; never mutates ``items``."""
    visible = tuple(items)

    if view.filter is not None:
        visible = tuple(item for item in visible if facets.category(item) == view.filter)

    if view.query:
        needle = view.query.lower()
        visible = tuple(
            item for item in visible
            if any(needle in field(item).lower() for field in facets.text_fields)
        )

    if view.sort is not None:
        visible = sort_items(visible, view.sort, facets)

    return visible


def sort_items(items: Sequence[T], key: SortKey, facets: Facets[T]) -> Tuple[T, ...]:
    # sorted() is stable, also with reverse=True, so ties keep cache order.
    if key is SortKey.ALPHABETICAL:
        return tuple(sorted(items, key=facets.title))
    if key is SortKey.SCORE:
        return tuple(sorted(items, key=facets.score, reverse=True))
    if key is SortKey.RECENCY:
        return tuple(sorted(items, key=facets.recency, reverse=True))
    if key is SortKey.PROMOTED:
        return tuple(
            sorted(items, key=lambda item: (not facets.featured(item), -facets.score(item)))
        )
    raise ValueError(f"Unsupported sort key: {key!r}")


class CollectionCache(Generic[T]):
    """Last successfully fetched full entity set, keyed by id in fetch order.

    Only load, refresh and mutation handlers write to it.
    """

    def __init__(self, key: Callable[[T], Hashable]) -> None:
        self._key = key
        self._entries: Dict[Hashable, T] = {}

    def replace(self, items: Iterable[T]) -> None:
        self._entries = {self._key(item): item for item in items}

    def items(self) -> Tuple[T, ...]:
        return tuple(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[T]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._entries)
