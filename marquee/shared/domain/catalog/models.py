"""Catalog entities."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from marquee.shared.core.derived import Facets


class ContentItem(BaseModel):
    """One title in the catalog. ``rating`` doubles as the sort score."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str = ""
    image_url: str = ""
    category: str
    is_featured: bool = False
    rating: float = 0.0


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class VideoQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    AUTO = "auto"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SubscriptionPlan(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    FAMILY = "family"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class FavoriteDelta(str, Enum):
    """Direction of a membership mutation."""
    ADD = "add"
    REMOVE = "remove"


class Ack(BaseModel):
    """Acknowledgement returned by a successful mutation."""

    model_config = ConfigDict(frozen=True)

    entity_id: int
    delta: FavoriteDelta


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    email: str
    avatar_url: str = ""
    notifications_enabled: bool = True
    dark_mode_enabled: bool = True
    language: str = "English"
    video_quality: VideoQuality = VideoQuality.AUTO
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE
    join_date: date
    watchlist: Tuple[int, ...] = Field(default_factory=tuple)
    watched_movies: int = 0
    watched_hours: int = 0


CONTENT_FACETS: Facets[ContentItem] = Facets(
    category=lambda item: item.category,
    text_fields=(lambda item: item.title, lambda item: item.description),
    title=lambda item: item.title,
    score=lambda item: item.rating,
    recency=lambda item: item.id,
    featured=lambda item: item.is_featured,
)
