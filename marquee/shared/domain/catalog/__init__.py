from .models import (
    CONTENT_FACETS,
    Ack,
    Category,
    ContentItem,
    FavoriteDelta,
    SubscriptionPlan,
    UserProfile,
    VideoQuality,
)
from .ports import CatalogSource

__all__ = [
    "CONTENT_FACETS",
    "Ack",
    "Category",
    "ContentItem",
    "FavoriteDelta",
    "SubscriptionPlan",
    "UserProfile",
    "VideoQuality",
    "CatalogSource",
]
