"""
Shared Domain Module
====================

Catalog entities and the data source contract.
"""

from marquee.shared.domain.catalog import (
    Ack,
    CatalogSource,
    Category,
    ContentItem,
    FavoriteDelta,
    SubscriptionPlan,
    UserProfile,
    VideoQuality,
)

__all__ = [
    "Ack",
    "CatalogSource",
    "Category",
    "ContentItem",
    "FavoriteDelta",
    "SubscriptionPlan",
    "UserProfile",
    "VideoQuality",
]
