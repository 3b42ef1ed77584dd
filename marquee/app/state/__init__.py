"""Per-feature state containers for the catalog app.

Architecture:
- HomeContainer: featured titles and category rows
- CatalogContainer: category browsing with filter, in-list search and sort
- SearchContainer: debounced incremental search
- DetailsContainer: item detail, related items, watchlist
- FavoritesContainer: optimistic favorites toggling
- ProfileContainer: account settings
- UpcomingContainer: upcoming releases
- Store: scoped, reference-counted access to the containers above
"""

from .catalog import CatalogContainer
from .details import DetailsContainer
from .favorites import FavoritesContainer
from .home import HomeContainer
from .profile import ProfileContainer
from .search import SearchContainer
from .store import Feature, Store
from .upcoming import UpcomingContainer

__all__ = [
    "CatalogContainer",
    "DetailsContainer",
    "FavoritesContainer",
    "HomeContainer",
    "ProfileContainer",
    "SearchContainer",
    "UpcomingContainer",
    "Feature",
    "Store",
]
