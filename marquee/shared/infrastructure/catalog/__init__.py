from .memory_source import InMemoryCatalogSource
from .seed import CATEGORIES, CONTENT, DEFAULT_PROFILE

__all__ = ["InMemoryCatalogSource", "CATEGORIES", "CONTENT", "DEFAULT_PROFILE"]
