"""
Shared Infrastructure Module
=============================

Data source adapters behind the ``CatalogSource`` contract.
"""

from marquee.shared.infrastructure.catalog import InMemoryCatalogSource

__all__ = ["InMemoryCatalogSource"]
