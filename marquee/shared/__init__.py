"""
Marquee Shared Kernel
=====================

State layer shared by every screen of the catalog app.

Architecture:
- core: state container engine, derived views, optimistic updates, debouncing, configuration
- domain: catalog entities and the data source contract
- infrastructure: data source adapters
"""

__version__ = "1.0.0"

__all__ = []
