"""Marquee package."""

from .shared.core.container import StateContainer
from .app.state.store import Feature, Store

__all__ = ["Feature", "StateContainer", "Store"]
