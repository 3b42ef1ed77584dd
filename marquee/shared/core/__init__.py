"""
Shared Core Module
==================

State container engine, derived views, optimistic updates, debouncing,
error taxonomy and configuration.
"""

# Engine
from .container import HandlerRegistry, StateContainer
from .intents import Intent, Snapshot
from .stream import SnapshotStream, Subscription

# Building blocks
from .debounce import Debouncer, RequestTokens
from .derived import CollectionCache, Facets, SortKey, ViewQuery, derive_view
from .optimistic import OptimisticUpdate, PendingOperation

# Errors
from .errors import (
    FetchError,
    MarqueeError,
    MutationError,
    UnexpectedError,
    ValidationError,
    describe_error,
)

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)

__all__ = [
    # Engine
    "HandlerRegistry",
    "StateContainer",
    "Intent",
    "Snapshot",
    "SnapshotStream",
    "Subscription",
    # Building blocks
    "Debouncer",
    "RequestTokens",
    "CollectionCache",
    "Facets",
    "SortKey",
    "ViewQuery",
    "derive_view",
    "OptimisticUpdate",
    "PendingOperation",
    # Errors
    "FetchError",
    "MarqueeError",
    "MutationError",
    "UnexpectedError",
    "ValidationError",
    "describe_error",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
]
