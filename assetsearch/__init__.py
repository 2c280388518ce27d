"""
Asset Search Engine

In-memory multi-field weighted search over a catalog of tradable assets.
"""

from .contracts.models import (
    Asset,
    AssetCategory,
    AssetType,
    IndexEntry,
    IndexStats,
    MatchType,
    SearchOptions,
    SearchResult,
)
from .contracts.settings import Settings
from .index.errors import (
    AssetIndexError,
    DuplicateAssetError,
    IndexInconsistencyError,
    InvalidAssetError,
)
from .index.store import IndexStore
from .retriever.search_service import SearchIndexService

__all__ = [
    "Asset",
    "AssetCategory",
    "AssetType",
    "IndexEntry",
    "IndexStats",
    "MatchType",
    "SearchOptions",
    "SearchResult",
    "Settings",
    "AssetIndexError",
    "DuplicateAssetError",
    "IndexInconsistencyError",
    "InvalidAssetError",
    "IndexStore",
    "SearchIndexService",
]
