"""
Core data contracts for the asset search engine.

This module defines the Pydantic models shared by the index store, the
scorer and the search service: the asset records consumed from the catalog,
the derived index entries, and the search options and results returned to
callers.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssetType(str, Enum):
    """Asset classes that can carry a type boost."""

    CRYPTO = "crypto"
    STOCK = "stock"
    COMMODITY = "commodity"
    FOREX = "forex"
    INDEX = "index"


class AssetCategory(str, Enum):
    """Known asset sub-categories."""

    # Crypto
    LAYER_1 = "layer1"
    LAYER_2 = "layer2"
    DEFI = "defi"
    MEME = "meme"
    AI = "ai"
    GAMING = "gaming"

    # Stocks
    TECH = "tech"
    FAANG = "faang"
    MAGNIFICENT_7 = "magnificent7"
    SP500 = "sp500"

    # Other
    MAJOR_PAIRS = "major_pairs"
    PRECIOUS_METALS = "precious_metals"
    ENERGY = "energy"


class MatchType(str, Enum):
    """Field that seeded a search result."""

    SYMBOL = "symbol"
    NAME = "name"
    CATEGORY = "category"
    TAG = "tag"


class Asset(BaseModel):
    """A tradable instrument as provided by the asset catalog.

    Catalog payloads use camelCase keys (``isFavorite``, ``isActive``); both
    those and the snake_case field names are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique stable identifier")
    symbol: str = Field(..., min_length=1, description="Trading symbol, e.g. 'BTC/USDT'")
    name: str = Field(default="", description="Display name")
    type: str = Field(default=AssetType.CRYPTO.value, description="Asset type")
    category: str = Field(default="", description="Asset category")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    trending: bool = Field(default=False)
    is_popular: bool = Field(default=False, alias="isPopular")
    is_active: bool = Field(default=True, alias="isActive")
    description: Optional[str] = Field(default=None)
    market_data: Dict[str, Any] = Field(
        default_factory=dict,
        alias="marketData",
        description="Opaque market data, never read by the engine",
    )


class IndexEntry(BaseModel):
    """Derived, searchable view of one indexed asset."""

    id: str
    asset: Asset
    searchable_text: str
    tokens: List[str] = Field(default_factory=list)
    weight: float = 1.0

    # Keys this entry was filed under in each inverted index
    symbol_key: str
    name_key: str
    category_key: str
    tag_keys: List[str] = Field(default_factory=list)


class SearchOptions(BaseModel):
    """Per-call search options.

    Unset values fall back to the configured defaults.
    """

    model_config = ConfigDict(extra="forbid")

    limit: Optional[int] = Field(default=None, ge=0)
    min_score: Optional[float] = Field(default=None, ge=0.0)
    include_inactive: bool = False
    fuzzy_match: bool = True
    category_boost: Dict[str, float] = Field(default_factory=dict)
    type_boost: Dict[str, float] = Field(default_factory=dict)


class SearchResult(BaseModel):
    """A ranked search hit."""

    asset: Asset
    score: float
    match_type: MatchType
    match_text: str


class IndexStats(BaseModel):
    """Counts describing the current index contents."""

    total_entries: int = 0
    symbol_entries: int = 0
    name_entries: int = 0
    category_entries: int = 0
    tag_entries: int = 0
    average_tokens_per_entry: float = 0.0
