"""
Configuration settings for the asset search engine.

This module defines the engine settings using Pydantic Settings, providing
environment-based configuration with validation and type safety. Every
variable is read with the ``ASSETSEARCH_`` prefix, e.g.
``ASSETSEARCH_FUZZY_THRESHOLD=0.8``; dictionaries are given as JSON.
"""

from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import AssetCategory, AssetType


def _default_category_boosts() -> Dict[str, float]:
    return {
        AssetCategory.MAGNIFICENT_7.value: 1.5,
        AssetCategory.LAYER_1.value: 1.3,
        AssetCategory.DEFI.value: 1.2,
        AssetCategory.MEME.value: 1.1,
        AssetCategory.AI.value: 1.4,
        AssetCategory.GAMING.value: 1.1,
        AssetCategory.TECH.value: 1.2,
        AssetCategory.FAANG.value: 1.4,
        AssetCategory.SP500.value: 1.1,
        AssetCategory.MAJOR_PAIRS.value: 1.3,
        AssetCategory.PRECIOUS_METALS.value: 1.1,
        AssetCategory.ENERGY.value: 1.1,
        AssetCategory.LAYER_2.value: 1.2,
    }


def _default_type_boosts() -> Dict[str, float]:
    return {
        AssetType.CRYPTO.value: 1.2,
        AssetType.STOCK.value: 1.1,
        AssetType.COMMODITY.value: 1.0,
        AssetType.FOREX.value: 1.0,
        AssetType.INDEX.value: 1.0,
    }


class Settings(BaseSettings):
    """Search engine settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="ASSETSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Asset Search Engine"
    app_version: str = "0.1.0"

    # Tokenization and result limits
    min_token_length: int = Field(default=2, ge=1, description="Minimum token length")
    max_results: int = Field(default=50, ge=1, description="Default result limit")
    default_min_score: float = Field(
        default=0.1, ge=0.0, description="Default minimum final score"
    )

    # Fuzzy matching
    fuzzy_threshold: float = Field(
        default=0.7, description="Minimum similarity that earns a fuzzy bonus"
    )
    fuzzy_bonus: float = Field(
        default=0.2, ge=0.0, description="Multiplier applied to the fuzzy score"
    )

    # Scoring weights
    field_weights: Dict[str, float] = Field(
        default_factory=lambda: {"symbol": 10.0, "name": 5.0, "category": 3.0, "tag": 2.0},
        description="Weight applied to each field's match score",
    )
    merge_damping: Dict[str, float] = Field(
        default_factory=lambda: {"name": 0.7, "category": 0.5, "tag": 0.3},
        description="Share of a secondary field match added to an existing result",
    )
    status_weights: Dict[str, float] = Field(
        default_factory=lambda: {"favorite": 2.0, "trending": 1.5, "popular": 1.3},
        description="Post-merge multipliers for asset status flags",
    )
    entry_weights: Dict[str, float] = Field(
        default_factory=lambda: {"favorite": 1.5, "trending": 1.3, "popular": 1.2},
        description="Base entry weight factors derived at index time",
    )
    category_boosts: Dict[str, float] = Field(default_factory=_default_category_boosts)
    type_boosts: Dict[str, float] = Field(default_factory=_default_type_boosts)

    # Result cache
    cache_enabled: bool = Field(default=False, description="Cache search results")
    cache_maxsize: int = Field(default=1000, ge=1, description="Cached searches")
    cache_ttl_seconds: int = Field(default=300, ge=0, description="Cache TTL")

    # Observability
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs to stdout")
    log_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    @field_validator("fuzzy_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Similarity is a ratio, so the threshold must be one too."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("fuzzy_threshold must be between 0 and 1")
        return v

    @field_validator("field_weights")
    @classmethod
    def validate_field_weights(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Every searchable field needs a weight."""
        missing = {"symbol", "name", "category", "tag"} - set(v)
        if missing:
            raise ValueError(f"field_weights missing: {', '.join(sorted(missing))}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# Default settings instance
settings = Settings()
