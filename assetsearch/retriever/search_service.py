"""
Asset search service.

This module implements the query engine over an ``IndexStore``: it probes the
symbol, name, category and tag indices, merges the per-field hits into one
weighted score per asset, applies metadata and fuzzy boosts, and serves the
autocomplete and popular-search helpers. Maintenance calls are delegated to
the store so that every change is logged, measured and invalidates cached
results.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from ..common.ttl_lru import TTLRUCache
from ..contracts.models import IndexEntry, IndexStats, MatchType, SearchOptions, SearchResult
from ..contracts.settings import Settings, settings as default_settings
from ..index.store import AssetLike, IndexStore
from ..index.text import normalize, tokenize
from ..obs import metrics
from ..ranking.fuzzy import fuzzy_score
from ..ranking.scorer import FIELD_PRIORITY, apply_boosts, match_score, merge_matches

logger = logging.getLogger(__name__)

POPULAR_SEARCH_LIMIT = 10
SUGGESTION_FIELDS = (MatchType.SYMBOL, MatchType.NAME, MatchType.CATEGORY)


class SearchIndexService:
    """Multi-field weighted search over an in-memory asset index.

    Instances are independent: each owns its store and cache. Writers must be
    serialized by the caller; reads may run concurrently with each other.
    """

    def __init__(self, config: Optional[Settings] = None, store: Optional[IndexStore] = None):
        self.config = config or default_settings
        self.store = store if store is not None else IndexStore(self.config)
        self.cache: Optional[TTLRUCache] = None
        if self.config.cache_enabled:
            self.cache = TTLRUCache(
                maxsize=self.config.cache_maxsize,
                ttl_seconds=self.config.cache_ttl_seconds,
            )
        logger.info(
            f"Initialized search index service (cache={'on' if self.cache else 'off'})"
        )

    # Maintenance

    def build_index(self, assets: Iterable[AssetLike]) -> None:
        """Clear the index and add every asset in order."""
        self.store.build_index(assets)
        self._after_write("build")

    def add_to_index(self, asset: AssetLike) -> IndexEntry:
        entry = self.store.add_to_index(asset)
        self._after_write("add")
        return entry

    def remove_from_index(self, asset_id: str) -> bool:
        """Remove an asset; returns False if it was not indexed."""
        removed = self.store.remove_from_index(asset_id)
        if removed:
            self._after_write("remove")
        return removed

    def update_index(self, asset: AssetLike) -> IndexEntry:
        entry = self.store.update_index(asset)
        self._after_write("update")
        return entry

    def clear_index(self) -> None:
        self.store.clear_index()
        self._after_write("clear")

    def destroy(self) -> None:
        """Release all indexed state."""
        self.clear_index()
        logger.info("Search index service destroyed")

    def _after_write(self, operation: str) -> None:
        if self.cache is not None:
            self.cache.clear()
        if self.config.metrics_enabled:
            metrics.record_index_operation(operation, len(self.store))

    # Querying

    def search(
        self, query: str, options: Optional[SearchOptions] = None, **overrides: Any
    ) -> List[SearchResult]:
        """Rank indexed assets against a free-text query.

        Args:
            query: Free-text query
            options: Search options; unset limits fall back to settings
            **overrides: Individual ``SearchOptions`` fields, applied on top

        Returns:
            Results sorted by descending score, ties by ascending asset id
        """
        query = query or ""
        normalized_query = normalize(query)
        # Punctuation-only queries normalize away and would prefix-match every key
        if len(query) < self.config.min_token_length or not normalized_query:
            if self.config.metrics_enabled:
                metrics.record_short_query()
            return []

        opts = options or SearchOptions()
        if overrides:
            opts = SearchOptions.model_validate({**opts.model_dump(), **overrides})
        limit = opts.limit if opts.limit is not None else self.config.max_results
        min_score = (
            opts.min_score if opts.min_score is not None else self.config.default_min_score
        )

        cache_key = None
        if self.cache is not None:
            cache_key = (
                self.store.generation,
                query,
                limit,
                min_score,
                opts.include_inactive,
                opts.fuzzy_match,
                tuple(sorted(opts.category_boost.items())),
                tuple(sorted(opts.type_boost.items())),
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                if self.config.metrics_enabled:
                    metrics.record_cache_hit("search")
                return [result.model_copy() for result in cached]
            if self.config.metrics_enabled:
                metrics.record_cache_miss("search")

        start = time.perf_counter()
        query_tokens = tokenize(normalized_query, self.config.min_token_length)

        matches: List[SearchResult] = []
        for field in FIELD_PRIORITY:
            matches.extend(self._probe(field, normalized_query, query_tokens))
        merged = merge_matches(matches, self.config.merge_damping)

        results: List[SearchResult] = []
        for result in merged.values():
            asset = result.asset
            if not opts.include_inactive and not asset.is_active:
                continue

            fuzzy = 0.0
            if opts.fuzzy_match:
                fuzzy = fuzzy_score(query, asset, self.config.fuzzy_threshold)

            result.score = apply_boosts(
                result.score,
                asset,
                self.config,
                category_boost=opts.category_boost,
                type_boost=opts.type_boost,
                fuzzy=fuzzy,
            )
            if result.score >= min_score:
                results.append(result)

        results.sort(key=lambda r: (-r.score, r.asset.id))
        results = results[:limit]

        latency_ms = (time.perf_counter() - start) * 1000
        if self.config.metrics_enabled:
            metrics.record_search(opts.fuzzy_match, latency_ms, len(results))
        logger.debug(
            f"Search '{query}' returned {len(results)} of {len(merged)} candidates "
            f"in {latency_ms:.2f}ms"
        )

        if self.cache is not None:
            self.cache.set(cache_key, [result.model_copy() for result in results])
        return results

    def _probe(
        self, field: MatchType, query: str, query_tokens: List[str]
    ) -> List[SearchResult]:
        """Score every key of one inverted index against the query."""
        field_weight = self.config.field_weights[field.value]
        results = []
        for key, asset_ids in self.store.field_index(field.value).items():
            score = match_score(key, query, query_tokens, self.config.min_token_length)
            if score <= 0:
                continue
            for asset_id in asset_ids:
                entry = self.store.resolve(asset_id)
                results.append(
                    SearchResult(
                        asset=entry.asset,
                        score=score * field_weight * entry.weight,
                        match_type=field,
                        match_text=key,
                    )
                )
        return results

    # Auxiliary queries

    def get_suggestions(
        self, query: str, limit: int = 10, include_inactive: bool = False
    ) -> List[str]:
        """Autocomplete from symbol, name and category values.

        Keys are matched by normalized prefix; the display text of the first
        qualifying asset filed under each key is returned.
        """
        normalized_query = normalize(query)
        if not normalized_query or limit <= 0:
            return []

        suggestions: Dict[str, None] = {}
        for field in SUGGESTION_FIELDS:
            for key, asset_ids in self.store.field_index(field.value).items():
                if not key.startswith(normalized_query):
                    continue
                display = self._display_value(field, asset_ids, include_inactive)
                if display is not None:
                    suggestions.setdefault(display, None)
                    if len(suggestions) >= limit:
                        return list(suggestions)
        return list(suggestions)

    def _display_value(
        self, field: MatchType, asset_ids: List[str], include_inactive: bool
    ) -> Optional[str]:
        for asset_id in asset_ids:
            asset = self.store.resolve(asset_id).asset
            if include_inactive or asset.is_active:
                return getattr(asset, field.value)
        return None

    def get_popular_searches(self, include_inactive: bool = False) -> List[str]:
        """Symbols of popular or trending assets, doubly flagged ones first."""
        assets = [
            entry.asset
            for entry in self.store.entries()
            if (entry.asset.is_popular or entry.asset.trending)
            and (include_inactive or entry.asset.is_active)
        ]
        assets.sort(key=lambda a: int(a.is_popular) + int(a.trending), reverse=True)
        return [asset.symbol for asset in assets[:POPULAR_SEARCH_LIMIT]]

    def get_index_stats(self) -> IndexStats:
        return self.store.stats()
