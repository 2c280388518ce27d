"""
Prometheus metrics for asset search observability.

This module defines and manages the Prometheus metrics recorded by the
search service. Metrics live in the default registry and are shared by all
service instances in a process.
"""

from prometheus_client import Counter, Gauge, Histogram

# Search metrics
SEARCH_LATENCY = Histogram(
    "assetsearch_search_latency_ms",
    "Search latency in milliseconds",
    ["fuzzy"],
    buckets=(0.1, 0.5, 1, 2.5, 5, 10, 25, 50, 100, 250, 1000),
)

SEARCH_RESULTS = Histogram(
    "assetsearch_search_results",
    "Number of results returned per search",
    buckets=(0, 1, 5, 10, 25, 50, 100),
)

SHORT_QUERY = Counter(
    "assetsearch_short_query_total", "Queries rejected as shorter than a token"
)

# Index maintenance metrics
INDEX_OPERATIONS = Counter(
    "assetsearch_index_operations_total", "Index maintenance operations", ["operation"]
)

INDEX_ENTRIES = Gauge("assetsearch_index_entries", "Assets currently indexed")

# Cache performance metrics
CACHE_HIT = Counter("assetsearch_cache_hits_total", "Total cache hits", ["scope"])

CACHE_MISS = Counter("assetsearch_cache_misses_total", "Total cache misses", ["scope"])


def record_search(fuzzy: bool, latency_ms: float, result_count: int) -> None:
    """Record latency and result count for one search."""
    SEARCH_LATENCY.labels(fuzzy=str(fuzzy).lower()).observe(latency_ms)
    SEARCH_RESULTS.observe(result_count)


def record_short_query() -> None:
    SHORT_QUERY.inc()


def record_index_operation(operation: str, entry_count: int) -> None:
    """Record a maintenance operation and the resulting index size."""
    INDEX_OPERATIONS.labels(operation=operation).inc()
    INDEX_ENTRIES.set(entry_count)


def record_cache_hit(scope: str) -> None:
    """Record cache hit."""
    CACHE_HIT.labels(scope=scope).inc()


def record_cache_miss(scope: str) -> None:
    """Record cache miss."""
    CACHE_MISS.labels(scope=scope).inc()
