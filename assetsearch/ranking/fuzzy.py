"""
Approximate string matching for search ranking.

Levenshtein similarity between the query and an asset's symbol, name and
tags. The resulting score only amplifies candidates that already matched an
index; it never surfaces new ones.
"""

from rapidfuzz.distance import Levenshtein

from ..contracts.models import Asset
from ..index.text import normalize


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    return Levenshtein.distance(a, b)


def levenshtein_similarity(a: str, b: str) -> float:
    """Edit distance scaled to [0, 1]; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def fuzzy_score(query: str, asset: Asset, threshold: float = 0.7) -> float:
    """Best similarity of ``query`` to the asset's symbol, name or tags.

    Args:
        query: Raw query text, normalized here
        asset: Candidate asset
        threshold: Minimum similarity that counts

    Returns:
        The best similarity if it reaches ``threshold``, else 0.0
    """
    normalized_query = normalize(query)
    targets = [asset.symbol, asset.name, *asset.tags]

    best = 0.0
    for target in targets:
        best = max(best, levenshtein_similarity(normalized_query, normalize(target)))

    return best if best >= threshold else 0.0
