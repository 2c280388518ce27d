"""
Weighted multi-field scoring.

This module scores a single indexed field value against a query, merges the
per-field hits for an asset into one result, and applies the post-merge
metadata boosts. All functions are pure; configuration is passed in.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from ..contracts.models import Asset, MatchType, SearchResult
from ..contracts.settings import Settings
from ..index.text import normalize, tokenize

# Probe order; the first field to hit an asset seeds its result
FIELD_PRIORITY = (MatchType.SYMBOL, MatchType.NAME, MatchType.CATEGORY, MatchType.TAG)

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.8
SUBSTRING_SCORE = 0.6
TOKEN_EQUAL_SCORE = 0.3
TOKEN_PREFIX_SCORE = 0.2


def match_score(
    value: str, query: str, query_tokens: List[str], min_token_length: int = 2
) -> float:
    """Score one field value against a normalized query.

    Whole-value matching (exact, prefix, substring) contributes at most once;
    every (query token, value token) pair then adds an equality or prefix
    bonus. The total is capped at 1.0.
    """
    text = normalize(value)
    text_tokens = tokenize(text, min_token_length)

    score = 0.0
    if text == query:
        score += EXACT_SCORE
    elif text.startswith(query):
        score += PREFIX_SCORE
    elif query in text:
        score += SUBSTRING_SCORE

    for token in query_tokens:
        for text_token in text_tokens:
            if text_token == token:
                score += TOKEN_EQUAL_SCORE
            elif text_token.startswith(token):
                score += TOKEN_PREFIX_SCORE

    return min(score, 1.0)


def merge_matches(
    matches: Iterable[SearchResult], damping: Mapping[str, float]
) -> Dict[str, SearchResult]:
    """Fold field hits into one result per asset.

    ``matches`` must arrive in field priority order. The first hit for an
    asset is kept as-is; later hits add their score scaled by the damping
    factor of their own field.
    """
    merged: Dict[str, SearchResult] = {}
    for match in matches:
        existing = merged.get(match.asset.id)
        if existing is None:
            merged[match.asset.id] = match
        else:
            existing.score += match.score * damping.get(match.match_type.value, 1.0)
    return merged


def lookup_boost(
    key: str, overrides: Mapping[str, float], defaults: Mapping[str, float]
) -> float:
    if key in overrides:
        return overrides[key]
    return defaults.get(key, 1.0)


def apply_boosts(
    score: float,
    asset: Asset,
    config: Settings,
    category_boost: Optional[Mapping[str, float]] = None,
    type_boost: Optional[Mapping[str, float]] = None,
    fuzzy: float = 0.0,
) -> float:
    """Apply category, type, status and fuzzy multipliers in that order."""
    score *= lookup_boost(asset.category, category_boost or {}, config.category_boosts)
    score *= lookup_boost(asset.type, type_boost or {}, config.type_boosts)

    weights = config.status_weights
    if asset.is_favorite:
        score *= weights.get("favorite", 1.0)
    if asset.trending:
        score *= weights.get("trending", 1.0)
    if asset.is_popular:
        score *= weights.get("popular", 1.0)

    if fuzzy > 0:
        score *= 1 + fuzzy * config.fuzzy_bonus
    return score
