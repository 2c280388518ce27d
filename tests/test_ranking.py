"""
Tests for field scoring, result merging, boosts and fuzzy matching.
"""

import pytest

from assetsearch.contracts.models import Asset, MatchType, SearchResult
from assetsearch.contracts.settings import Settings
from assetsearch.ranking.fuzzy import (
    fuzzy_score,
    levenshtein_distance,
    levenshtein_similarity,
)
from assetsearch.ranking.scorer import apply_boosts, match_score, merge_matches


class TestMatchScore:
    def test_exact_match_caps_at_one(self):
        assert match_score("bitcoin", "bitcoin", ["bitcoin"]) == 1.0

    def test_prefix_match(self):
        # prefix 0.8 plus an equal token 0.3, capped
        assert match_score("bit coin", "bit c", ["bit"]) == pytest.approx(1.0)
        assert match_score("bitcoin", "bitc", []) == pytest.approx(0.8)

    def test_substring_match(self):
        assert match_score("wrapped bitcoin", "ped bit", []) == pytest.approx(0.6)

    def test_token_overlap_without_whole_match(self):
        # "usdt" equals a token, "btc" prefixes nothing in "eth usdt"
        assert match_score("eth usdt", "btc usdt", ["btc", "usdt"]) == pytest.approx(0.3)

    def test_token_prefix(self):
        assert match_score("smart contracts", "zz contr", ["zz", "contr"]) == pytest.approx(
            0.2
        )

    def test_no_match(self):
        assert match_score("ethereum", "solana", ["solana"]) == 0.0


def _result(asset, field, score):
    return SearchResult(asset=asset, score=score, match_type=field, match_text="x")


class TestMergeMatches:
    def test_first_field_seeds_and_later_fields_are_damped(self, btc):
        damping = {"name": 0.7, "category": 0.5, "tag": 0.3}
        merged = merge_matches(
            [
                _result(btc, MatchType.SYMBOL, 10.0),
                _result(btc, MatchType.NAME, 5.0),
                _result(btc, MatchType.CATEGORY, 3.0),
                _result(btc, MatchType.TAG, 2.0),
            ],
            damping,
        )
        assert merged["btc-usdt"].match_type == MatchType.SYMBOL
        assert merged["btc-usdt"].score == pytest.approx(10 + 3.5 + 1.5 + 0.6)

    def test_lower_priority_field_can_seed(self, btc, eth):
        merged = merge_matches(
            [_result(eth, MatchType.SYMBOL, 10.0), _result(btc, MatchType.TAG, 2.0)],
            {"tag": 0.3},
        )
        assert merged["btc-usdt"].match_type == MatchType.TAG
        assert merged["btc-usdt"].score == 2.0


class TestApplyBoosts:
    def test_boost_order_and_values(self):
        config = Settings()
        asset = Asset(
            id="a",
            symbol="A/B",
            type="stock",
            category="magnificent7",
            is_favorite=True,
            trending=True,
            is_popular=True,
        )
        score = apply_boosts(1.0, asset, config, fuzzy=0.8)
        assert score == pytest.approx(1.5 * 1.1 * 2.0 * 1.5 * 1.3 * (1 + 0.8 * 0.2))

    def test_per_call_overrides_take_precedence(self):
        config = Settings()
        asset = Asset(id="a", symbol="A/B", type="crypto", category="layer1")
        score = apply_boosts(
            2.0, asset, config, category_boost={"layer1": 3.0}, type_boost={"crypto": 0.5}
        )
        assert score == pytest.approx(3.0)

    def test_unknown_category_and_type_are_neutral(self):
        asset = Asset(id="a", symbol="A/B", type="bond", category="misc")
        assert apply_boosts(4.0, asset, Settings()) == pytest.approx(4.0)


class TestLevenshtein:
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("btc", "btc", 0),
            ("flaw", "lawn", 2),
        ],
    )
    def test_distance(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("ethereum", "etherium") == levenshtein_distance(
            "etherium", "ethereum"
        )

    def test_similarity(self):
        assert levenshtein_similarity("", "") == 1.0
        assert levenshtein_similarity("abc", "") == 0.0
        assert levenshtein_similarity("kitten", "sitting") == pytest.approx(4 / 7)


class TestFuzzyScore:
    def test_threshold_is_inclusive(self):
        asset = Asset(id="a", symbol="ABCDEFGHIJ", name="Zeta Holdings")
        # 3 insertions over 10 characters -> similarity exactly 0.7
        assert fuzzy_score("abcdefg", asset, threshold=0.7) == pytest.approx(0.7)
        assert fuzzy_score("abcdefg", asset, threshold=0.71) == 0.0

    def test_uses_best_of_symbol_name_and_tags(self):
        asset = Asset(id="a", symbol="ETH/USDT", name="Ethereum", tags=["smart contracts"])
        assert fuzzy_score("etherium", asset) == pytest.approx(7 / 8)
        assert fuzzy_score("smart contract", asset) == pytest.approx(14 / 15)

    def test_below_threshold_scores_zero(self):
        asset = Asset(id="a", symbol="BTC/USDT", name="Bitcoin")
        assert fuzzy_score("solana", asset) == 0.0
