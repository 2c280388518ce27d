"""
Tests for the search service: query ranking, maintenance round trips,
suggestions and popular searches.
"""

import pytest
from prometheus_client import REGISTRY
from pydantic import ValidationError

from assetsearch.contracts.models import MatchType, SearchOptions
from assetsearch.contracts.settings import Settings
from assetsearch.index.errors import InvalidAssetError
from assetsearch.retriever.search_service import SearchIndexService

NEUTRAL = {
    "fuzzy_match": False,
    "category_boost": {"layer1": 1.0},
    "type_boost": {"crypto": 1.0},
}


def _ranked(results):
    return [(r.asset.id, r.score) for r in results]


class TestSearchScenarios:
    def test_exact_symbol_hit(self, service):
        results = service.search("btc")
        assert len(results) == 1
        assert results[0].asset.id == "btc-usdt"
        assert results[0].match_type == MatchType.SYMBOL
        assert results[0].match_text == "btc usdt"
        # symbol weight 10 x layer1 1.3 x crypto 1.2
        assert results[0].score == pytest.approx(15.6)

    def test_name_hit(self, service):
        results = service.search("bitcoin")
        assert [r.asset.id for r in results] == ["btc-usdt"]
        assert results[0].match_type == MatchType.NAME
        # name weight 5 x 1.3 x 1.2, exact fuzzy similarity adds 20%
        assert results[0].score == pytest.approx(5 * 1.3 * 1.2 * 1.2)

    def test_tag_hit(self, service):
        results = service.search("blockchain")
        assert results[0].match_type == MatchType.TAG
        assert results[0].match_text == "blockchain"

    def test_removed_asset_no_longer_found(self, service):
        service.remove_from_index("btc-usdt")
        assert service.search("btc") == []

    def test_secondary_fields_are_damped(self, service):
        results = service.search("eth", **NEUTRAL)
        assert len(results) == 1
        assert results[0].match_type == MatchType.SYMBOL
        # symbol 1.0 x 10 + name 1.0 x 5 x 0.7
        assert results[0].score == pytest.approx(13.5)

    def test_options_object(self, service):
        results = service.search("eth", SearchOptions(**NEUTRAL))
        assert results[0].score == pytest.approx(13.5)

    def test_overrides_apply_on_top_of_options(self, service):
        options = SearchOptions(**NEUTRAL)
        results = service.search("eth", options, type_boost={"crypto": 2.0})
        assert results[0].score == pytest.approx(27.0)

    def test_unknown_override_rejected(self, service):
        with pytest.raises(ValidationError):
            service.search("usdt", limt=1)
        with pytest.raises(ValidationError):
            SearchOptions(fuzzy=False)

    def test_ties_break_by_asset_id(self, service):
        results = service.search("layer1")
        assert [r.asset.id for r in results] == ["btc-usdt", "eth-usdt"]
        assert results[0].score == results[1].score
        assert all(r.match_type == MatchType.CATEGORY for r in results)

    def test_limit_and_min_score(self, service):
        assert len(service.search("usdt")) == 2
        assert len(service.search("usdt", limit=1)) == 1
        assert service.search("usdt", min_score=1000) == []

    def test_results_sorted_descending(self, service, make_asset):
        service.add_to_index(
            make_asset("usdt", "USDT", name="Tether", type="crypto", category="layer1")
        )
        results = service.search("usdt")
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0].asset.id == "usdt"


class TestSearchProperties:
    def test_minimum_length_boundary(self, config, make_asset):
        svc = SearchIndexService(config)
        svc.build_index([make_asset("abc", "ABC/USDT")])
        assert svc.search("") == []
        assert svc.search("a") == []
        assert [r.asset.id for r in svc.search("ab")] == ["abc"]

    def test_punctuation_only_query_matches_nothing(self, service):
        assert service.search("//") == []
        assert service.search("--") == []
        assert service.search(" / ") == []
        assert service.search("btc")[0].asset.id == "btc-usdt"

    def test_favorite_scores_strictly_higher(self, config, make_asset):
        svc = SearchIndexService(config)
        svc.build_index(
            [
                make_asset("plain", "ABC/USDT", name="Alpha"),
                make_asset("fav", "ABC/USDT", name="Alpha", is_favorite=True),
            ]
        )
        scores = dict(_ranked(svc.search("abc")))
        assert scores["fav"] > scores["plain"]

    def test_remove_add_round_trip(self, service, btc):
        queries = ["btc", "usdt", "layer1", "defi", "bitcoin", "smart"]
        before = {q: sorted(_ranked(service.search(q))) for q in queries}

        service.remove_from_index(btc.id)
        service.add_to_index(btc)

        for q in queries:
            after = sorted(_ranked(service.search(q)))
            assert [a for a, _ in after] == [a for a, _ in before[q]]
            assert [s for _, s in after] == pytest.approx([s for _, s in before[q]])

    def test_rebuild_is_idempotent(self, service, btc, eth):
        first = service.get_index_stats()
        service.build_index([btc, eth])
        assert service.get_index_stats() == first

    def test_fuzzy_threshold_boundary(self, make_asset):
        asset = make_asset("abc", "ABCDEFGHIJ", name="Zeta Holdings")

        at_threshold = SearchIndexService(Settings(fuzzy_threshold=0.7))
        at_threshold.build_index([asset])
        above_similarity = SearchIndexService(Settings(fuzzy_threshold=0.71))
        above_similarity.build_index([asset])

        # prefix 0.8 + token prefix 0.2 on the symbol, weight 10
        plain = at_threshold.search("abcdefg", fuzzy_match=False)[0].score
        boosted = at_threshold.search("abcdefg")[0].score
        missed = above_similarity.search("abcdefg")[0].score

        assert plain == pytest.approx(10.0)
        assert boosted == pytest.approx(10.0 * (1 + 0.7 * 0.2))
        assert missed == pytest.approx(plain)

    def test_fuzzy_never_surfaces_unmatched_assets(self, service):
        assert service.search("etherium") == []

    def test_inactive_assets_excluded_by_default(self, service, make_asset):
        service.add_to_index(make_asset("old", "OLD/USDT", is_active=False))
        assert service.search("old") == []
        assert [r.asset.id for r in service.search("old", include_inactive=True)] == ["old"]


class TestMaintenance:
    def test_build_rejects_malformed_records(self, service):
        with pytest.raises(InvalidAssetError):
            service.build_index([{"symbol": "NOID/USDT"}])
        assert len(service.search("btc")) == 1

    def test_update_reindexes(self, service, btc):
        updated = btc.model_copy(update={"symbol": "XBT/USDT"})
        service.update_index(updated)
        assert service.search("btc") == []
        assert service.search("xbt")[0].asset.id == "btc-usdt"

    def test_remove_unknown_returns_false(self, service):
        assert service.remove_from_index("nope") is False

    def test_destroy_clears_everything(self, service):
        service.destroy()
        stats = service.get_index_stats()
        assert stats.total_entries == 0
        assert stats.tag_entries == 0
        assert service.search("btc") == []

    def test_index_size_gauge(self, service, make_asset):
        service.add_to_index(make_asset("x", "X/USDT"))
        assert REGISTRY.get_sample_value("assetsearch_index_entries") == 3


class TestSuggestions:
    def test_prefix_match_returns_display_values(self, service):
        suggestions = service.get_suggestions("et")
        assert suggestions[0] == "ETH/USDT"
        assert "Ethereum" in suggestions
        assert "BTC/USDT" not in suggestions

    def test_limit_keeps_symbols_first(self, service):
        assert service.get_suggestions("et", limit=1) == ["ETH/USDT"]

    def test_case_insensitive(self, service):
        assert service.get_suggestions("ET") == service.get_suggestions("et")

    def test_categories_deduplicated(self, service):
        assert service.get_suggestions("lay") == ["layer1"]

    def test_empty_query(self, service):
        assert service.get_suggestions("") == []
        assert service.get_suggestions("/") == []

    def test_inactive_only_keys_hidden(self, service, make_asset):
        service.add_to_index(make_asset("old", "OLD/USDT", is_active=False))
        assert service.get_suggestions("ol") == []
        assert service.get_suggestions("ol", include_inactive=True) == ["OLD/USDT"]


class TestPopularSearches:
    def test_doubly_flagged_first(self, config, make_asset):
        svc = SearchIndexService(config)
        svc.build_index(
            [
                make_asset("a", "A/USDT", trending=True),
                make_asset("b", "B/USDT", trending=True),
                make_asset("c", "C/USDT", trending=True, is_popular=True),
                make_asset("d", "D/USDT", is_popular=True),
                make_asset("e", "E/USDT"),
            ]
        )
        assert svc.get_popular_searches() == ["C/USDT", "A/USDT", "B/USDT", "D/USDT"]

    def test_capped_at_ten(self, config, make_asset):
        svc = SearchIndexService(config)
        svc.build_index([make_asset(f"t{i}", f"T{i}/USDT", trending=True) for i in range(12)])
        assert len(svc.get_popular_searches()) == 10

    def test_inactive_excluded_unless_requested(self, config, make_asset):
        svc = SearchIndexService(config)
        svc.build_index([make_asset("old", "OLD/USDT", trending=True, is_active=False)])
        assert svc.get_popular_searches() == []
        assert svc.get_popular_searches(include_inactive=True) == ["OLD/USDT"]
