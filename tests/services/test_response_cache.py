"""
Tests for the response cache.

Covers key normalization, lazy expiry, insertion-order eviction and
overwrite semantics.
"""

import threading

import pytest

from shopadvisor.schemas.recommendations import Recommendation, RecommendationResponse
from shopadvisor.services.response_cache import ResponseCache, normalize_query


def _response(label: str) -> RecommendationResponse:
    return RecommendationResponse(
        recommendations=[Recommendation(product_id="1", relevance_score=90)],
        query_analysis=label,
    )


class TestNormalizeQuery:

    def test_trims_and_lowercases(self):
        assert normalize_query("  Best Gaming Headphones  ") == "best gaming headphones"

    def test_inner_whitespace_is_preserved(self):
        assert normalize_query("a  b") == "a  b"

    def test_blank(self):
        assert normalize_query("   ") == ""


class TestGetPut:

    def test_miss_on_empty_cache(self, cache):
        assert cache.get("anything") is None

    def test_hit_after_put(self, cache):
        response = _response("first")
        cache.put("laptop", response)
        assert cache.get("laptop") == response

    def test_case_and_whitespace_variants_share_entry(self, cache):
        cache.put("  Laptop For Coding ", _response("x"))

        assert cache.get("laptop for coding").query_analysis == "x"
        assert "LAPTOP FOR CODING" in cache
        assert len(cache) == 1

    def test_edits_to_returned_response_do_not_reach_cache(self, cache):
        cache.put("headphones", _response("x"))

        first = cache.get("headphones")
        first.recommendations.clear()
        first.query_analysis = "edited"

        second = cache.get("headphones")
        assert second is not first
        assert second.query_analysis == "x"
        assert [r.product_id for r in second.recommendations] == ["1"]

    def test_edits_to_stored_response_do_not_reach_cache(self, cache):
        response = _response("x")
        cache.put("headphones", response)

        response.recommendations.clear()

        assert len(cache.get("headphones").recommendations) == 1

    def test_overwrite_replaces_value(self, cache):
        cache.put("q", _response("old"))
        cache.put("Q", _response("new"))

        assert cache.get("q").query_analysis == "new"
        assert len(cache) == 1


class TestExpiry:

    def test_entry_at_exact_window_is_still_valid(self, cache, clock):
        cache.put("q", _response("x"))
        clock.advance(300)
        assert cache.get("q") is not None

    def test_entry_past_window_is_absent(self, cache, clock):
        cache.put("q", _response("x"))
        clock.advance(300.5)

        assert cache.get("q") is None
        assert "q" not in cache
        # dropped lazily on read
        assert len(cache) == 0

    def test_len_drops_expired_entries(self, cache, clock):
        cache.put("old", _response("old"))
        clock.advance(200)
        cache.put("new", _response("new"))
        clock.advance(150)

        assert len(cache) == 1
        assert cache.keys() == ["new"]

    def test_overwrite_refreshes_timestamp(self, cache, clock):
        cache.put("q", _response("old"))
        clock.advance(200)
        cache.put("q", _response("new"))
        clock.advance(200)

        assert cache.get("q").query_analysis == "new"


class TestEviction:

    def test_twenty_five_inserts_keep_latest_twenty(self, cache):
        for i in range(25):
            cache.put(f"query {i}", _response(str(i)))

        assert len(cache) == 20
        for i in range(5):
            assert cache.get(f"query {i}") is None
        for i in range(5, 25):
            assert cache.get(f"query {i}").query_analysis == str(i)

    def test_reads_do_not_protect_from_eviction(self, cache):
        for i in range(20):
            cache.put(f"query {i}", _response(str(i)))

        # insertion order, not LRU: touching the oldest does not save it
        assert cache.get("query 0") is not None
        cache.put("query 20", _response("20"))

        assert cache.get("query 0") is None
        assert cache.get("query 1") is not None

    def test_overwrite_moves_entry_to_newest(self, cache):
        for i in range(20):
            cache.put(f"query {i}", _response(str(i)))

        cache.put("query 0", _response("again"))
        cache.put("query 20", _response("20"))

        assert cache.get("query 0").query_analysis == "again"
        assert cache.get("query 1") is None

    def test_keys_in_insertion_order(self, cache):
        cache.put("b", _response("b"))
        cache.put("a", _response("a"))
        assert cache.keys() == ["b", "a"]

    def test_clear(self, cache):
        cache.put("a", _response("a"))
        cache.clear()
        assert len(cache) == 0

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            ResponseCache(max_entries=0)


class TestThreadSafety:

    def test_concurrent_puts_respect_capacity(self):
        cache = ResponseCache(max_entries=20)

        def writer(offset: int):
            for i in range(200):
                cache.put(f"q{offset}-{i}", _response("x"))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 20
