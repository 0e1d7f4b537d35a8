"""
Tests for the keyword fallback.
"""

import pytest

from shopadvisor.services.fallback_service import (
    DEFAULT_RULE,
    FALLBACK_RULES,
    fallback_product_ids,
    get_fallback_recommendations,
    match_fallback_rule,
)


class TestRuleMatching:

    @pytest.mark.parametrize("query,expected_rule", [
        ("I need a laptop for programming with long battery life", "laptops"),
        ("something for CODING", "laptops"),
        ("noise cancelling for the office", "headphones"),
        ("music on the go", "headphones"),
        ("a phone that takes great photos", "smartphones"),
        ("fitness tracking", "smartwatches"),
        ("iPad for taking notes", "tablets"),
        ("new console", "gaming"),
        ("espresso machine for my kitchen", "default"),
    ])
    def test_rule_selection(self, query, expected_rule):
        assert match_fallback_rule(query).name == expected_rule

    def test_first_rule_wins(self):
        # mentions both headphones and gaming; headphones has priority
        assert match_fallback_rule("  Best Gaming Headphones  ").name == "headphones"

    def test_laptop_beats_everything(self):
        assert match_fallback_rule("laptop for gaming and music").name == "laptops"

    def test_substring_match(self):
        # "smartphone" contains "phone", "smartwatch" contains "watch"
        assert match_fallback_rule("smartwatch").name == "smartwatches"

    def test_empty_query_uses_default(self):
        assert match_fallback_rule("") is DEFAULT_RULE


class TestFallbackResponses:

    def test_laptop_scenario(self):
        response = get_fallback_recommendations(
            "I need a laptop for programming with long battery life"
        )

        assert response.query_analysis == (
            "User is looking for a laptop suitable for programming and development work."
        )
        assert [r.product_id for r in response.recommendations] == ["1", "3", "2"]
        assert [r.relevance_score for r in response.recommendations] == [95, 90, 85]

    def test_default_response(self):
        response = get_fallback_recommendations("a gift for my dad")

        assert [r.product_id for r in response.recommendations] == ["1", "6", "11"]

    @pytest.mark.parametrize("rule", FALLBACK_RULES + (DEFAULT_RULE,), ids=lambda r: r.name)
    def test_every_rule_returns_exactly_three(self, rule):
        response = rule.build_response()

        assert len(response.recommendations) == 3
        assert response.query_analysis
        for rec in response.recommendations:
            assert rec.reasoning
            assert rec.key_features

    def test_deterministic(self):
        first = get_fallback_recommendations("music")
        second = get_fallback_recommendations("music")

        assert first.model_dump_json() == second.model_dump_json()

    def test_returned_models_are_independent(self):
        first = get_fallback_recommendations("music")
        first.recommendations[0].key_features.append("mutated")
        first.recommendations.pop()

        second = get_fallback_recommendations("music")

        assert len(second.recommendations) == 3
        assert "mutated" not in second.recommendations[0].key_features

    def test_referenced_products_exist_in_catalog(self, catalog):
        for product_id in fallback_product_ids():
            assert catalog.by_id(product_id) is not None, product_id
