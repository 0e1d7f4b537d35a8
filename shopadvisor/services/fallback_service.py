"""
Keyword fallback for recommendations.

Used whenever the Gemini path cannot produce a usable answer (no API key,
network error, timeout, unparseable output). Rules are checked in order
and the first rule with a keyword contained in the lower-cased query wins;
nothing is scored or combined. Every rule recommends exactly three catalog
products known to exist in the shipped catalog.

Pure computation over static data: never raises, never blocks.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from shopadvisor.schemas.recommendations import RecommendationResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackRule:
    """A keyword group and the canned response it produces."""
    name: str
    keywords: Tuple[str, ...]
    query_analysis: str
    recommendations: Tuple[Dict[str, Any], ...]

    def matches(self, lowered_query: str) -> bool:
        return any(keyword in lowered_query for keyword in self.keywords)

    def build_response(self) -> RecommendationResponse:
        # Fresh models on every call so callers can't mutate the table
        return RecommendationResponse.model_validate({
            "recommendations": [dict(r, key_features=list(r["key_features"])) for r in self.recommendations],
            "query_analysis": self.query_analysis,
        })


# =============================================================================
# RULE TABLE (priority order)
# =============================================================================

FALLBACK_RULES: Tuple[FallbackRule, ...] = (
    FallbackRule(
        name="laptops",
        keywords=("laptop", "programming", "coding", "development"),
        query_analysis="User is looking for a laptop suitable for programming and development work.",
        recommendations=(
            {
                "product_id": "1",
                "relevance_score": 95,
                "reasoning": "MacBook Air M2 offers excellent performance for programming with long battery life and lightweight design.",
                "key_features": ("M2 chip performance", "18-hour battery", "Lightweight at 2.7 lbs"),
            },
            {
                "product_id": "3",
                "relevance_score": 90,
                "reasoning": "ThinkPad X1 Carbon is a business-class laptop with excellent keyboard and durability for long coding sessions.",
                "key_features": ("Military-grade durability", "15-hour battery", "1TB SSD storage"),
            },
            {
                "product_id": "2",
                "relevance_score": 85,
                "reasoning": "Dell XPS 13 provides powerful performance in a compact form factor perfect for developers on the go.",
                "key_features": ("Intel Core i7", "16GB RAM", "512GB SSD"),
            },
        ),
    ),
    FallbackRule(
        name="headphones",
        keywords=("headphone", "noise", "work", "music"),
        query_analysis="User needs headphones for work or music with noise cancellation features.",
        recommendations=(
            {
                "product_id": "11",
                "relevance_score": 95,
                "reasoning": "Sony WH-1000XM5 offers industry-leading noise cancellation perfect for focused work and music enjoyment.",
                "key_features": ("Best-in-class ANC", "30-hour battery", "Multipoint connection"),
            },
            {
                "product_id": "12",
                "relevance_score": 90,
                "reasoning": "Bose QuietComfort 45 provides legendary comfort for all-day wear with excellent noise cancellation.",
                "key_features": ("Legendary comfort", "24-hour battery", "Clear calls"),
            },
            {
                "product_id": "10",
                "relevance_score": 85,
                "reasoning": "AirPods Pro 2 offers premium wireless experience with active noise cancellation in a compact form.",
                "key_features": ("Active noise cancellation", "Spatial audio", "MagSafe charging"),
            },
        ),
    ),
    FallbackRule(
        name="smartphones",
        keywords=("smartphone", "phone", "camera", "photo"),
        query_analysis="User is looking for a smartphone with emphasis on camera quality.",
        recommendations=(
            {
                "product_id": "8",
                "relevance_score": 95,
                "reasoning": "Google Pixel 8 Pro features exceptional computational photography with AI-powered camera features.",
                "key_features": ("Best-in-class camera", "Magic Eraser", "Pure Android"),
            },
            {
                "product_id": "6",
                "relevance_score": 92,
                "reasoning": "iPhone 15 Pro offers advanced camera system with ProRAW and ProRes video capabilities.",
                "key_features": ("48MP camera", "ProMotion display", "Titanium build"),
            },
            {
                "product_id": "7",
                "relevance_score": 88,
                "reasoning": "Samsung Galaxy S24 Ultra features a 200MP camera with S Pen for creative control.",
                "key_features": ("200MP camera", "S Pen included", "6.8-inch display"),
            },
        ),
    ),
    FallbackRule(
        name="smartwatches",
        keywords=("watch", "fitness", "health", "tracking"),
        query_analysis="User wants a smartwatch for fitness tracking and health monitoring.",
        recommendations=(
            {
                "product_id": "17",
                "relevance_score": 94,
                "reasoning": "Apple Watch Series 9 provides comprehensive health tracking with ECG and blood oxygen monitoring.",
                "key_features": ("Blood oxygen monitoring", "ECG", "GPS"),
            },
            {
                "product_id": "19",
                "relevance_score": 92,
                "reasoning": "Garmin Fenix 7 is perfect for serious athletes with advanced training metrics and solar charging.",
                "key_features": ("18-day battery", "Solar charging", "Advanced training metrics"),
            },
            {
                "product_id": "18",
                "relevance_score": 87,
                "reasoning": "Samsung Galaxy Watch 6 offers body composition analysis and comprehensive sleep tracking.",
                "key_features": ("Body composition", "Sleep tracking", "40-hour battery"),
            },
        ),
    ),
    FallbackRule(
        name="tablets",
        keywords=("tablet", "ipad", "draw", "note"),
        query_analysis="User needs a tablet for creative work or note-taking.",
        recommendations=(
            {
                "product_id": "14",
                "relevance_score": 95,
                "reasoning": "iPad Pro 12.9 with M2 chip offers professional-grade performance with Apple Pencil support for digital art.",
                "key_features": ("M2 chip", "Liquid Retina XDR", "Apple Pencil support"),
            },
            {
                "product_id": "15",
                "relevance_score": 90,
                "reasoning": "Samsung Galaxy Tab S9 Ultra features large AMOLED display with included S Pen for productivity.",
                "key_features": ("14.6-inch AMOLED", "S Pen included", "Water resistant"),
            },
            {
                "product_id": "16",
                "relevance_score": 85,
                "reasoning": "Microsoft Surface Pro 9 runs full Windows 11 for complete desktop experience in tablet form.",
                "key_features": ("Full Windows 11", "Type Cover compatible", "Surface Pen support"),
            },
        ),
    ),
    FallbackRule(
        name="gaming",
        keywords=("gaming", "game", "console", "play"),
        query_analysis="User is interested in gaming consoles or gaming equipment.",
        recommendations=(
            {
                "product_id": "27",
                "relevance_score": 92,
                "reasoning": "PlayStation 5 offers next-gen gaming with ray tracing and ultra-fast SSD for incredible performance.",
                "key_features": ("4K gaming", "Ray tracing", "DualSense controller"),
            },
            {
                "product_id": "28",
                "relevance_score": 90,
                "reasoning": "Xbox Series X provides powerful 4K gaming with Game Pass for access to hundreds of games.",
                "key_features": ("120fps support", "Game Pass", "Quick Resume"),
            },
            {
                "product_id": "30",
                "relevance_score": 88,
                "reasoning": "Steam Deck lets you play your entire Steam library portably with PC gaming power.",
                "key_features": ("Portable PC gaming", "Steam library", "Expandable storage"),
            },
        ),
    ),
)

DEFAULT_RULE = FallbackRule(
    name="default",
    keywords=(),
    query_analysis="Here are some popular products from our catalog that might interest you.",
    recommendations=(
        {
            "product_id": "1",
            "relevance_score": 85,
            "reasoning": "MacBook Air M2 is a versatile laptop perfect for everyday computing and creative work.",
            "key_features": ("M2 chip", "All-day battery", "Lightweight design"),
        },
        {
            "product_id": "6",
            "relevance_score": 82,
            "reasoning": "iPhone 15 Pro is a premium smartphone with advanced features for productivity and entertainment.",
            "key_features": ("A17 Pro chip", "ProMotion display", "5G connectivity"),
        },
        {
            "product_id": "11",
            "relevance_score": 80,
            "reasoning": "Sony WH-1000XM5 headphones deliver exceptional audio quality for any listening experience.",
            "key_features": ("Premium sound", "Noise cancellation", "30-hour battery"),
        },
    ),
)


def match_fallback_rule(query: str) -> FallbackRule:
    """First rule whose keywords appear in the query, else the default rule."""
    lowered = (query or "").lower()
    for rule in FALLBACK_RULES:
        if rule.matches(lowered):
            return rule
    return DEFAULT_RULE


def get_fallback_recommendations(query: str) -> RecommendationResponse:
    """
    Build the canned response for a query.

    Args:
        query: Raw user query (normalization not required)

    Returns:
        RecommendationResponse with exactly three recommendations
    """
    rule = match_fallback_rule(query)
    logger.info(f"Fallback rule '{rule.name}' selected")
    return rule.build_response()


def fallback_product_ids() -> List[str]:
    """Every product id referenced by the rule table (catalog sanity checks)."""
    ids: List[str] = []
    for rule in FALLBACK_RULES + (DEFAULT_RULE,):
        ids.extend(r["product_id"] for r in rule.recommendations)
    return ids
