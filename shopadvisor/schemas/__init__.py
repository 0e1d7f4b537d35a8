"""
Pydantic schemas for the recommendation core.

Products, recommendation responses, and the documents kept by the
storage collaborator.
"""

from .products import Product
from .recommendations import (
    Recommendation,
    RecommendationQueryRequest,
    RecommendationResponse,
    RecommendationResult,
    RecommendationSource,
)
from .storage import SearchHistoryEntry

__all__ = [
    "Product",
    "Recommendation",
    "RecommendationQueryRequest",
    "RecommendationResponse",
    "RecommendationResult",
    "RecommendationSource",
    "SearchHistoryEntry",
]
