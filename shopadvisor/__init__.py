"""
Shop Advisor - natural-language product recommendations over a fixed catalog.

Typical use:

    >>> from shopadvisor import get_recommendations
    >>> response = await get_recommendations("laptop for programming")
    >>> response.recommendations[0].product_id
"""

__version__ = "0.1.0"

from shopadvisor.services.recommendation_service import (
    RecommendationClient,
    get_recommendation_client,
    get_recommendations,
)

__all__ = [
    "RecommendationClient",
    "get_recommendation_client",
    "get_recommendations",
]
