"""
Service layer for the Shop Advisor recommendation core.

Contains:
- catalog_service: immutable product catalog
- response_cache: bounded, expiring cache of remote-derived responses
- fallback_service: keyword rules used when Gemini is unavailable
- recommendation_service: the recommendation client (cache -> Gemini -> fallback)
- storage_service: search history and favorites for the UI
"""

from .catalog_service import Catalog, get_catalog, load_catalog
from .fallback_service import get_fallback_recommendations, match_fallback_rule
from .recommendation_service import (
    RecommendationClient,
    get_recommendation_client,
    get_recommendations,
)
from .response_cache import ResponseCache, normalize_query
from .storage_service import StorageService, create_storage_service

__all__ = [
    "Catalog",
    "get_catalog",
    "load_catalog",
    "get_fallback_recommendations",
    "match_fallback_rule",
    "RecommendationClient",
    "get_recommendation_client",
    "get_recommendations",
    "ResponseCache",
    "normalize_query",
    "StorageService",
    "create_storage_service",
]
