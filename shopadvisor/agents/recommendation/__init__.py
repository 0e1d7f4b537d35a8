"""
Recommendation prompts - catalog-grounded LLM ranking.

The client lives in:
- shopadvisor/services/recommendation_service.py

Prompt templates are in:
- shopadvisor/agents/recommendation/prompts.py
"""

from shopadvisor.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    serialize_catalog,
)

__all__ = [
    "RECOMMENDATION_SYSTEM_PROMPT",
    "build_recommendation_user_prompt",
    "serialize_catalog",
]
