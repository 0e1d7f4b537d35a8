"""
Pydantic schemas for recommendation queries.

These models define the contracts between the recommendation client and
its callers. Field names of Recommendation and RecommendationResponse
match the JSON the model is instructed to return, so a parsed response
and a cached one serialize identically.
"""

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecommendationQueryRequest(BaseModel):
    """
    Caller-side validation of a free-text shopping query.

    The recommendation client validates with this model and answers blank
    input with the fallback default; UI code can validate first so the
    user gets an input error instead of generic suggestions.
    """
    query: str = Field(
        ...,
        description="User's natural language description of what they need",
        examples=[
            "I need a laptop for programming with long battery life",
            "noise cancelling headphones for the office"
        ]
    )

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("query must not be empty")
        return stripped


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class Recommendation(BaseModel):
    """
    One ranked product suggestion.

    product_id is not guaranteed to exist in the catalog; renderers skip
    dangling references (see Catalog.resolve).
    """
    product_id: str = Field(
        ...,
        description="Catalog identifier of the recommended product",
        examples=["1"]
    )
    relevance_score: int = Field(
        ...,
        description="Nominally 0-100; not clamped",
        examples=[95]
    )
    reasoning: str = Field(
        "",
        description="Why this product matches the query",
        examples=["MacBook Air M2 offers excellent performance for programming."]
    )
    key_features: List[str] = Field(
        default_factory=list,
        description="Short feature highlights for UI display",
        examples=[["M2 chip performance", "18-hour battery"]]
    )


class RecommendationResponse(BaseModel):
    """
    Ranked recommendations for one query.

    Order is presentation rank: index 0 is the top match.
    """
    recommendations: List[Recommendation] = Field(
        default_factory=list,
        description="Ranked suggestions (nominally 3-5)"
    )
    query_analysis: str = Field(
        "",
        description="Short summary of what the user is looking for"
    )


RecommendationSource = Literal["REMOTE", "CACHE", "FALLBACK"]


class RecommendationResult(BaseModel):
    """
    A response together with the path that produced it.

    - REMOTE: parsed from a fresh Gemini completion (and now cached)
    - CACHE: served from the response cache, no outbound request
    - FALLBACK: keyword-rule defaults; the remote path failed or was skipped
    """
    source: RecommendationSource = Field(
        ...,
        description="Which path produced the response"
    )
    response: RecommendationResponse

    @property
    def used_fallback(self) -> bool:
        return self.source == "FALLBACK"
