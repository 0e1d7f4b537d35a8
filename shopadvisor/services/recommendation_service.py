"""
Recommendation Service - Gemini ranking over the product catalog

This service ranks catalog products for a free-text shopping query using
Google's Gemini model, with a response cache in front and a keyword
fallback behind it.

Architecture:
- Pattern: single completion call with the whole catalog in the prompt
- Model: settings.GEMINI_MODEL
- API: Google Gen AI Python SDK (google-genai), async client
- Temperature: 0.2, top_k 1, top_p 1.0, max 1024 output tokens
- Output: JSON parsed from text (first balanced object, prose tolerated)

Flow:
1. Normalize the query and check the ResponseCache (hit -> return)
2. Build the prompt from the query and the catalog projection
3. Call Gemini, bounded by settings.GEMINI_TIMEOUT_SECONDS
4. Extract candidates[0].content.parts[0].text and parse it
5. Cache the parsed response and return it

Any failure in steps 3-4 (missing API key, API error, timeout, missing
text, no JSON, JSON without a usable recommendations list) returns the
keyword fallback instead. Fallback output is never cached. Callers never
see an exception for these cases.
"""

import asyncio
import json
import math
import re
from typing import Any, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from shopadvisor.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
)
from shopadvisor.config import settings
from shopadvisor.schemas.recommendations import (
    Recommendation,
    RecommendationQueryRequest,
    RecommendationResponse,
    RecommendationResult,
)
from shopadvisor.services.catalog_service import Catalog, get_catalog
from shopadvisor.services.fallback_service import get_fallback_recommendations
from shopadvisor.services.response_cache import ResponseCache, normalize_query
from shopadvisor.utils.constants import MAX_RECOMMENDATIONS
from shopadvisor.utils.logging import excerpt, get_logger

logger = get_logger(__name__)

# Initialize Gemini client (lazy initialization)
_gemini_client = None

# Process-wide recommendation client (lazy initialization)
_recommendation_client: Optional["RecommendationClient"] = None

GENERATION_TEMPERATURE = 0.2
GENERATION_TOP_K = 1
GENERATION_TOP_P = 1.0
GENERATION_MAX_OUTPUT_TOKENS = 1024


class RecommendationParseError(ValueError):
    """Gemini answered, but the text did not yield a usable response."""


def _get_gemini_client():
    """
    Lazy initialization of Gemini client.
    Uses the Google Gen AI SDK.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    api_key = settings.GOOGLE_API_KEY

    if not api_key:
        logger.warning(
            "GOOGLE_API_KEY not configured. Recommendations will use the keyword fallback. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    try:
        _gemini_client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(settings.GEMINI_TIMEOUT_SECONDS * 1000)),
        )
        logger.info("Gemini client initialized successfully for recommendations")
        return _gemini_client
    except Exception as e:
        logger.error(f"Failed to initialize Gemini client: {e}")
        return None


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def _extract_candidate_text(response: Any) -> str:
    """
    Return candidates[0].content.parts[0].text.

    Raises:
        RecommendationParseError: if any level of the path is missing
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise RecommendationParseError("Gemini response has no candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        raise RecommendationParseError("Gemini candidate has no content parts")

    text = getattr(parts[0], "text", None)
    if not isinstance(text, str) or not text.strip():
        raise RecommendationParseError("Gemini candidate part has no text")
    return text


def find_json_object(text: str) -> Optional[str]:
    """
    Locate the first balanced {...} substring in text.

    Braces inside JSON string literals are ignored, so prose before or
    after the object and markdown code fences around it are tolerated.
    Returns None when no opening brace is ever closed.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; an inner one may still close
        start = text.find("{", start + 1)
    return None


def _clean_json_text(json_content: str) -> str:
    # Remove trailing commas before } or ] (common LLM mistake)
    json_content = re.sub(r',(\s*[}\]])', r'\1', json_content)
    # Control characters (except tab/newline/CR) break json.loads
    return re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', json_content)


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return int(round(number))


def _project_recommendation(item: Any) -> Optional[Recommendation]:
    """
    Project one loosely-typed entry into a Recommendation.

    Entries without a product_id or a numeric relevance_score are
    discarded (None). Missing reasoning becomes "" and missing or
    malformed key_features becomes [].
    """
    if not isinstance(item, dict):
        return None

    product_id = item.get("product_id")
    if isinstance(product_id, bool) or not isinstance(product_id, (str, int)):
        return None
    product_id = str(product_id).strip()
    if not product_id:
        return None

    score = _coerce_score(item.get("relevance_score"))
    if score is None:
        return None

    reasoning = item.get("reasoning")
    features = item.get("key_features")
    if not isinstance(features, list):
        features = []

    return Recommendation(
        product_id=product_id,
        relevance_score=score,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        key_features=[f for f in features if isinstance(f, str)],
    )


def parse_recommendation_text(text: str) -> RecommendationResponse:
    """
    Parse generated text into a RecommendationResponse.

    Raises:
        RecommendationParseError: no JSON object, invalid JSON, no
            recommendations list, or no entry survives projection
    """
    json_content = find_json_object(text)
    if json_content is None:
        raise RecommendationParseError("No JSON object found in model output")

    try:
        data = json.loads(_clean_json_text(json_content))
    except json.JSONDecodeError as e:
        raise RecommendationParseError(f"Invalid JSON in model output: {e}") from e

    raw_recommendations = data.get("recommendations")
    if not isinstance(raw_recommendations, list):
        raise RecommendationParseError("Model output has no 'recommendations' list")

    recommendations: List[Recommendation] = []
    for item in raw_recommendations:
        rec = _project_recommendation(item)
        if rec is None:
            logger.debug(f"Dropping malformed recommendation entry: {excerpt(str(item), 120)}")
            continue
        recommendations.append(rec)

    if not recommendations:
        raise RecommendationParseError("Model output has no usable recommendations")

    if len(recommendations) > MAX_RECOMMENDATIONS:
        logger.debug(f"Truncating {len(recommendations)} recommendations to {MAX_RECOMMENDATIONS}")
        recommendations = recommendations[:MAX_RECOMMENDATIONS]

    query_analysis = data.get("query_analysis")
    return RecommendationResponse(
        recommendations=recommendations,
        query_analysis=query_analysis if isinstance(query_analysis, str) else "",
    )


# =============================================================================
# CLIENT
# =============================================================================

class RecommendationClient:
    """
    Entry point for recommendation queries.

    Owns no global state: the catalog and cache are passed in, so tests
    (and multiple app sessions) can each use their own instances.
    """

    def __init__(
        self,
        catalog: Catalog,
        cache: ResponseCache,
        gemini_client: Optional[Any] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self._catalog = catalog
        self._cache = cache
        self._gemini_client = gemini_client
        self._model = model or settings.GEMINI_MODEL
        self._timeout = timeout_seconds if timeout_seconds is not None else settings.GEMINI_TIMEOUT_SECONDS

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def get_recommendations(self, query: str) -> RecommendationResponse:
        """
        Recommendations for a free-text query. Never raises for remote or
        parse failures; those return the keyword fallback.
        """
        result = await self.resolve(query)
        return result.response

    async def resolve(self, query: str) -> RecommendationResult:
        """Same as get_recommendations, also reporting which path answered."""
        try:
            request = RecommendationQueryRequest(query=query)
        except ValidationError:
            logger.warning("Empty recommendation query received; using fallback defaults")
            return self._fallback(query)

        cache_key = normalize_query(request.query)

        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Returning cached recommendations for '{excerpt(cache_key)}'")
            return RecommendationResult(source="CACHE", response=cached)

        client = self._gemini_client if self._gemini_client is not None else _get_gemini_client()
        if client is None:
            logger.error("Gemini client not available")
            return self._fallback(query)

        try:
            response = await self._query_gemini(client, query)
        except asyncio.TimeoutError:
            logger.error(f"Gemini call timed out after {self._timeout}s")
            return self._fallback(query)
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error (code={e.code}): {e.message}")
            return self._fallback(query)
        except RecommendationParseError as e:
            logger.error(f"Failed to parse Gemini response: {e}")
            return self._fallback(query)
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}")
            return self._fallback(query)

        self._cache.put(cache_key, response)
        logger.info(f"Returning {len(response.recommendations)} product recommendations")
        return RecommendationResult(source="REMOTE", response=response)

    async def _query_gemini(self, client: Any, query: str) -> RecommendationResponse:
        logger.info(f"Calling Gemini for query='{excerpt(query)}'")

        user_prompt = build_recommendation_user_prompt(query, self._catalog.all())
        config = types.GenerateContentConfig(
            system_instruction=RECOMMENDATION_SYSTEM_PROMPT,
            temperature=GENERATION_TEMPERATURE,
            top_k=GENERATION_TOP_K,
            top_p=GENERATION_TOP_P,
            max_output_tokens=GENERATION_MAX_OUTPUT_TOKENS,
        )

        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            ),
            timeout=self._timeout,
        )

        text = _extract_candidate_text(response)
        try:
            return parse_recommendation_text(text)
        except RecommendationParseError:
            logger.error(f"Raw content: {excerpt(text, 500)}")
            raise

    def _fallback(self, query: str) -> RecommendationResult:
        logger.warning("Falling back to keyword recommendations")
        return RecommendationResult(
            source="FALLBACK",
            response=get_fallback_recommendations(query),
        )


def get_recommendation_client() -> RecommendationClient:
    """Process-wide client over the packaged catalog and a fresh cache."""
    global _recommendation_client

    if _recommendation_client is None:
        _recommendation_client = RecommendationClient(
            catalog=get_catalog(),
            cache=ResponseCache(
                max_entries=settings.RESPONSE_CACHE_MAX_ENTRIES,
                ttl_seconds=settings.RESPONSE_CACHE_TTL_SECONDS,
            ),
        )
    return _recommendation_client


async def get_recommendations(query: str) -> RecommendationResponse:
    """Module-level shortcut for get_recommendation_client().get_recommendations."""
    return await get_recommendation_client().get_recommendations(query)
