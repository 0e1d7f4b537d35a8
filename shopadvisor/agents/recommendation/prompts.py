"""
Recommendation Prompt Templates

Contains the system prompt and user prompt builder for the recommendation
client.

Architecture:
- Pattern: single completion call, catalog embedded in the prompt
- Model: Gemini (settings.GEMINI_MODEL)
- Temperature: 0.2 (near-deterministic ranking)
- Output: JSON parsed from text; the model may still wrap it in prose,
  so the client extracts the first balanced JSON object

Prompt Engineering Pattern:
- XML tags delimit the query, the catalog and the output schema
- System prompt defines the role only
- User prompt carries the catalog, the task and the output format
"""

import json
from typing import Iterable

from shopadvisor.schemas.products import Product

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

RECOMMENDATION_SYSTEM_PROMPT = """You are an AI product advisor for an electronics and lifestyle store.

<role>
You read a shopper's free-text description of what they need and rank the
most suitable products from the store catalog you are given.

CRITICAL: Only recommend products that appear in the provided catalog, and
refer to them by their exact "id" value. Never invent products or ids.
</role>

<output_format>
Always return valid JSON matching the schema provided in the user prompt.
No markdown code blocks, no explanatory text, only the JSON object.
</output_format>"""


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def serialize_catalog(products: Iterable[Product]) -> str:
    """JSON projection of the catalog sent to the model."""
    return json.dumps([p.prompt_projection() for p in products], indent=2, ensure_ascii=False)


def build_recommendation_user_prompt(query: str, products: Iterable[Product]) -> str:
    """
    Build the user prompt for one recommendation query.

    Args:
        query: The user's raw query text
        products: Every product in the catalog

    Returns:
        str: Formatted user prompt ready to be sent to Gemini
    """
    catalog_json = serialize_catalog(products)

    return f"""Analyze the user's query and recommend the most suitable products from the provided catalog.

<query>
{query}
</query>

<catalog>
{catalog_json}
</catalog>

<instructions>
1. Return 3-5 product recommendations that best match the user's needs
2. Include reasoning for each recommendation explaining why it matches the query
3. Consider price, category, brand, and use case from the description
4. Score relevance from 0 to 100, best match first
5. Format the response as valid JSON only, no additional text
</instructions>

<output_schema>
{{
  "recommendations": [
    {{
      "product_id": "id from the catalog",
      "relevance_score": 85,
      "reasoning": "This product matches because...",
      "key_features": ["feature1", "feature2"]
    }}
  ],
  "query_analysis": "Brief analysis of what the user is looking for"
}}
</output_schema>"""
