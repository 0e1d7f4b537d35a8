"""
Pydantic schemas for documents persisted in the key-value store.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from shopadvisor.schemas.recommendations import Recommendation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchHistoryEntry(BaseModel):
    """A past query, optionally with the recommendations it produced."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    query: str
    timestamp: datetime = Field(default_factory=_utcnow)
    recommendations: Optional[List[Recommendation]] = None
