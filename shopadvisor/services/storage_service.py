"""
Storage service.

Persists search history and favorite products for the UI on top of an
async key-value store. Values are JSON documents under fixed keys (see
shopadvisor.utils.constants.STORAGE_KEYS).

History is newest-first and capped at SEARCH_HISTORY_LIMIT entries.
Favorites are an ordered list of product ids; adding an existing id is
a no-op.

These are convenience features for the surrounding app, so store errors
are logged and degrade (reads return empty, writes are skipped) rather
than interrupting the user flow.
"""

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter

from shopadvisor.config import settings
from shopadvisor.db.client import get_supabase_client
from shopadvisor.db.kv_store import InMemoryKeyValueStore, KeyValueStore, SupabaseKeyValueStore
from shopadvisor.schemas.recommendations import Recommendation
from shopadvisor.schemas.storage import SearchHistoryEntry
from shopadvisor.utils.constants import SEARCH_HISTORY_LIMIT, STORAGE_KEYS

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(List[SearchHistoryEntry])


class StorageService:
    """Search history and favorites over a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    async def _read_history(self) -> List[SearchHistoryEntry]:
        raw = await self._store.get_item(STORAGE_KEYS['SEARCH_HISTORY'])
        if not raw:
            return []
        return _history_adapter.validate_json(raw)

    async def save_search_query(
        self,
        query: str,
        recommendations: Optional[List[Recommendation]] = None,
    ) -> Optional[SearchHistoryEntry]:
        """
        Prepend a query to the history, keeping the newest entries only.

        Returns:
            The stored entry, or None if the store failed
        """
        entry = SearchHistoryEntry(query=query, recommendations=recommendations)
        try:
            history = await self._read_history()
            history.insert(0, entry)
            trimmed = history[:SEARCH_HISTORY_LIMIT]
            await self._store.set_item(
                STORAGE_KEYS['SEARCH_HISTORY'],
                _history_adapter.dump_json(trimmed).decode("utf-8"),
            )
            return entry
        except ValueError as e:
            logger.error(f"Stored search history is corrupt, not saving: {e}")
            return None
        except Exception as e:
            logger.error(f"Error saving search query: {e}")
            return None

    async def get_search_history(self) -> List[SearchHistoryEntry]:
        """Saved queries, newest first."""
        try:
            return await self._read_history()
        except Exception as e:
            logger.error(f"Error getting search history: {e}")
            return []

    async def clear_search_history(self) -> None:
        try:
            await self._store.remove_item(STORAGE_KEYS['SEARCH_HISTORY'])
        except Exception as e:
            logger.error(f"Error clearing search history: {e}")

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def _read_favorites(self) -> List[str]:
        raw = await self._store.get_item(STORAGE_KEYS['FAVORITES'])
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("favorites document is not a list")
        return [str(product_id) for product_id in data]

    async def save_favorite_product(self, product_id: str) -> None:
        try:
            favorites = await self._read_favorites()
            if product_id in favorites:
                return
            favorites.append(product_id)
            await self._store.set_item(STORAGE_KEYS['FAVORITES'], json.dumps(favorites))
        except Exception as e:
            logger.error(f"Error saving favorite product: {e}")

    async def remove_favorite_product(self, product_id: str) -> None:
        try:
            favorites = await self._read_favorites()
            updated = [pid for pid in favorites if pid != product_id]
            await self._store.set_item(STORAGE_KEYS['FAVORITES'], json.dumps(updated))
        except Exception as e:
            logger.error(f"Error removing favorite product: {e}")

    async def get_favorite_products(self) -> List[str]:
        try:
            return await self._read_favorites()
        except Exception as e:
            logger.error(f"Error getting favorite products: {e}")
            return []

    async def is_favorite(self, product_id: str) -> bool:
        favorites = await self.get_favorite_products()
        return product_id in favorites


def create_storage_service(
    namespace: str = "default",
    access_token: Optional[str] = None,
) -> StorageService:
    """
    StorageService over Supabase when configured, else in memory.

    Args:
        namespace: Key partition (user or device id)
        access_token: Optional user JWT for RLS-scoped access
    """
    if settings.supabase_configured():
        client = get_supabase_client(access_token)
        store: KeyValueStore = SupabaseKeyValueStore(
            client, table=settings.KV_STORE_TABLE, namespace=namespace
        )
        logger.info(f"Storage service using Supabase table '{settings.KV_STORE_TABLE}'")
    else:
        store = InMemoryKeyValueStore()
        logger.info("Supabase not configured; storage service is in-memory only")
    return StorageService(store)
