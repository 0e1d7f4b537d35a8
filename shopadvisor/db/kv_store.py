"""
Async key-value stores for UI persistence.

Interface: get_item / set_item / remove_item over string keys and string
values (callers store JSON). Two implementations:

- InMemoryKeyValueStore: process-local dict, for tests and guest sessions
- SupabaseKeyValueStore: rows in a Supabase table with columns
  (namespace, key, value), unique on (namespace, key)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, cast

from supabase import Client

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class SupabaseKeyValueStore:
    """
    Store backed by a Supabase table.

    The sync Supabase client blocks on every request, so each
    .execute() runs in a worker thread to keep the event loop free.

    Args:
        supabase_client: Client from shopadvisor.db.client.get_supabase_client
        table: Table name (settings.KV_STORE_TABLE)
        namespace: Partition for keys, typically a user or device id
    """

    def __init__(self, supabase_client: Client, table: str = "kv_store", namespace: str = "default"):
        self._client = supabase_client
        self._table = table
        self._namespace = namespace

    async def get_item(self, key: str) -> Optional[str]:
        logger.debug(f"Reading key '{key}' from {self._table} (namespace={self._namespace})")

        query = (
            self._client.table(self._table)
            .select("value")
            .eq("namespace", self._namespace)
            .eq("key", key)
        )
        result = await asyncio.to_thread(query.execute)

        rows: List[Dict[str, Any]] = cast(List[Dict[str, Any]], result.data or [])
        if not rows:
            return None
        value = rows[0].get("value")
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        logger.debug(f"Writing key '{key}' to {self._table} (namespace={self._namespace})")

        query = self._client.table(self._table).upsert(
            {"namespace": self._namespace, "key": key, "value": value},
            on_conflict="namespace,key",
        )
        await asyncio.to_thread(query.execute)

    async def remove_item(self, key: str) -> None:
        logger.debug(f"Removing key '{key}' from {self._table} (namespace={self._namespace})")

        query = (
            self._client.table(self._table)
            .delete()
            .eq("namespace", self._namespace)
            .eq("key", key)
        )
        await asyncio.to_thread(query.execute)
