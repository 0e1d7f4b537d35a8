"""
Persistence layer for UI state (search history, favorites).

Includes:
- Supabase client factory
- Async key-value stores (in-memory and Supabase-backed)

The recommendation core itself keeps no persistent state.
"""

from .client import get_supabase_client
from .kv_store import InMemoryKeyValueStore, KeyValueStore, SupabaseKeyValueStore

__all__ = [
    "get_supabase_client",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SupabaseKeyValueStore",
]
