"""
Supabase client factory.

Used only by the persistent key-value store behind search history and
favorites. The recommendation client never talks to Supabase.
"""

import logging
from typing import Optional

from shopadvisor.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: Optional[str] = None) -> Client:
    """
    Create a Supabase client for the key-value store.

    Args:
        access_token: Optional user JWT. When given, it is set on the
                      session so Row Level Security scopes kv_store rows
                      to that user.

    Returns:
        A Supabase client using the publishable key.

    Raises:
        ValueError: if SUPABASE_URL or SUPABASE_PUBLISHABLE_KEY is missing
    """
    if not settings.supabase_configured():
        raise ValueError(
            "Supabase is not configured. Set SUPABASE_URL and "
            "SUPABASE_PUBLISHABLE_KEY, or use InMemoryKeyValueStore."
        )

    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    if access_token:
        client.auth.set_session(access_token, access_token)
        logger.debug("Created Supabase client with user token (RLS enforced)")
    else:
        logger.debug("Created Supabase client with publishable key")

    return client
