"""
Storage key constants for the key-value store collaborator.

These keys name the JSON documents the storage service keeps per
namespace. Changing them orphans previously saved history and favorites.
"""

STORAGE_KEYS = {
    # Newest-first list of SearchHistoryEntry documents
    'SEARCH_HISTORY': 'search_history',

    # List of favorited product identifiers
    'FAVORITES': 'favorite_products',
}

# Maximum number of search history entries kept
SEARCH_HISTORY_LIMIT = 20

# Upper bound on recommendations returned from the remote path
MAX_RECOMMENDATIONS = 5
