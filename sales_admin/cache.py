# sales_admin/cache.py
"""
Query cache registry

Pages cache their loaders with `st.cache_data` and register each loader's
`.clear` under a query key. Mutations invalidate exactly the keys whose data
they change, which triggers a fresh read on the next rerun.

Usage:
    @st.cache_data(ttl=CACHE_TTL_SECONDS)
    def load_signups():
        ...

    query_cache.register(SIGNUPS_QUERY, "signup_management.load_signups", load_signups.clear)
    ...
    query_cache.invalidate(SIGNUPS_QUERY)
"""

import logging
import threading
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

# Query keys
SIGNUPS_QUERY = 'admin-signups'
TEAM_LEADERS_QUERY = 'team-leaders-full'
DISTRIBUTION_EXECUTIVES_QUERY = 'distribution-executives'
DASHBOARD_QUERY = 'general-dashboard'


class QueryCache:
    """Maps query keys to the clear callbacks of cached loaders."""

    def __init__(self):
        self._clearers: Dict[str, Dict[str, Callable[[], None]]] = {}
        self._lock = threading.Lock()

    def register(self, key: str, name: str, clear: Callable[[], None]):
        """
        Register a clear callback under a stable name. Re-registering the
        same name replaces the previous callback, so Streamlit reruns
        don't pile up entries.
        """
        with self._lock:
            self._clearers.setdefault(key, {})[name] = clear

    def invalidate(self, key: str) -> int:
        """Clear every loader registered under `key`. Returns how many ran."""
        with self._lock:
            clearers = list(self._clearers.get(key, {}).values())

        for clear in clearers:
            clear()

        logger.info(f"🔄 Invalidated '{key}' ({len(clearers)} loader(s))")
        return len(clearers)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._clearers)


query_cache = QueryCache()

__all__ = [
    'QueryCache',
    'query_cache',
    'SIGNUPS_QUERY',
    'TEAM_LEADERS_QUERY',
    'DISTRIBUTION_EXECUTIVES_QUERY',
    'DASHBOARD_QUERY',
]
