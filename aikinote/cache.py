"""Short-lived cache for read queries, shared by the services of one session."""
from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable, Dict, Iterable, Tuple

from aikinote.result import Ok, Result

# seconds
TTL_PAGES_LIST = 5.0
TTL_PAGE_DETAIL = 5.0
TTL_TAGS_LIST = 8.0
TTL_USER_PROFILE = 8.0

SCOPE_PAGES_LIST = "pages:getList"
SCOPE_PAGE_DETAIL = "pages:getById"
SCOPE_TAGS_LIST = "tags:getList"
SCOPE_USER_PROFILE = "users:getProfile"


def cache_key(scope: str, params: Any) -> str:
    return f"{scope}:{json.dumps(params, sort_keys=True, ensure_ascii=False, default=str)}"


class QueryCache:
    """TTL cache of successful results keyed by ``scope:params``.

    Only :class:`~aikinote.result.Ok` results are stored, so a failed query is
    retried on the next call.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Result[Any]]] = {}
        self._lock = threading.Lock()

    def get_or_load(
        self,
        scope: str,
        params: Any,
        ttl: float,
        loader: Callable[[], Result[Any]],
    ) -> Result[Any]:
        key = cache_key(scope, params)
        now = self._clock()
        with self._lock:
            expired = [name for name, (expires, _) in self._entries.items() if expires <= now]
            for name in expired:
                del self._entries[name]
            entry = self._entries.get(key)
            if entry:
                return entry[1]

        result = loader()
        if isinstance(result, Ok):
            with self._lock:
                self._entries[key] = (now + ttl, result)
        return result

    def invalidate(self, prefixes: Iterable[str]) -> int:
        """Drop every entry whose key starts with one of ``prefixes``."""
        prefixes = tuple(prefixes)
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefixes)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "QueryCache",
    "SCOPE_PAGES_LIST",
    "SCOPE_PAGE_DETAIL",
    "SCOPE_TAGS_LIST",
    "SCOPE_USER_PROFILE",
    "TTL_PAGES_LIST",
    "TTL_PAGE_DETAIL",
    "TTL_TAGS_LIST",
    "TTL_USER_PROFILE",
    "cache_key",
]
