"""Read-through profile cache with stale-while-revalidate refresh.

A cached profile is returned immediately while a background thread fetches
a fresh copy (for example to pick up an approval status change). A miss
fetches synchronously.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from utils.exceptions import ProfileCacheError

Fetcher = Callable[[str], Optional[Any]]

_FAILED = object()


class ProfileCache:
    """Thread-safe in-memory cache of user profiles keyed by user id.

    Attributes:
        _entries: Cached profiles
        _lock: Guards every other attribute
        _refreshing: Background refresh threads still running, by user id
        _versions: Per-user write counter, bumped by ``put`` and ``invalidate``
        _epoch: Bumped when the whole cache is invalidated

    A background refresh only stores its result if no write or
    invalidation touched the user since the refresh started.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._refreshing: Dict[str, threading.Thread] = {}
        self._versions: Dict[str, int] = {}
        self._epoch = 0

    def _stamp(self, user_id: str) -> Tuple[int, int]:
        return self._epoch, self._versions.get(user_id, 0)

    def _bump(self, user_id: str) -> None:
        self._versions[user_id] = self._versions.get(user_id, 0) + 1

    def get(self, user_id: str) -> Optional[Any]:
        """Cached profile for ``user_id``, or None."""
        with self._lock:
            return self._entries.get(user_id)

    def put(self, user_id: str, profile: Any) -> None:
        """Store ``profile`` for ``user_id``."""
        with self._lock:
            self._entries[user_id] = profile
            self._bump(user_id)

    def invalidate(self, user_id: Optional[str] = None) -> None:
        """Drop one user's profile, or every profile when ``user_id`` is None."""
        with self._lock:
            if user_id is None:
                self._entries.clear()
                self._epoch += 1
            else:
                self._entries.pop(user_id, None)
                self._bump(user_id)
        logger.debug(f"Profile cache invalidated ({user_id or 'all'})")

    def __contains__(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def resolve(self, user_id: str, fetcher: Fetcher) -> Optional[Any]:
        """
        Return the profile for ``user_id``.

        Cache hit: return the cached value and refresh it in the background.
        Cache miss: call ``fetcher`` synchronously and cache a non-None result.

        Raises:
            ProfileCacheError: If the synchronous fetch fails
        """
        cached = self.get(user_id)
        if cached is not None:
            self._refresh_in_background(user_id, fetcher)
            return cached

        try:
            profile = fetcher(user_id)
        except Exception as e:
            logger.error(f"Profile fetch failed for {user_id}: {e}")
            raise ProfileCacheError(f"Could not resolve profile for {user_id}: {e}") from e

        if profile is not None:
            self.put(user_id, profile)
        return profile

    def _refresh_in_background(self, user_id: str, fetcher: Fetcher) -> None:
        with self._lock:
            if user_id in self._refreshing:
                return
            thread = threading.Thread(
                target=self._refresh,
                args=(user_id, fetcher, self._stamp(user_id)),
                name=f"profile-refresh-{user_id}",
                daemon=True,
            )
            self._refreshing[user_id] = thread
        thread.start()

    def _refresh(self, user_id: str, fetcher: Fetcher, stamp: Tuple[int, int]) -> None:
        try:
            profile = fetcher(user_id)
        except Exception as e:
            # The stale copy stays in place; the next resolve retries.
            logger.warning(f"Background profile refresh failed for {user_id}: {e}")
            profile = _FAILED

        with self._lock:
            self._refreshing.pop(user_id, None)
            if profile is _FAILED:
                return
            if self._stamp(user_id) != stamp:
                logger.debug(f"Discarding refresh for {user_id}: entry changed while fetching")
                return
            if profile is None:
                self._entries.pop(user_id, None)
            else:
                self._entries[user_id] = profile
            self._bump(user_id)

    def wait_for_refresh(self, timeout: Optional[float] = None) -> None:
        """Block until running background refreshes finish."""
        with self._lock:
            threads: List[threading.Thread] = list(self._refreshing.values())
        for thread in threads:
            thread.join(timeout)
