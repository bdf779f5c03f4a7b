"""
VisitorBook Frontend: Query Cache
===================================

What:  Client-side, best-effort copy of server state, keyed by logical
       resource name ("visitorCount", "messages").
How:   Each key maps to an immutable QueryState snapshot. Writers replace
       the snapshot and notify subscribers, which re-render.

Consistency:
    The cache is eventually consistent with the store. Mutations patch
    entries from their responses; the next completed fetch overwrites the
    entry with a fresh snapshot. Fetches are numbered per key and only the
    most recently started fetch may write its result, so a superseded
    request never overwrites a newer one.
"""

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class QueryKey(str, Enum):
    """Logical resources the client caches."""
    VISITOR_COUNT = "visitorCount"
    MESSAGES = "messages"


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryState:
    """
    Snapshot of one cache entry.

    `is_fetching` is True while a fetch is in flight, even when the entry
    still shows earlier data (status SUCCESS) during a refetch.
    """
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[BaseException] = None
    updated_at: Optional[float] = None
    is_fetching: bool = False

    @property
    def is_loading(self) -> bool:
        """First load: fetching with nothing to show yet."""
        return self.status is QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR


Listener = Callable[[str], None]


class QueryCache:
    """
    Typed key-value cache with explicit get/set/update/invalidate.

    Usage:
        cache = QueryCache()
        unsubscribe = cache.subscribe(lambda key: print("changed", key))
        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=3))
        cache.update(QueryKey.MESSAGES, lambda old: [new, *old], default=[])
    """

    def __init__(self):
        self._entries: Dict[str, QueryState] = {}
        self._listeners: List[Listener] = []
        self._fetch_seq: Dict[str, int] = {}

    # ── Reads ─────────────────────────────────────────────────────────────

    def get(self, key: str) -> Any:
        """Cached data for `key`, or None."""
        return self.get_state(key).data

    def get_state(self, key: str) -> QueryState:
        return self._entries.get(key, QueryState())

    # ── Writes ────────────────────────────────────────────────────────────

    def set(self, key: str, value: Any) -> None:
        """Overwrite the entry with `value` (status SUCCESS)."""
        current = self.get_state(key)
        self._write(key, replace(
            current,
            status=QueryStatus.SUCCESS,
            data=value,
            error=None,
            updated_at=time.time(),
        ))

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> None:
        """Replace the entry with fn(current data), using `default` when absent."""
        current = self.get(key)
        self.set(key, fn(default if current is None else current))

    def invalidate(self, key: str) -> None:
        """
        Drop the entry. The next reader sees IDLE with no data and a
        subsequent fetch starts from scratch. In-flight fetches are discarded.
        """
        self._fetch_seq[key] = self._fetch_seq.get(key, 0) + 1
        if self._entries.pop(key, None) is not None:
            self._notify(key)

    # ── Fetch coordination (used by Query) ────────────────────────────────

    def begin_fetch(self, key: str) -> int:
        """Mark `key` as fetching; returns the token the result must present."""
        token = self._fetch_seq.get(key, 0) + 1
        self._fetch_seq[key] = token
        current = self.get_state(key)
        status = QueryStatus.LOADING if current.data is None else current.status
        self._write(key, replace(current, status=status, is_fetching=True))
        return token

    def resolve_fetch(self, key: str, token: int, data: Any) -> bool:
        """Store a fetch result unless a newer fetch has started since."""
        if not self._is_current(key, token):
            logger.debug("Discarding superseded fetch result for %s", key)
            return False
        self._write(key, QueryState(
            status=QueryStatus.SUCCESS,
            data=data,
            updated_at=time.time(),
        ))
        return True

    def reject_fetch(self, key: str, token: int, error: BaseException) -> bool:
        """Record a fetch failure (previous data is kept) unless superseded."""
        if not self._is_current(key, token):
            logger.debug("Discarding superseded fetch error for %s", key)
            return False
        current = self.get_state(key)
        self._write(key, replace(
            current,
            status=QueryStatus.ERROR,
            error=error,
            is_fetching=False,
        ))
        return True

    # ── Subscriptions ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(key)` after every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Internals ─────────────────────────────────────────────────────────

    def _is_current(self, key: str, token: int) -> bool:
        return self._fetch_seq.get(key, 0) == token

    def _write(self, key: str, state: QueryState) -> None:
        self._entries[key] = state
        self._notify(key)

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)
