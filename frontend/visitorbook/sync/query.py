"""
VisitorBook Frontend: Queries and Mutations
=============================================

What:  The two primitives the hooks are built from.

    Query     reads one logical resource into the cache.
    Mutation  calls the API and, on success, applies the cache patches it
              declares (OVERWRITE the entry, or PREPEND to a cached list).

Failure Handling:
    A failed query is stored on its cache entry (status ERROR) so the
    component can render an inline error. A failed mutation raises to the
    caller and leaves the cache untouched. Nothing is retried.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from visitorbook.exceptions import VisitorBookClientError
from visitorbook.sync.cache import QueryCache, QueryState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PatchMode(str, Enum):
    OVERWRITE = "overwrite"
    PREPEND = "prepend"


@dataclass(frozen=True)
class CachePatch:
    """How a mutation's response is written into one cache entry."""
    key: str
    mode: PatchMode

    def apply(self, cache: QueryCache, result: Any) -> None:
        if self.mode is PatchMode.OVERWRITE:
            cache.set(self.key, result)
        else:
            # The new item is the most recent one, so newest-first order holds
            cache.update(self.key, lambda old: [result, *old], default=[])


class Query(Generic[T]):
    """A cache-backed read of one logical resource."""

    def __init__(
        self,
        cache: QueryCache,
        key: str,
        fetcher: Callable[[], Awaitable[T]],
    ):
        self.cache = cache
        self.key = key
        self._fetcher = fetcher

    @property
    def state(self) -> QueryState:
        return self.cache.get_state(self.key)

    @property
    def data(self) -> Optional[T]:
        return self.state.data

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> Optional[BaseException]:
        return self.state.error

    async def fetch(self) -> Optional[T]:
        """
        Fetch the resource and store the result (or the error) in the cache.

        Returns:
            The fetched data, or None when the fetch failed. A result that was
            superseded by a newer fetch is still returned but not cached.
        """
        token = self.cache.begin_fetch(self.key)
        try:
            data = await self._fetcher()
        except VisitorBookClientError as e:
            logger.warning("Query %s failed: %s", self.key, e.message)
            self.cache.reject_fetch(self.key, token, e)
            return None
        self.cache.resolve_fetch(self.key, token, data)
        return data


class Mutation(Generic[T]):
    """
    A server write whose response patches the cache.

    Usage:
        mutation = Mutation(cache, client.increment_visitor_count,
                            [CachePatch("visitorCount", PatchMode.OVERWRITE)])
        await mutation.mutate()
    """

    def __init__(
        self,
        cache: QueryCache,
        mutate_fn: Callable[..., Awaitable[T]],
        patches: Sequence[CachePatch] = (),
    ):
        self.cache = cache
        self.patches = tuple(patches)
        self._mutate_fn = mutate_fn
        self._in_flight = 0
        self.error: Optional[BaseException] = None

    @property
    def is_pending(self) -> bool:
        return self._in_flight > 0

    async def mutate(self, *args: Any) -> T:
        """
        Run the mutation and apply the declared patches.

        Raises:
            TransportError: the call failed; no patch is applied
        """
        self._in_flight += 1
        try:
            result = await self._mutate_fn(*args)
        except VisitorBookClientError as e:
            self.error = e
            raise
        finally:
            self._in_flight -= 1

        self.error = None
        for patch in self.patches:
            patch.apply(self.cache, result)
        return result
