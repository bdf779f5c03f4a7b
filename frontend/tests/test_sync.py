"""
VisitorBook Frontend: Sync Layer Tests
========================================

What we test:
    ✅ QueryCache get/set/update/invalidate and change notifications
    ✅ Superseded fetch results are discarded
    ✅ A completed fetch overwrites an earlier local patch (convergence)
    ✅ Mutation patches: OVERWRITE and PREPEND, nothing on failure
    ✅ Hooks bind the right endpoints to the right keys
"""

import asyncio
from datetime import datetime, timezone

import pytest

from visitorbook.exceptions import TransportError
from visitorbook.hooks import (
    use_create_message,
    use_increment_visitor_count,
    use_messages,
    use_visitor_count,
)
from visitorbook.schemas import Message, MessageFormData, VisitorCount
from visitorbook.sync import (
    CachePatch,
    Mutation,
    PatchMode,
    Query,
    QueryKey,
    QueryStatus,
)


def _message(id_: int, name: str = "guest") -> Message:
    return Message(id=id_, name=name, content="hi", timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))


class TestQueryCache:

    def test_missing_key_is_idle(self, cache):
        assert cache.get(QueryKey.MESSAGES) is None
        assert cache.get_state(QueryKey.MESSAGES).status is QueryStatus.IDLE

    def test_set_and_get(self, cache):
        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=3))

        state = cache.get_state("visitorCount")
        assert state.status is QueryStatus.SUCCESS
        assert state.data == VisitorCount(count=3)
        assert state.updated_at is not None

    def test_update_uses_default_when_absent(self, cache):
        cache.update(QueryKey.MESSAGES, lambda old: old + ["x"], default=[])
        cache.update(QueryKey.MESSAGES, lambda old: old + ["y"], default=[])

        assert cache.get(QueryKey.MESSAGES) == ["x", "y"]

    def test_invalidate_drops_entry(self, cache):
        cache.set(QueryKey.MESSAGES, [])
        cache.invalidate(QueryKey.MESSAGES)

        assert cache.get_state(QueryKey.MESSAGES).status is QueryStatus.IDLE

    def test_subscribers_are_notified(self, cache):
        changes = []
        unsubscribe = cache.subscribe(changes.append)

        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=1))
        cache.invalidate(QueryKey.VISITOR_COUNT)
        unsubscribe()
        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=2))

        assert changes == [QueryKey.VISITOR_COUNT, QueryKey.VISITOR_COUNT]

    def test_superseded_result_is_discarded(self, cache):
        first = cache.begin_fetch(QueryKey.VISITOR_COUNT)
        second = cache.begin_fetch(QueryKey.VISITOR_COUNT)

        assert cache.resolve_fetch(QueryKey.VISITOR_COUNT, second, VisitorCount(count=5))
        assert not cache.resolve_fetch(QueryKey.VISITOR_COUNT, first, VisitorCount(count=4))
        assert not cache.reject_fetch(QueryKey.VISITOR_COUNT, first, TransportError())

        assert cache.get(QueryKey.VISITOR_COUNT).count == 5

    def test_invalidate_discards_in_flight_fetch(self, cache):
        token = cache.begin_fetch(QueryKey.MESSAGES)
        cache.invalidate(QueryKey.MESSAGES)

        assert not cache.resolve_fetch(QueryKey.MESSAGES, token, [])
        assert cache.get(QueryKey.MESSAGES) is None


class TestQuery:

    @pytest.mark.asyncio
    async def test_loading_then_success(self, cache):
        seen = []

        async def fetcher():
            seen.append(cache.get_state(QueryKey.VISITOR_COUNT).status)
            return VisitorCount(count=9)

        query = Query(cache, QueryKey.VISITOR_COUNT, fetcher)
        result = await query.fetch()

        assert seen == [QueryStatus.LOADING]
        assert result.count == 9
        assert query.data.count == 9
        assert not query.state.is_fetching

    @pytest.mark.asyncio
    async def test_failure_is_stored_not_raised(self, cache):
        async def fetcher():
            raise TransportError("down", status_code=500)

        query = Query(cache, QueryKey.MESSAGES, fetcher)

        assert await query.fetch() is None
        assert query.state.is_error
        assert query.error.status_code == 500

    @pytest.mark.asyncio
    async def test_slow_older_fetch_does_not_win(self, cache):
        release_slow = asyncio.Event()
        responses = iter([("slow", 1), ("fast", 2)])

        async def fetcher():
            kind, count = next(responses)
            if kind == "slow":
                await release_slow.wait()
            return VisitorCount(count=count)

        query = Query(cache, QueryKey.VISITOR_COUNT, fetcher)
        slow = asyncio.create_task(query.fetch())
        await asyncio.sleep(0)
        await query.fetch()
        release_slow.set()
        await slow

        assert query.data.count == 2

    @pytest.mark.asyncio
    async def test_fetch_overwrites_local_patch(self, cache):
        """A refetch racing a mutation patch converges to the server snapshot."""
        release = asyncio.Event()
        server_snapshot = [_message(2, "M2"), _message(1, "M1")]

        async def fetcher():
            await release.wait()
            return server_snapshot

        query = Query(cache, QueryKey.MESSAGES, fetcher)
        task = asyncio.create_task(query.fetch())
        await asyncio.sleep(0)

        CachePatch(QueryKey.MESSAGES, PatchMode.PREPEND).apply(cache, _message(2, "M2"))
        assert [m.id for m in cache.get(QueryKey.MESSAGES)] == [2]

        release.set()
        await task

        assert [m.id for m in cache.get(QueryKey.MESSAGES)] == [2, 1]


class TestMutation:

    @pytest.mark.asyncio
    async def test_pending_flag(self, cache):
        observed = []

        async def call():
            observed.append(mutation.is_pending)
            return VisitorCount(count=1)

        mutation = Mutation(cache, call)
        await mutation.mutate()

        assert observed == [True]
        assert not mutation.is_pending

    @pytest.mark.asyncio
    async def test_failure_applies_no_patch(self, cache):
        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=4))

        async def call():
            raise TransportError("boom", status_code=500)

        mutation = Mutation(cache, call, [CachePatch(QueryKey.VISITOR_COUNT, PatchMode.OVERWRITE)])

        with pytest.raises(TransportError):
            await mutation.mutate()

        assert cache.get(QueryKey.VISITOR_COUNT).count == 4
        assert mutation.error is not None
        assert not mutation.is_pending


class TestHooks:

    @pytest.mark.asyncio
    async def test_queries_fill_their_keys(self, api_client, cache, fake_backend):
        fake_backend.count = 2
        fake_backend.add_message("M1", "hello")

        await use_visitor_count(api_client, cache).fetch()
        await use_messages(api_client, cache).fetch()

        assert cache.get("visitorCount") == VisitorCount(count=2)
        assert [m.name for m in cache.get("messages")] == ["M1"]

    @pytest.mark.asyncio
    async def test_increment_overwrites_count(self, api_client, cache, fake_backend):
        fake_backend.count = 41
        cache.set(QueryKey.VISITOR_COUNT, VisitorCount(count=10))

        await use_increment_visitor_count(api_client, cache).mutate()

        assert cache.get(QueryKey.VISITOR_COUNT).count == 42

    @pytest.mark.asyncio
    async def test_create_prepends_without_refetch(self, api_client, cache, fake_backend):
        fake_backend.add_message("M1", "first")
        await use_messages(api_client, cache).fetch()

        created = await use_create_message(api_client, cache).mutate(
            MessageFormData(name="Alice", content="Hi")
        )

        cached = cache.get(QueryKey.MESSAGES)
        assert cached[0] == created
        assert [m.name for m in cached] == ["Alice", "M1"]
        assert fake_backend.requests.count(("GET", "/api/messages")) == 1

    @pytest.mark.asyncio
    async def test_create_on_empty_cache(self, api_client, cache):
        created = await use_create_message(api_client, cache).mutate(
            MessageFormData(name="Alice", content="Hi")
        )

        assert cache.get(QueryKey.MESSAGES) == [created]
