"""
VisitorBook Frontend: Data Hooks
==================================

What:  The four data bindings the components use, each tying an API call
       to its cache key and patch rule.

    use_visitor_count()            Query    "visitorCount" ← GET /api/visitors
    use_messages()                 Query    "messages"     ← GET /api/messages
    use_increment_visitor_count()  Mutation POST /api/visitors → overwrite "visitorCount"
    use_create_message()           Mutation POST /api/messages → prepend to "messages"
"""

from typing import List

from visitorbook.api.client import ApiClient
from visitorbook.schemas import Message, VisitorCount
from visitorbook.sync import CachePatch, Mutation, PatchMode, Query, QueryCache, QueryKey


def use_visitor_count(client: ApiClient, cache: QueryCache) -> Query[VisitorCount]:
    return Query(cache, QueryKey.VISITOR_COUNT, client.get_visitor_count)


def use_messages(client: ApiClient, cache: QueryCache) -> Query[List[Message]]:
    return Query(cache, QueryKey.MESSAGES, client.list_messages)


def use_increment_visitor_count(client: ApiClient, cache: QueryCache) -> Mutation[VisitorCount]:
    return Mutation(
        cache,
        client.increment_visitor_count,
        [CachePatch(QueryKey.VISITOR_COUNT, PatchMode.OVERWRITE)],
    )


def use_create_message(client: ApiClient, cache: QueryCache) -> Mutation[Message]:
    # Local insert instead of a refetch; the next GET /api/messages reconciles
    return Mutation(
        cache,
        client.create_message,
        [CachePatch(QueryKey.MESSAGES, PatchMode.PREPEND)],
    )
