# Sync package init
"""
VisitorBook Frontend: Data-Synchronization Layer
==================================================

QueryCache holds the client's copy of server state; Query fills it,
Mutation patches it.
"""

from visitorbook.sync.cache import QueryCache, QueryKey, QueryState, QueryStatus
from visitorbook.sync.query import CachePatch, Mutation, PatchMode, Query

__all__ = [
    "CachePatch",
    "Mutation",
    "PatchMode",
    "Query",
    "QueryCache",
    "QueryKey",
    "QueryState",
    "QueryStatus",
]
