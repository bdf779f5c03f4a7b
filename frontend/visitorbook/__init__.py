"""
VisitorBook Frontend: Client Package
======================================

What:  The client side of VisitorBook: a typed API client, a query cache
       kept in sync with the backend, and the page components.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Components (form, list, badge)  │  ← What the visitor sees
    ├─────────────────────────────────────┤
    │     Hooks (queries & mutations)     │  ← Cache keys and patch rules
    ├─────────────────────────────────────┤
    │     Sync (QueryCache)               │  ← Transient copy of server state
    ├─────────────────────────────────────┤
    │     API client (httpx)              │  ← One method per endpoint
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
