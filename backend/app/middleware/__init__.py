# Middleware package init
"""
VisitorBook Backend: Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    The request ID is assigned first so the access log line and every
    handler log line of the same request share it.
"""
