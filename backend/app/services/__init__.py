# Services package init
"""
VisitorBook Backend: Services Layer
=====================================

What:  Business logic between routes (HTTP) and the store (persistence).
How:   Services receive an AsyncSession per call, apply validation, run the
       query, and translate persistence failures into StoreError.

Service Inventory:
    - VisitorService: read / atomically increment the visitor counter
    - MessageService: create a message / list the most recent messages
"""
