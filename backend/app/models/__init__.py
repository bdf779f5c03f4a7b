# Models package init
"""
VisitorBook Backend: ORM Models
=================================

Importing this package registers every table on `Base.metadata`.

Model Inventory:
    - Visitor: single-row visitor counter (`visitors`)
    - Message: append-only guest messages (`messages`)
"""

from app.models.message import Message
from app.models.visitor import COUNTER_ID, Visitor

__all__ = ["COUNTER_ID", "Message", "Visitor"]
