"""
VisitorBook Backend: Message Schemas
======================================

What:  Request and response contracts for /api/messages.
How:   FastAPI validates request bodies against these models and serializes
       responses through them.

Design Decision:
    MessageCreate accepts absent fields (None) instead of declaring them
    required, so a missing `name` or `content` reaches MessageService and is
    reported as a 400 validation_error with a descriptive message rather than
    FastAPI's generic 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    """
    Body of POST /api/messages.

    Example:
        {"name": "Alice", "content": "Hi"}
    """
    name: Optional[str] = Field(default=None, description="Guest display name (max 100 chars)")
    content: Optional[str] = Field(default=None, description="Message body")


class MessageResponse(BaseModel):
    """
    A stored message, as returned by both message endpoints.

    Example:
        {"id": 7, "name": "Alice", "content": "Hi", "timestamp": "2024-01-15T12:00:00Z"}
    """
    id: int = Field(description="Store-assigned message identifier")
    name: str = Field(description="Guest display name")
    content: str = Field(description="Message body")
    timestamp: datetime = Field(description="Creation time (UTC ISO 8601)")

    model_config = {"from_attributes": True}
