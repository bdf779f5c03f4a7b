"""
VisitorBook Frontend: API Schemas
==================================

Pydantic mirrors of the backend's JSON contracts.
"""

from datetime import datetime

from pydantic import BaseModel


class Message(BaseModel):
    id: int
    name: str
    content: str
    timestamp: datetime


class VisitorCount(BaseModel):
    count: int


class MessageFormData(BaseModel):
    """Body of POST /api/messages."""
    name: str
    content: str
