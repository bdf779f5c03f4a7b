"""
VisitorBook Backend: Visitor Counter Schemas
==============================================

What:  Response contract for GET/POST /api/visitors.
"""

from pydantic import BaseModel, Field


class VisitorCountResponse(BaseModel):
    """
    Current (GET) or post-increment (POST) visitor count.

    Example:
        {"count": 42}
    """
    count: int = Field(ge=0, description="Number of recorded visits")
