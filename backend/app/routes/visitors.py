"""
VisitorBook Backend: Visitor Counter Route Handlers
=====================================================

What:  GET /api/visitors (read) and POST /api/visitors (increment).
Who:   Called by the frontend visitor-count query and increment mutation.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.visitor import VisitorCountResponse
from app.services.visitor_service import visitor_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Visitors"])


@router.get(
    "/visitors",
    response_model=VisitorCountResponse,
    responses={
        200: {"description": "Current visitor count", "model": VisitorCountResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get the current visitor count",
)
async def get_visitor_count(
    db: AsyncSession = Depends(get_db_session),
) -> VisitorCountResponse:
    """Returns the current visitor count without changing it."""
    return await visitor_service.get_count(db)


@router.post(
    "/visitors",
    response_model=VisitorCountResponse,
    responses={
        200: {"description": "Visitor count after the increment", "model": VisitorCountResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Record a visit",
    description="Atomically increments the visitor counter and returns the new value.",
)
async def increment_visitor_count(
    db: AsyncSession = Depends(get_db_session),
) -> VisitorCountResponse:
    """
    Increment the visitor count by one.

    Not idempotent: every call records one more visit.
    """
    return await visitor_service.increment(db)
