"""
VisitorBook Backend: Message Route Handlers
=============================================

What:  GET /api/messages (list) and POST /api/messages (create).
Who:   Called by the frontend messages query and create-message mutation.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.message import MessageCreate, MessageResponse
from app.services.message_service import message_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Messages"])


@router.get(
    "/messages",
    response_model=List[MessageResponse],
    responses={
        200: {"description": "Most recent messages, newest first"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List recent messages",
    description="Returns at most 100 messages ordered by creation time, newest first.",
)
async def list_messages(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageResponse]:
    """List the most recent messages (capped by settings.messages_limit)."""
    limit = request.app.state.settings.messages_limit
    return await message_service.list_messages(db, limit=limit)


@router.post(
    "/messages",
    status_code=201,
    response_model=MessageResponse,
    responses={
        201: {"description": "Message created", "model": MessageResponse},
        400: {"description": "Missing name or content", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Leave a message",
)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Create a message.

    Error responses (handled by global exception handlers):
        HTTP 400: name or content missing/empty (ValidationError)
        HTTP 500: store failure (StoreError)
    """
    return await message_service.create_message(
        db=db,
        name=payload.name,
        content=payload.content,
    )
