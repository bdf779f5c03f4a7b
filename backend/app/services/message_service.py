"""
VisitorBook Backend: Message Service
======================================

What:  Creates guest messages and lists the most recent ones.
Who:   Called by the /api/messages route handlers.

Validation:
    The service checks presence only: `name` and `content` must be present
    and non-empty. Whitespace trimming is the client's job, so "  " is
    accepted here. `name` is additionally bounded by the column length.

Ordering:
    ListMessages returns at most `limit` rows ordered by timestamp DESC,
    ties broken by id DESC, so messages created within the same clock tick
    still come back newest first.
"""

import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_store_error
from app.exceptions import ValidationError
from app.models import Message
from app.models.message import NAME_MAX_LENGTH
from app.schemas.message import MessageResponse

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


class MessageService:
    """
    Business logic for guest messages.

    Responsibilities:
        - create_message(): presence validation + insert
        - list_messages(): newest-first listing capped at `limit`
    """

    def _validate(self, name: Optional[str], content: Optional[str]) -> None:
        missing = [
            field for field, value in (("name", name), ("content", content))
            if not value
        ]
        if missing:
            raise ValidationError(
                message="Name and content are required",
                field=missing[0],
                context={"missing": missing},
            )
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(
                message=f"Name must be at most {NAME_MAX_LENGTH} characters",
                field="name",
                context={"max_length": NAME_MAX_LENGTH},
            )

    async def create_message(
        self,
        db: AsyncSession,
        name: Optional[str],
        content: Optional[str],
    ) -> MessageResponse:
        """
        Persist a new message and return it with its assigned id and timestamp.

        Args:
            db: Async database session
            name: Guest display name (required, non-empty)
            content: Message body (required, non-empty)

        Raises:
            ValidationError: Missing/empty field or name too long (→ 400)
            StoreUnavailable: The store cannot be reached (→ 500)
            StoreError: Insert failed (→ 500)
        """
        self._validate(name, content)

        message = Message(name=name, content=content)
        try:
            db.add(message)
            await db.flush()  # Assigns the id
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error creating message: %s", str(e))
            raise translate_store_error(e, "Failed to create message")

        logger.info("Message %s created", message.id)
        return MessageResponse.model_validate(message)

    async def list_messages(
        self,
        db: AsyncSession,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[MessageResponse]:
        """
        Return up to `limit` messages, newest first.

        Query plan:
            SELECT * FROM messages ORDER BY timestamp DESC, id DESC LIMIT :limit
            → idx_messages_timestamp

        Raises:
            StoreUnavailable: The store cannot be reached (→ 500)
            StoreError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Message)
                .order_by(desc(Message.timestamp), desc(Message.id))
                .limit(limit)
            )
            messages = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error fetching messages: %s", str(e), exc_info=True)
            raise translate_store_error(e, "Failed to fetch messages")

        return [MessageResponse.model_validate(message) for message in messages]


# ── Singleton Instance ────────────────────────────────────────────────────
message_service = MessageService()
