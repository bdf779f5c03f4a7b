"""
VisitorBook Backend: Message SQLAlchemy Model
===============================================

What:  ORM model representing the `messages` table.
Who:   Used by MessageService for inserts and the newest-first listing.

Table Design:
    - Integer autoincrement primary key assigned by the store
    - name: VARCHAR(100), matches the API's length bound
    - content: TEXT, no length limit
    - timestamp: UTC with timezone, set once at insert and never updated

    Index on timestamp DESC serves the only read query:
        SELECT ... ORDER BY timestamp DESC, id DESC LIMIT 100
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# Column bound for Message.name; also enforced by MessageService
NAME_MAX_LENGTH = 100


class Message(Base):
    """
    A guest message left in the visitor book.

    Lifecycle:
        Created by POST /api/messages; never mutated or deleted.
    """

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned, monotonically increasing identifier",
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        comment="Display name of the guest",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Message body",
    )

    # Stored in UTC; conversion to local time happens in the client
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the message was created (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, name='{self.name}', timestamp='{self.timestamp}')>"


# Serves the newest-first listing query
Index("idx_messages_timestamp", Message.timestamp.desc())
