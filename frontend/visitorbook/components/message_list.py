"""
VisitorBook Frontend: Message List
====================================

What:  Renders the cached messages query in exactly one of three states:
       loading, error, or the collection (with an empty-state line).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List

from visitorbook.schemas import Message
from visitorbook.sync import Query

LOADING_TEXT = "Loading messages..."
ERROR_TEXT = "Error loading messages"
EMPTY_TEXT = "No messages yet. Be the first to leave a message!"


class ListStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


def format_timestamp(timestamp: datetime) -> str:
    """Local-time display of a server timestamp (naive values are UTC)."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone().strftime("%x, %X")


def render_message(message: Message) -> str:
    return f"{message.name}  ({format_timestamp(message.timestamp)})\n    {message.content}"


class MessageList:
    """List component driven directly by the messages query state."""

    title = "Recent Messages"

    def __init__(self, query: Query[List[Message]]):
        self._query = query

    @property
    def status(self) -> ListStatus:
        state = self._query.state
        if state.is_error:
            return ListStatus.ERROR
        if state.data is None:
            # Nothing cached yet: either fetching or about to fetch
            return ListStatus.LOADING
        return ListStatus.READY

    @property
    def messages(self) -> List[Message]:
        return self._query.data or []

    def render(self) -> str:
        status = self.status
        if status is ListStatus.LOADING:
            return LOADING_TEXT
        if status is ListStatus.ERROR:
            return ERROR_TEXT

        lines = [self.title]
        if not self.messages:
            lines.append(EMPTY_TEXT)
        else:
            lines.extend(render_message(message) for message in self.messages)
        return "\n".join(lines)
