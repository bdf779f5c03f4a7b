"""
VisitorBook Frontend: Application Shell
=========================================

What:  Composes the API client, the query cache, the four hooks and the
       page components into one page.
How:   load() runs both queries concurrently; render() draws the header,
       the visitor badge, the form and the list from whatever the cache
       holds at that moment. Subscribers registered with on_change() are
       called after every cache change so they can re-render.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from visitorbook.api.client import ApiClient
from visitorbook.components import MessageForm, MessageList, VisitorCountBadge
from visitorbook.hooks import (
    use_create_message,
    use_increment_visitor_count,
    use_messages,
    use_visitor_count,
)
from visitorbook.sync import QueryCache

logger = logging.getLogger(__name__)


class VisitorBookApp:
    """
    The VisitorBook page.

    Usage:
        async with ApiClient(settings.api_url) as client:
            page = VisitorBookApp(client, notify=print)
            await page.load()
            print(page.render())
    """

    title = "VisitorBook Cloud Edition"
    subtitle = "A DevOps journey from frontend to cloud deployment"

    def __init__(
        self,
        client: ApiClient,
        cache: Optional[QueryCache] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else QueryCache()
        self.notices: List[str] = []
        self._notify_hook = notify

        self.visitor_count = use_visitor_count(client, self.cache)
        self.messages = use_messages(client, self.cache)
        self.increment_visitor_count = use_increment_visitor_count(client, self.cache)
        self.create_message = use_create_message(client, self.cache)

        self.badge = VisitorCountBadge(self.visitor_count)
        self.form = MessageForm(
            self.increment_visitor_count,
            self.create_message,
            notify=self.notify,
        )
        self.message_list = MessageList(self.messages)

    def notify(self, text: str) -> None:
        """Blocking notice to the visitor; recorded and forwarded to the hook."""
        logger.info("Notice: %s", text)
        self.notices.append(text)
        if self._notify_hook is not None:
            self._notify_hook(text)

    def on_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Run `callback(key)` after each cache change; returns an unsubscribe function."""
        return self.cache.subscribe(callback)

    async def load(self) -> None:
        """Fetch the visitor count and the messages concurrently."""
        await asyncio.gather(self.visitor_count.fetch(), self.messages.fetch())

    def render(self) -> str:
        return "\n\n".join([
            f"{self.title}\n{self.subtitle}\n{self.badge.render()}",
            self.form.render(),
            self.message_list.render(),
        ])
