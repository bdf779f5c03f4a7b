"""
VisitorBook Frontend: Visitor Count Badge
"""

from visitorbook.schemas import VisitorCount
from visitorbook.sync import Query


class VisitorCountBadge:
    """Shows the cached visitor count, 0 until the first value arrives."""

    def __init__(self, query: Query[VisitorCount]):
        self._query = query

    @property
    def count(self) -> int:
        data = self._query.data
        return data.count if data is not None else 0

    def render(self) -> str:
        return f"Visitor Count: {self.count}"
