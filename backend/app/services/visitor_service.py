"""
VisitorBook Backend: Visitor Counter Service
==============================================

What:  Reads and increments the single visitor counter row.
Who:   Called by the /api/visitors route handlers.

Concurrency:
    The increment is one statement executed by the store:

        UPDATE visitors SET count = count + 1 WHERE id = 1 RETURNING count

    The store serializes concurrent updates of the same row, so N concurrent
    increments always add exactly N. There is no read-then-write in Python.

    The increment is committed before the response is built, so a failed
    commit is reported as a 500 instead of a count that was never stored.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_store_error
from app.exceptions import CounterNotInitialized
from app.models import COUNTER_ID, Visitor
from app.schemas.visitor import VisitorCountResponse

logger = logging.getLogger(__name__)


class VisitorService:
    """
    Business logic for the visitor counter.

    Error Handling Strategy:
        SQLAlchemy and connection errors are translated into StoreError /
        StoreUnavailable. A missing counter row is CounterNotInitialized.
    """

    async def get_count(self, db: AsyncSession) -> VisitorCountResponse:
        """
        Return the current visitor count.

        Raises:
            CounterNotInitialized: The counter row does not exist (→ 500)
            StoreUnavailable: The store cannot be reached (→ 500)
            StoreError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Visitor.count).where(Visitor.id == COUNTER_ID)
            )
            count = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error fetching visitor count: %s", str(e))
            raise translate_store_error(e, "Failed to fetch visitor count")

        if count is None:
            raise CounterNotInitialized(context={"counter_id": COUNTER_ID})

        return VisitorCountResponse(count=count)

    async def increment(self, db: AsyncSession) -> VisitorCountResponse:
        """
        Atomically add one visit and return the new count.

        Raises:
            CounterNotInitialized: The counter row does not exist (→ 500)
            StoreUnavailable: The store cannot be reached (→ 500)
            StoreError: Update failed (→ 500)
        """
        try:
            result = await db.execute(
                update(Visitor)
                .where(Visitor.id == COUNTER_ID)
                .values(count=Visitor.count + 1)
                .returning(Visitor.count)
            )
            count = result.scalar_one_or_none()
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error updating visitor count: %s", str(e))
            raise translate_store_error(e, "Failed to update visitor count")

        if count is None:
            raise CounterNotInitialized(context={"counter_id": COUNTER_ID})

        logger.debug("Visitor count incremented to %d", count)
        return VisitorCountResponse(count=count)


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the session is passed per call
visitor_service = VisitorService()
